import numpy as np
import pytest

from adaptive_icon.errors import DimensionMismatchError
from adaptive_icon.models.extraction_settings import ExtractionThresholds
from adaptive_icon.models.raster import RasterImage
from adaptive_icon.services.foreground_extraction_service import (
    TRANSPARENT,
    ForegroundExtractionService,
)

from conftest import solid

# (full, background, expected foreground) from previously exported icons
REFERENCE_PIXELS = [
    ((126, 220, 78, 255), (120, 132, 87, 255), (128, 250, 75, 190)),
    ((103, 106, 53, 255), (94, 107, 53, 255), (232, 92, 53, 17)),
    ((59, 96, 204, 255), (236, 19, 173, 54), (13, 116, 212, 203)),
    ((19, 223, 39, 255), (116, 231, 170, 255), (5, 222, 20, 223)),
    ((221, 54, 133, 255), (95, 106, 190, 255), (223, 53, 132, 251)),
    ((243, 207, 178, 255), (234, 208, 178, 255), (253, 206, 178, 121)),
    ((131, 207, 12, 255), (0, 221, 138, 107), (140, 206, 3, 238)),
    ((40, 35, 206, 255), (42, 232, 136, 255), (40, 23, 210, 240)),
    ((110, 22, 31, 255), (108, 156, 249, 255), (110, 17, 23, 246)),
    ((166, 41, 192, 255), (157, 42, 192, 255), (251, 32, 192, 24)),
    ((186, 87, 194, 255), (248, 25, 85, 223), (174, 99, 215, 214)),
    ((131, 103, 114, 255), (29, 1, 24, 255), (233, 205, 204, 128)),
    ((251, 98, 82, 255), (40, 45, 232, 255), (254, 99, 80, 252)),
    ((97, 60, 90, 255), (88, 61, 90, 255), (251, 43, 90, 14)),
    ((239, 203, 156, 255), (117, 104, 143, 153), (239, 203, 156, 255)),
    ((238, 2, 167, 255), (196, 63, 51, 255), (239, 0, 170, 249)),
    ((15, 20, 30, 255), (10, 20, 30, 255), (179, 20, 30, 8)),
    ((140, 60, 60, 255), (60, 60, 60, 255), (249, 60, 60, 108)),
    ((128, 128, 128, 255), (0, 0, 0, 255), (255, 255, 255, 128)),
]


@pytest.fixture
def service():
    return ForegroundExtractionService(thresholds=ExtractionThresholds(), workers=1)


def pair(full_px, bg_px):
    """1x1 full / background arrays."""
    return solid(1, 1, full_px), solid(1, 1, bg_px)


def extract_one(service, full_px, bg_px):
    full, bg = pair(full_px, bg_px)
    return tuple(int(v) for v in service.extract_pixels(full, bg)[0, 0])


def recompose(fg_px, bg_px):
    a = fg_px[3] / 255
    return [a * f + (1 - a) * b for f, b in zip(fg_px[:3], bg_px[:3])]


# ---------- classification ----------

def test_identical_buffers_are_fully_transparent(service):
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(12, 9, 4), dtype=np.uint8)

    out = service.extract_pixels(pixels, pixels.copy())

    assert out.shape == pixels.shape
    assert not out.any()


def test_difference_below_threshold_is_background(service):
    assert extract_one(service, (14, 24, 34, 255), (10, 20, 30, 251)) == TRANSPARENT


def test_difference_at_threshold_is_foreground(service):
    out = extract_one(service, (15, 20, 30, 255), (10, 20, 30, 255))
    assert out == (179, 20, 30, 8)


def test_alpha_channel_difference_alone_counts_as_content(service):
    out = extract_one(service, (100, 100, 100, 255), (100, 100, 100, 200))
    assert out == (100, 100, 100, 3)


# ---------- reconstruction ----------

def test_opaque_white_over_black(service):
    assert extract_one(service, (255, 255, 255, 255), (0, 0, 0, 255)) == (255, 255, 255, 255)


@pytest.mark.parametrize("full_px, expected", [
    # 0.6 * (200, 50, 100) + 0.4 * white, rounded
    ((222, 132, 162, 255), (210, 87, 128, 187)),
    ((222, 173, 182, 255), (152, 0, 28, 82)),  # arbitrary composite over white
])
def test_semi_transparent_over_white_recomposes(service, full_px, expected):
    white = (255, 255, 255, 255)
    out = extract_one(service, full_px, white)

    assert out == expected
    # any α ≥ the lower bound explains the composite; the result must reproduce it
    for got, want in zip(recompose(out, white), full_px[:3]):
        assert abs(got - want) <= 1


@pytest.mark.parametrize("full_px, bg_px, expected", REFERENCE_PIXELS)
def test_matches_reference_pixels(service, full_px, bg_px, expected):
    assert extract_one(service, full_px, bg_px) == expected
    assert service.extract_pixel(full_px, bg_px) == expected


def test_weak_signal_that_reconstructs_is_kept(service):
    out = extract_one(service, (110, 100, 100, 255), (100, 100, 100, 255))
    assert out == (244, 100, 100, 18)


def test_noise_rejection_drops_weak_poorly_reconstructed_pixels():
    strict = ForegroundExtractionService(thresholds=ExtractionThresholds(noise_error=0.0), workers=1)

    # |Δ| = 10 < 15 and best error 0.03 > 0 → treated as rendering noise
    assert extract_one(strict, (110, 100, 100, 255), (100, 100, 100, 255)) == TRANSPARENT
    # strong signal survives the same rule
    assert extract_one(strict, (140, 60, 60, 255), (60, 60, 60, 255)) == (249, 60, 60, 108)


# ---------- buffer-level contract ----------

def test_dimension_mismatch_raises_without_output(service, make_image):
    full = make_image(10, 10, (255, 0, 0, 255))
    background = make_image(11, 10, (0, 0, 0, 255))

    with pytest.raises(DimensionMismatchError) as exc:
        service.extract(full, background)

    assert exc.value.full_size == (10, 10)
    assert exc.value.background_size == (10, 11)
    assert "10x10" in str(exc.value) and "10x11" in str(exc.value)


def test_extract_pixels_checks_dimensions(service):
    with pytest.raises(DimensionMismatchError):
        service.extract_pixels(solid(4, 5, (0, 0, 0, 0)), solid(5, 4, (0, 0, 0, 0)))


def test_output_shape_and_inputs_untouched(service):
    rng = np.random.default_rng(3)
    full = rng.integers(0, 256, size=(7, 13, 4), dtype=np.uint8)
    background = rng.integers(0, 256, size=(7, 13, 4), dtype=np.uint8)
    full_before, background_before = full.copy(), background.copy()

    out = service.extract(RasterImage(full), RasterImage(background))

    assert out.size == (13, 7)
    assert out.pixels.dtype == np.uint8
    assert out.pixels is not full
    np.testing.assert_array_equal(full, full_before)
    np.testing.assert_array_equal(background, background_before)


def test_transparent_pixels_have_zeroed_colour(service):
    rng = np.random.default_rng(11)
    full = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
    background = full.copy()
    background[::2] = rng.integers(0, 256, size=(8, 16, 4), dtype=np.uint8)

    out = service.extract_pixels(full, background)

    transparent = out[..., 3] == 0
    assert transparent[1::2].all()
    assert not out[transparent].any()


def test_is_deterministic(service):
    rng = np.random.default_rng(5)
    full = rng.integers(0, 256, size=(20, 20, 4), dtype=np.uint8)
    background = rng.integers(0, 256, size=(20, 20, 4), dtype=np.uint8)

    first = service.extract_pixels(full, background)
    second = service.extract_pixels(full, background)

    assert first.tobytes() == second.tobytes()


def test_vectorised_matches_single_pixel_solver(service):
    rng = np.random.default_rng(2024)
    full = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
    background = full.copy()
    # mix of untouched, lightly and heavily changed pixels
    noise = rng.integers(-12, 13, size=(12, 12, 4))
    background[:4] = np.clip(full[:4].astype(int) + noise[:4], 0, 255)
    background[4:8] = rng.integers(0, 256, size=(4, 12, 4), dtype=np.uint8)

    out = service.extract_pixels(full, background)

    for y in range(12):
        for x in range(12):
            expected = service.extract_pixel(full[y, x], background[y, x])
            assert tuple(int(v) for v in out[y, x]) == expected, (y, x)


def test_parallel_bands_match_serial():
    rng = np.random.default_rng(99)
    full = rng.integers(0, 256, size=(17, 9, 4), dtype=np.uint8)
    background = rng.integers(0, 256, size=(17, 9, 4), dtype=np.uint8)

    serial = ForegroundExtractionService(thresholds=ExtractionThresholds(), workers=1)
    parallel = ForegroundExtractionService(thresholds=ExtractionThresholds(), workers=4)

    np.testing.assert_array_equal(
        serial.extract_pixels(full, background),
        parallel.extract_pixels(full, background),
    )


# ---------- configuration ----------

def test_thresholds_default_values():
    t = ExtractionThresholds()
    assert (t.identity_threshold, t.alpha_step, t.min_alpha) == (5, 0.01, 0.01)
    assert (t.perfect_error, t.noise_error, t.noise_max_diff) == (0.1, 30.0, 15)


def test_thresholds_from_env(monkeypatch):
    monkeypatch.setenv("EXTRACT_IDENTITY_THRESHOLD", "8")
    monkeypatch.setenv("EXTRACT_NOISE_ERROR", "12.5")

    t = ExtractionThresholds.from_env()

    assert t.identity_threshold == 8
    assert t.noise_error == 12.5
    assert t.alpha_step == 0.01


@pytest.mark.parametrize("kwargs", [{"min_alpha": 0.0}, {"min_alpha": 1.5}, {"alpha_step": 0.0}])
def test_thresholds_reject_invalid_scan(kwargs):
    with pytest.raises(ValueError):
        ExtractionThresholds(**kwargs)


def test_identity_threshold_is_tunable():
    loose = ForegroundExtractionService(thresholds=ExtractionThresholds(identity_threshold=10), workers=1)
    assert extract_one(loose, (15, 20, 30, 255), (10, 20, 30, 255)) == TRANSPARENT
