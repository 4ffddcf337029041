from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class ExtractionThresholds:
    """
    Value-object holding the tolerances of the foreground extractor.

    The defaults are tuned for renderer anti-aliasing noise and must not
    change if output is expected to match previously exported icons.
    """
    identity_threshold: int = 5     # max |Δ| (any RGBA channel) still counted as background
    alpha_step: float = 0.01        # α grid resolution
    min_alpha: float = 0.01         # first α candidate, never 0
    perfect_error: float = 0.1      # reconstruction error that stops the scan
    noise_error: float = 30.0       # best error above this ...
    noise_max_diff: int = 15        # ... with a signal below this is rendering noise

    def __post_init__(self):
        if not 0 < self.min_alpha <= 1:
            raise ValueError(f"min_alpha must be in (0, 1], got {self.min_alpha}")
        if self.alpha_step <= 0:
            raise ValueError(f"alpha_step must be positive, got {self.alpha_step}")

    @classmethod
    def from_env(cls) -> "ExtractionThresholds":
        """Build thresholds from EXTRACT_* environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            identity_threshold=int(os.getenv("EXTRACT_IDENTITY_THRESHOLD", defaults.identity_threshold)),
            alpha_step=float(os.getenv("EXTRACT_ALPHA_STEP", defaults.alpha_step)),
            min_alpha=float(os.getenv("EXTRACT_MIN_ALPHA", defaults.min_alpha)),
            perfect_error=float(os.getenv("EXTRACT_PERFECT_ERROR", defaults.perfect_error)),
            noise_error=float(os.getenv("EXTRACT_NOISE_ERROR", defaults.noise_error)),
            noise_max_diff=int(os.getenv("EXTRACT_NOISE_MAX_DIFF", defaults.noise_max_diff)),
        )
