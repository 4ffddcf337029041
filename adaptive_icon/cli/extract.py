"""
Extract a foreground layer from two already-rendered PNGs.

    adaptive-icon-extract full.png background.png foreground.png --fit
"""
import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..services.foreground_extraction_service import ForegroundExtractionService
from ..services.image_service import ImageService
from ..services.safe_area_service import SafeAreaService
from .convert import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adaptive-icon-extract",
        description="Recover the foreground layer from a full render and a background-only render.",
    )
    parser.add_argument("full", type=Path, help="Full composite render (PNG)")
    parser.add_argument("background", type=Path, help="Background-only render (PNG)")
    parser.add_argument("output", type=Path, help="Where to write the foreground PNG")
    parser.add_argument("--fit", action="store_true",
                        help="Letterbox the result into the adaptive icon safe area")
    parser.add_argument("--workers", type=int, default=None,
                        help="Row bands processed in parallel (default: EXTRACT_WORKERS or 1)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    image_service = ImageService()
    try:
        full = image_service.load(args.full)
        background = image_service.load(args.background)
        foreground = ForegroundExtractionService(workers=args.workers).extract(full, background)
        if args.fit:
            foreground = SafeAreaService().fit(foreground)
        image_service.save(foreground, args.output)
    except (OSError, ValueError) as err:
        logger.debug("Extraction failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print(f"Foreground written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
