"""
Convert an Apple Icon Composer .icon folder to Android Adaptive Icon resources.

    adaptive-icon example-icons/Turntable.icon output
"""
import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..errors import IconDescriptorError, RenderError
from ..pipeline.convert_icon import convert_icon
from ..services.render_service import RenderService

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adaptive-icon",
        description="Converts an Apple Icon Composer .icon file to Android Adaptive Icon format.",
    )
    parser.add_argument("icon_folder", type=Path,
                        help="Path to the .icon folder (containing icon.json and Assets/)")
    parser.add_argument("output_dir", type=Path, nargs="?",
                        help="Output directory (default: ./output/<icon name>)")
    parser.add_argument("--monochrome", action="store_true",
                        help="Also write a monochrome (themed icon) layer")
    parser.add_argument("--keep-temp", action="store_true",
                        help="Keep intermediate renders in the temporary directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    icon_folder = args.icon_folder.resolve()
    output_dir = (args.output_dir or Path.cwd() / "output" / icon_folder.stem).resolve()

    print(f"Converting icon from: {icon_folder}")
    print(f"Output directory: {output_dir}\n")

    try:
        if not (icon_folder / "icon.json").is_file():
            raise FileNotFoundError(f"icon.json not found in {icon_folder}")

        render_service = RenderService()
        render_service.verify_available()

        resources = convert_icon(
            icon_folder,
            output_dir,
            monochrome=args.monochrome,
            keep_temp=args.keep_temp,
            render_service=render_service,
        )
    except (OSError, IconDescriptorError, RenderError, ValueError) as err:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print("\nConversion complete!")
    print("\nAndroid Adaptive Icon resources:")
    for path in resources.files:
        print(f"  {path.relative_to(output_dir)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
