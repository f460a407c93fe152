from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .core.dimensions import InvalidDimensionError
from .core.export_service import ExportService, ExportServiceError
from .core.image_resizer import ImageResizeOperation, ImageResizerError
from .core.logger import configure_logging
from .core.settings import load_settings

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Image Resizer")
    parser.add_argument("image", help="Path to the source image.")
    parser.add_argument("--width", type=int, help="Target width (explicit resize).")
    parser.add_argument(
        "--height",
        type=int,
        help="Target height; derived from the width when omitted.",
    )
    parser.add_argument("--max-width", type=int, help="Maximum width (fit resize).")
    parser.add_argument("--max-height", type=int, help="Maximum height (fit resize).")
    parser.add_argument("-o", "--output", help="Output path; defaults to a name next to the source.")
    parser.add_argument("--settings", help="Path to a settings JSON file.")
    parser.add_argument("--log-dir", help="Directory for the log file.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug output on the console."
    )

    args = parser.parse_args(argv)
    explicit = args.width is not None or args.height is not None
    fit = args.max_width is not None or args.max_height is not None
    if explicit and fit:
        parser.error("--width/--height cannot be combined with --max-width/--max-height")
    if args.height is not None and args.width is None:
        parser.error("--height requires --width")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    log_path = configure_logging(
        Path(args.log_dir).expanduser() if args.log_dir else None,
        console_level=logging.DEBUG if args.verbose else logging.INFO,
    )
    logger.debug("Logging to %s", log_path)
    try:
        settings = load_settings(Path(args.settings).expanduser() if args.settings else None)
    except (RuntimeError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    source_path = Path(args.image).expanduser()
    output_path = Path(args.output).expanduser() if args.output else None
    exporter = ExportService(settings.export)

    try:
        with ImageResizeOperation.from_path(source_path, settings) as operation:
            if args.width is not None:
                result = operation.resize_to(args.width, args.height)
            else:
                result = operation.resize_to_fit(args.max_width, args.max_height)
            written = exporter.export(result, source_path, output_path)
    except (ImageResizerError, InvalidDimensionError, ExportServiceError) as exc:
        logger.error("%s", exc)
        return 1

    print(written)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
