import logging
import sys
from pathlib import Path


def configure_logging(log_dir: Path | None = None, console_level: int = logging.INFO) -> Path:
    """
    Configure application-wide logging with console + file handlers.

    The file log keeps DEBUG detail (resolved sizes, releases); the console
    only shows what the user needs.
    """
    log_dir = log_dir or Path.home() / ".image_resizer"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "image_resizer.log"

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s", "%Y-%m-%d %H:%M:%S"
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    logging.basicConfig(level=logging.DEBUG, handlers=[file_handler, console_handler], force=True)
    return log_path
