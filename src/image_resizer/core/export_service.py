from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from .settings import ExportSettings

logger = logging.getLogger(__name__)

# Formats that accept a "quality" save parameter.
QUALITY_FORMATS = {"JPEG", "WEBP"}


class ExportServiceError(Exception):
    pass


class ExportService:
    def __init__(self, config: ExportSettings | None = None) -> None:
        self.config = config or ExportSettings()

    def target_path(self, image: Image.Image, source_path: Path) -> Path:
        suffix = self.config.suffix_template.format(width=image.width, height=image.height)
        extension = source_path.suffix
        if self.config.format:
            extension = "." + self.config.format.lower()
        return source_path.parent / f"{source_path.stem}{suffix}{extension}"

    def export(
        self,
        image: Image.Image,
        source_path: Path,
        output_path: Optional[Path] = None,
    ) -> Path:
        target = output_path or self.target_path(image, source_path)
        extensions = Image.registered_extensions()
        if self.config.format:
            image_format = self.config.format.upper()
        else:
            image_format = extensions.get(target.suffix.lower())
        if image_format is None:
            raise ExportServiceError(f"Cannot determine output format for {target}")
        if image_format not in Image.SAVE:
            raise ExportServiceError(f"Pillow cannot write {image_format} images ({target})")

        save_kwargs: dict[str, object] = {"format": image_format}
        if image_format in QUALITY_FORMATS:
            save_kwargs["quality"] = self.config.quality

        to_save = image
        if image_format == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
            to_save = image.convert("RGB")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            to_save.save(target, **save_kwargs)
        except (OSError, ValueError, KeyError) as exc:
            raise ExportServiceError(f"Could not write {target}: {exc}") from exc
        finally:
            if to_save is not image:
                to_save.close()

        logger.info("Wrote %s (%dx%d)", target, image.width, image.height)
        return target
