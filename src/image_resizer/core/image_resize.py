from __future__ import annotations

from typing import Optional

from PIL import Image

from .dimensions import InvalidDimensionError

# Pillow falls back to nearest-neighbour for these modes, so they are
# resampled in a converted working copy. Every other mode is passed through.
CONVERTED_MODES = {"1": "L", "P": "RGB", "PA": "RGBA"}


def _working_mode(image: Image.Image) -> str:
    if image.mode == "P" and "transparency" in image.info:
        return "RGBA"
    return CONVERTED_MODES.get(image.mode, image.mode)


def resample(
    image: Image.Image,
    target_width: int,
    target_height: int,
    *,
    resample_filter: int = Image.Resampling.BICUBIC,
    reducing_gap: Optional[float] = None,
) -> Image.Image:
    """
    Scale the full image onto a new image of exactly the target size.

    Args:
        image: Source image, left untouched
        target_width: Target width in pixels
        target_height: Target height in pixels
        resample_filter: PIL resampling filter (default: BICUBIC)
        reducing_gap: Optional PIL reducing gap for large downscales

    Returns:
        Newly allocated image of size (target_width, target_height)
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidDimensionError(
            f"Target dimensions must be greater than 0, got {target_width}x{target_height}"
        )

    src_width, src_height = image.size
    if src_width <= 0 or src_height <= 0:
        raise InvalidDimensionError(f"Invalid source image size {src_width}x{src_height}")

    mode = _working_mode(image)
    working = image if mode == image.mode else image.convert(mode)
    try:
        return working.resize(
            (target_width, target_height),
            resample_filter,
            reducing_gap=reducing_gap,
        )
    finally:
        if working is not image:
            working.close()


__all__ = ["CONVERTED_MODES", "resample"]
