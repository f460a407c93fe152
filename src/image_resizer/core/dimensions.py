from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

HEIGHT_POLICIES = ("truncate", "proportional")


class InvalidDimensionError(ValueError):
    pass


@dataclass(frozen=True)
class ResolvedDimensions:
    width: int
    height: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _require_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidDimensionError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value <= 0:
        raise InvalidDimensionError(f"{name} must be greater than 0, got {value}")
    return value


def resolve_explicit(
    original_size: tuple[int, int],
    width: int,
    height: Optional[int] = None,
    *,
    height_policy: str = "truncate",
) -> ResolvedDimensions:
    """
    Resolve the target size for an explicit resize.

    A supplied height is used verbatim. Without one, the ``truncate`` policy
    computes ``(width // original_width) * original_height``, which is 0 for
    any width below the original width. The ``proportional`` policy scales the
    height by ``width / original_width`` and rounds half up.
    """
    width = _require_positive("width", width)
    original_width, original_height = original_size

    if height is not None:
        height = _require_positive("height", height)
        return ResolvedDimensions(width, height)

    if height_policy == "truncate":
        target_height = (width // original_width) * original_height
    elif height_policy == "proportional":
        target_height = _round_half_up(width * original_height / original_width)
    else:
        raise ValueError(f"Unknown height policy: {height_policy!r}")

    logger.debug(
        "Derived height %d for width %d from %dx%d (%s)",
        target_height,
        width,
        original_width,
        original_height,
        height_policy,
    )
    return ResolvedDimensions(width, target_height)


def resolve_fit(
    original_size: tuple[int, int],
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
) -> Optional[ResolvedDimensions]:
    """
    Resolve the target size so the image fits within the given bounds.

    Returns None when no resize is needed: no bounds were given, or the image
    already fits every supplied bound. An absent bound never constrains.
    """
    if max_width is None and max_height is None:
        return None
    if max_width is not None:
        max_width = _require_positive("max_width", max_width)
    if max_height is not None:
        max_height = _require_positive("max_height", max_height)

    original_width, original_height = original_size
    fits_width = max_width is None or original_width <= max_width
    fits_height = max_height is None or original_height <= max_height
    if fits_width and fits_height:
        return None

    width_factor = original_width / max_width if max_width is not None else 0.0
    height_factor = original_height / max_height if max_height is not None else 0.0

    if width_factor > height_factor:
        target_width = max_width
        target_height = _round_half_up(original_height / width_factor)
    else:
        target_width = _round_half_up(original_width / height_factor)
        target_height = max_height

    logger.debug(
        "Fit %dx%d into %sx%s -> %dx%d",
        original_width,
        original_height,
        max_width,
        max_height,
        target_width,
        target_height,
    )
    return ResolvedDimensions(target_width, target_height)


__all__ = [
    "HEIGHT_POLICIES",
    "InvalidDimensionError",
    "ResolvedDimensions",
    "resolve_explicit",
    "resolve_fit",
]
