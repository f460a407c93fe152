from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from .dimensions import ResolvedDimensions, resolve_explicit, resolve_fit
from .image_resize import resample
from .settings import AppSettings, default_settings


class ImageResizerError(RuntimeError):
    pass


class ImageLoadError(ImageResizerError):
    pass


class ImageResizeOperation:
    """
    Binds one source image to any number of resize calls.

    The source is never modified; every resize returns a new image. An image
    loaded through ``from_path`` is owned by the operation and closed on
    ``release()``. An image passed in directly stays owned by the caller.
    Use the operation as a context manager to release on every exit path.
    """

    def __init__(
        self,
        image: Image.Image,
        settings: Optional[AppSettings] = None,
        *,
        owns_image: bool = False,
    ) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings or default_settings()
        self._image: Optional[Image.Image] = image
        self._size = image.size
        self._owns_image = owns_image

    @classmethod
    def from_path(
        cls, source_path: Path | str, settings: Optional[AppSettings] = None
    ) -> "ImageResizeOperation":
        """Decode the file at source_path; any decode failure becomes ImageLoadError."""
        path = Path(source_path)
        try:
            image = Image.open(path)
        except Exception as exc:
            raise ImageLoadError(f"The requested image could not be loaded: {path}") from exc
        try:
            image.load()
        except Exception as exc:
            image.close()
            raise ImageLoadError(f"The requested image could not be loaded: {path}") from exc

        operation = cls(image, settings, owns_image=True)
        operation.logger.info("Loaded %s (%dx%d, %s)", path, image.width, image.height, image.mode)
        return operation

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    @property
    def owns_image(self) -> bool:
        return self._owns_image

    @property
    def released(self) -> bool:
        return self._image is None

    def _source(self) -> Image.Image:
        if self._image is None:
            raise ImageResizerError("The source image has already been released.")
        return self._image

    def _resample(self, source: Image.Image, target: ResolvedDimensions) -> Image.Image:
        resize = self.settings.resize
        self.logger.debug(
            "Resampling %dx%d -> %dx%d", source.width, source.height, target.width, target.height
        )
        return resample(
            source,
            target.width,
            target.height,
            resample_filter=resize.resample_method,
            reducing_gap=resize.reducing_gap,
        )

    def resize_to(self, width: int, height: Optional[int] = None) -> Image.Image:
        """
        Resize to the given width and height.

        Without a height, the height is derived according to the configured
        height policy (see ``resolve_explicit``).
        """
        source = self._source()
        target = resolve_explicit(
            self._size, width, height, height_policy=self.settings.resize.height_policy
        )
        return self._resample(source, target)

    def resize_to_fit(
        self, max_width: Optional[int] = None, max_height: Optional[int] = None
    ) -> Image.Image:
        """
        Resize so the image is not larger than the given bounds, keeping the
        aspect ratio. Returns the source image itself when it already fits.
        """
        source = self._source()
        target = resolve_fit(self._size, max_width, max_height)
        if target is None:
            self.logger.debug("Image %dx%d already fits, no resize", *self._size)
            return source
        return self._resample(source, target)

    def release(self) -> None:
        if self._image is None:
            return
        if self._owns_image:
            self._image.close()
            self.logger.debug("Released owned source image")
        self._image = None

    def __enter__(self) -> "ImageResizeOperation":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


__all__ = ["ImageLoadError", "ImageResizeOperation", "ImageResizerError"]
