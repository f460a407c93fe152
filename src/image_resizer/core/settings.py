from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from PIL import Image

from .dimensions import HEIGHT_POLICIES

SETTINGS_ENV_VAR = "IMAGE_RESIZER_SETTINGS"


@dataclass
class ResizeSettings:
    resample_method: int = Image.Resampling.BICUBIC
    reducing_gap: Optional[float] = None
    height_policy: str = "truncate"


@dataclass
class ExportSettings:
    format: Optional[str] = None
    quality: int = 90
    suffix_template: str = "_{width}x{height}"


@dataclass
class AppSettings:
    resize: ResizeSettings
    export: ExportSettings


DEFAULT_SETTINGS = {
    "resize": {
        "resample_method": "BICUBIC",
        "reducing_gap": None,
        "height_policy": "truncate",
    },
    "export": {
        "format": None,
        "quality": 90,
        "suffix_template": "_{width}x{height}",
    },
}


def default_settings() -> AppSettings:
    return AppSettings(resize=ResizeSettings(), export=ExportSettings())


def _settings_path(path: Path | None) -> Path:
    if path is not None:
        return path
    configured = os.environ.get(SETTINGS_ENV_VAR)
    if configured:
        return Path(configured).expanduser()
    return Path(__file__).resolve().parents[1] / "config" / "settings.json"


def load_settings(path: Path | None = None) -> AppSettings:
    base_path = _settings_path(path)
    data = DEFAULT_SETTINGS
    if base_path.exists():
        try:
            with base_path.open("r", encoding="utf-8") as fh:
                file_data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Invalid settings file {base_path}: {exc}") from exc
        if not isinstance(file_data, dict):
            raise RuntimeError(f"Invalid settings file {base_path}: expected a JSON object")
        data = _merge_settings(DEFAULT_SETTINGS, file_data)

    resize = data["resize"]
    export = data["export"]
    for section, values in (("resize", resize), ("export", export)):
        if not isinstance(values, dict):
            raise RuntimeError(f"Invalid settings file {base_path}: \"{section}\" must be an object")

    resample_attr = str(resize.get("resample_method") or "BICUBIC").upper()
    resample_method = getattr(Image.Resampling, resample_attr, Image.Resampling.BICUBIC)

    height_policy = str(resize.get("height_policy", "truncate")).lower()
    if height_policy not in HEIGHT_POLICIES:
        raise ValueError(
            f"Unknown height policy {height_policy!r}, expected one of {', '.join(HEIGHT_POLICIES)}"
        )

    reducing_gap = resize.get("reducing_gap")
    resize_settings = ResizeSettings(
        resample_method=resample_method,
        reducing_gap=float(reducing_gap) if reducing_gap is not None else None,
        height_policy=height_policy,
    )

    export_format = export.get("format")
    export_settings = ExportSettings(
        format=str(export_format).upper() if export_format else None,
        quality=int(export.get("quality", 90)),
        suffix_template=str(export.get("suffix_template", "_{width}x{height}")),
    )

    return AppSettings(resize=resize_settings, export=export_settings)


def _merge_settings(default: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for key, value in default.items():
        if key in overrides:
            if isinstance(value, dict) and isinstance(overrides[key], dict):
                merged[key] = _merge_settings(value, overrides[key])
            else:
                merged[key] = overrides[key]
        else:
            merged[key] = value
    # Include extra keys from overrides
    for key, value in overrides.items():
        if key not in merged:
            merged[key] = value
    return merged
