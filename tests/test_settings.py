import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PIL import Image

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from image_resizer.core.settings import SETTINGS_ENV_VAR, load_settings  # noqa: E402


class LoadSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp_dir.name) / "settings.json"

    def tearDown(self) -> None:
        self.tmp_dir.cleanup()

    def _write(self, data) -> None:
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def test_defaults_when_file_missing(self) -> None:
        settings = load_settings(self.path)
        self.assertEqual(settings.resize.resample_method, Image.Resampling.BICUBIC)
        self.assertIsNone(settings.resize.reducing_gap)
        self.assertEqual(settings.resize.height_policy, "truncate")
        self.assertIsNone(settings.export.format)
        self.assertEqual(settings.export.quality, 90)
        self.assertEqual(settings.export.suffix_template, "_{width}x{height}")

    def test_partial_override_is_merged(self) -> None:
        self._write({"resize": {"resample_method": "lanczos", "height_policy": "Proportional"}})
        settings = load_settings(self.path)
        self.assertEqual(settings.resize.resample_method, Image.Resampling.LANCZOS)
        self.assertEqual(settings.resize.height_policy, "proportional")
        self.assertEqual(settings.export.quality, 90)

    def test_export_override(self) -> None:
        self._write({"export": {"format": "webp", "quality": 70}, "resize": {"reducing_gap": 2}})
        settings = load_settings(self.path)
        self.assertEqual(settings.export.format, "WEBP")
        self.assertEqual(settings.export.quality, 70)
        self.assertEqual(settings.resize.reducing_gap, 2.0)

    def test_unknown_resample_method_falls_back_to_bicubic(self) -> None:
        self._write({"resize": {"resample_method": "SUPERSMOOTH"}})
        self.assertEqual(load_settings(self.path).resize.resample_method, Image.Resampling.BICUBIC)

    def test_non_object_file_raises(self) -> None:
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            load_settings(self.path)

    def test_non_object_section_raises(self) -> None:
        self._write({"resize": [1, 2]})
        with self.assertRaises(RuntimeError):
            load_settings(self.path)

    def test_unknown_height_policy_raises(self) -> None:
        self._write({"resize": {"height_policy": "stretch"}})
        with self.assertRaises(ValueError):
            load_settings(self.path)

    def test_invalid_json_raises(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            load_settings(self.path)

    def test_environment_variable_selects_file(self) -> None:
        self._write({"export": {"quality": 55}})
        with mock.patch.dict(os.environ, {SETTINGS_ENV_VAR: str(self.path)}):
            settings = load_settings()
        self.assertEqual(settings.export.quality, 55)


if __name__ == "__main__":
    unittest.main()
