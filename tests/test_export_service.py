import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from image_resizer.core.export_service import ExportService, ExportServiceError  # noqa: E402
from image_resizer.core.settings import ExportSettings  # noqa: E402


def _make_image(size=(100, 50), color=(200, 160, 90), mode="RGB"):
    return Image.new(mode, size, color)


class ExportServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.base_path = Path(self.tmp_dir.name) / "sample.png"

    def tearDown(self) -> None:
        self.tmp_dir.cleanup()

    def test_default_name_next_to_source(self) -> None:
        path = ExportService().export(_make_image(), self.base_path)
        self.assertEqual(path, self.base_path.parent / "sample_100x50.png")
        with Image.open(path) as written:
            self.assertEqual(written.size, (100, 50))

    def test_explicit_output_path(self) -> None:
        target = Path(self.tmp_dir.name) / "nested" / "out.jpg"
        path = ExportService().export(_make_image(), self.base_path, target)
        self.assertEqual(path, target)
        with Image.open(target) as written:
            self.assertEqual(written.format, "JPEG")

    def test_configured_format_converts_alpha_for_jpeg(self) -> None:
        service = ExportService(ExportSettings(format="JPEG", quality=80))
        image = _make_image(color=(10, 20, 30, 40), mode="RGBA")
        path = service.export(image, self.base_path)
        self.assertEqual(path.name, "sample_100x50.jpeg")
        with Image.open(path) as written:
            self.assertEqual(written.mode, "RGB")
        self.assertEqual(image.mode, "RGBA")

    def test_custom_suffix_template(self) -> None:
        service = ExportService(ExportSettings(suffix_template="-w{width}"))
        path = service.export(_make_image(), self.base_path)
        self.assertEqual(path.name, "sample-w100.png")

    def test_unknown_extension_raises(self) -> None:
        target = Path(self.tmp_dir.name) / "out.notaformat"
        with self.assertRaises(ExportServiceError):
            ExportService().export(_make_image(), self.base_path, target)

    def test_unknown_configured_format_raises(self) -> None:
        service = ExportService(ExportSettings(format="FOO"))
        with self.assertRaises(ExportServiceError):
            service.export(_make_image(), self.base_path)
        self.assertFalse((self.base_path.parent / "sample_100x50.foo").exists())


if __name__ == "__main__":
    unittest.main()
