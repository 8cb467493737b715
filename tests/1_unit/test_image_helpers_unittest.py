import unittest
from io import BytesIO

from PIL import Image

from receipt_store.helpers.image_helpers import read_jpeg_size, resize_jpeg, scaled_size


def _make_jpeg(width: int, height: int, mode: str = "RGB") -> bytes:
    buffer = BytesIO()
    color = 128 if mode == "L" else (40, 160, 90)
    Image.new(mode, (width, height), color).save(buffer, format="JPEG", quality=90)
    return buffer.getvalue()


# ## Tests for the resize helpers
class TestScaledSize(unittest.TestCase):
    def test_width_is_rounded_and_height_follows_aspect_ratio(self):
        self.assertEqual(scaled_size(800, 600, 1.5), (1200, 900))
        self.assertEqual(scaled_size(800, 600, 0.5), (400, 300))
        self.assertEqual(scaled_size(801, 600, 0.5), (400, 300))

    def test_never_collapses_to_zero(self):
        self.assertEqual(scaled_size(3, 1, 0.1), (1, 1))


class TestResizeJpeg(unittest.TestCase):
    def test_reads_header_size(self):
        self.assertEqual(read_jpeg_size(_make_jpeg(64, 48)), (64, 48))

    def test_rejects_non_jpeg(self):
        buffer = BytesIO()
        Image.new("RGB", (8, 8)).save(buffer, format="PNG")
        with self.assertRaises(ValueError):
            read_jpeg_size(buffer.getvalue())

    def test_rejects_garbage(self):
        with self.assertRaises(OSError):
            read_jpeg_size(b"definitely not an image")

    def test_output_is_jpeg_with_scaled_width(self):
        # **Given:** an 800x600 receipt
        source = _make_jpeg(800, 600)
        # **When:** scaled by 1.5
        output = resize_jpeg(source, 1.5)
        # **Then:** a 1200x900 JPEG comes back
        with Image.open(BytesIO(output)) as img:
            self.assertEqual(img.format, "JPEG")
            self.assertEqual(img.size, (1200, 900))

    def test_downscale_grayscale(self):
        output = resize_jpeg(_make_jpeg(100, 50, mode="L"), 0.1)
        with Image.open(BytesIO(output)) as img:
            self.assertEqual(img.size, (10, 5))
            self.assertEqual(img.mode, "L")

    def test_resize_is_deterministic(self):
        source = _make_jpeg(333, 222)
        self.assertEqual(resize_jpeg(source, 0.7), resize_jpeg(source, 0.7))


if __name__ == "__main__":
    unittest.main()
