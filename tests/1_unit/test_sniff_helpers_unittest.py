import unittest
from io import BytesIO

from PIL import Image

from receipt_store.helpers.sniff_helpers import is_jpeg_content, sniff_content_type


def _encode(fmt: str) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (16, 12), (10, 20, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


# ## Tests for sniff_content_type
# - Checks that the type comes from the bytes only, for images, text and binary data.
class TestSniffContentType(unittest.TestCase):
    def test_detects_real_jpeg(self):
        # **Given:** a JPEG encoded by Pillow
        data = _encode("JPEG")
        # **When/Then:** the sniffed type is image/jpeg
        self.assertEqual(sniff_content_type(data), "image/jpeg")
        self.assertTrue(is_jpeg_content(data))

    def test_detects_other_image_formats(self):
        self.assertEqual(sniff_content_type(_encode("PNG")), "image/png")
        self.assertEqual(sniff_content_type(_encode("GIF")), "image/gif")
        self.assertEqual(sniff_content_type(_encode("BMP")), "image/bmp")
        self.assertFalse(is_jpeg_content(_encode("PNG")))

    def test_detects_webp_by_masked_riff_header(self):
        data = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 20
        self.assertEqual(sniff_content_type(data), "image/webp")

    def test_html_after_leading_whitespace(self):
        self.assertEqual(
            sniff_content_type(b"  \n<html><body>receipt</body></html>"),
            "text/html; charset=utf-8",
        )
        self.assertEqual(
            sniff_content_type(b"<!doctype html>"),
            "text/html; charset=utf-8",
        )

    def test_html_tag_needs_terminator(self):
        # "<pre" is not in the table and "<p" is followed by "r", so it is plain text
        self.assertEqual(sniff_content_type(b"<pre>12.50 CHF</pre>"), "text/plain; charset=utf-8")

    def test_xml_pdf_and_archives(self):
        self.assertEqual(sniff_content_type(b"<?xml version='1.0'?>"), "text/xml; charset=utf-8")
        self.assertEqual(sniff_content_type(b"%PDF-1.7\n..."), "application/pdf")
        self.assertEqual(sniff_content_type(b"PK\x03\x04rest"), "application/zip")
        self.assertEqual(sniff_content_type(b"\x1f\x8b\x08\x00"), "application/x-gzip")

    def test_byte_order_marks(self):
        self.assertEqual(sniff_content_type(b"\xfe\xff\x00A"), "text/plain; charset=utf-16be")
        self.assertEqual(sniff_content_type(b"\xff\xfeA\x00"), "text/plain; charset=utf-16le")
        self.assertEqual(sniff_content_type(b"\xef\xbb\xbfhello"), "text/plain; charset=utf-8")

    def test_mp4_brand(self):
        data = b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00mp41isom"
        self.assertEqual(sniff_content_type(data), "video/mp4")

    def test_plain_text_and_binary_fallbacks(self):
        self.assertEqual(sniff_content_type(b"just a receipt total 12.50"), "text/plain; charset=utf-8")
        self.assertEqual(sniff_content_type(b""), "text/plain; charset=utf-8")
        self.assertEqual(sniff_content_type(b"\x01\x02\x03\x04binary"), "application/octet-stream")

    def test_only_first_512_bytes_are_inspected(self):
        # **Given:** plain text with a binary byte after the sniffing window
        data = b"a" * 512 + b"\x00"
        # **Then:** the binary tail does not change the verdict
        self.assertEqual(sniff_content_type(data), "text/plain; charset=utf-8")

    def test_extension_or_declared_type_are_irrelevant(self):
        # JPEG magic with arbitrary payload is still JPEG, text named .jpg is not
        self.assertTrue(is_jpeg_content(b"\xff\xd8\xff" + b"\x00" * 100))
        self.assertFalse(is_jpeg_content(b"this is not an image.jpg"))


# ## Direct run via CLI
if __name__ == "__main__":
    unittest.main()
