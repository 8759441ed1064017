import pytest

from helpers.image_utils import (
    detect_image_format,
    image_mime_type,
    is_image_file,
    sanitize_category,
)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\xff\xd8\xff\xe0" + b"\x00" * 8, "jpeg"),
        (b"\x89PNG\r\n\x1a\n" + b"\x00" * 4, "png"),
        (b"GIF89a" + b"\x00" * 6, "gif"),
        (b"GIF87a" + b"\x00" * 6, "gif"),
        (b"BM" + b"\x00" * 10, "bmp"),
        (b"RIFF\x00\x00\x00\x00WEBP", "webp"),
        (b"RIFF\x00\x00\x00\x00WAVE", "unknown"),
        (b"plain text, not an image", "unknown"),
    ],
)
def test_detect_image_format(data, expected):
    assert detect_image_format(data) == expected


def test_short_data_is_unknown():
    assert detect_image_format(b"\xff\xd8\xff") == "unknown"
    assert image_mime_type(b"") == "image/unknown"


def test_is_image_file():
    assert is_image_file("a.jpg")
    assert is_image_file("B.JPEG")
    assert is_image_file("c.png")
    assert not is_image_file("d.gif")
    assert not is_image_file("notes.txt")
    assert not is_image_file("noext")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("风景 / test!", "风景___test"),
        ("Street Food", "Street_Food"),
        ("  padded  ", "padded"),
        ("a/b\\c", "a_b_c"),
        ("!!!", ""),
        ("café", "caf"),
    ],
)
def test_sanitize_category(raw, expected):
    assert sanitize_category(raw) == expected
