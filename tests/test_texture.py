import struct

import pytest

from softraster.linalg import Vec3
from softraster.texture import Color, Texture


def make_bmp(width, height, rows_top_down):
    """Build a 24-bit BMP from rows of (r, g, b) tuples listed from the top."""
    row_size = width * 3
    padding = (4 - row_size % 4) % 4
    body = b"".join(
        bytes(channel for r, g, b in row for channel in (b, g, r)) + b"\0" * padding
        for row in reversed(rows_top_down)
    )
    header = struct.pack("<2sIHHI", b"BM", 54 + len(body), 0, 0, 54)
    info = struct.pack("<IiiHHIIiiII", 40, width, height, 1, 24, 0, len(body), 0, 0, 0, 0)
    return header + info + body


def test_create_default_dimensions_and_sample():
    texture = Texture.create_default(64, 64)
    assert texture.width == 64
    assert texture.height == 64
    assert texture.is_valid()
    color = texture.sample(0.5, 0.5)
    assert color.r > 0 or color.g > 0 or color.b > 0


def test_default_gradient_values():
    texture = Texture.create_default(64, 64)
    assert texture.get_pixel(32, 32) == Color(255, 255, 255)
    assert texture.get_pixel(0, 0) == Color(127, 127, 127)


def test_color_vec3_conversion():
    assert Color(255, 0, 51).to_vec3() == Vec3(1.0, 0.0, 0.2)
    assert Color.from_vec3(Vec3(2.0, -1.0, 0.5)) == Color(255, 0, 127)
    assert Color.from_vec3(Vec3(1.0, 1.0, 1.0)).a == 255


def test_empty_texture_samples_magenta():
    texture = Texture()
    assert not texture.is_valid()
    assert texture.sample(0.3, 0.7) == Color(255, 0, 255)


def test_pixel_access_out_of_range():
    texture = Texture(2, 2)
    texture.set_pixel(1, 1, Color(10, 20, 30))
    texture.set_pixel(5, 5, Color(1, 2, 3))
    assert texture.get_pixel(1, 1) == Color(10, 20, 30)
    assert texture.get_pixel(-1, 0) == Color(0, 0, 0)
    assert texture.pixels.count(Color(1, 2, 3)) == 0


def test_pixel_count_must_match():
    with pytest.raises(ValueError):
        Texture(2, 2, [Color()])


def test_bilinear_sample_and_wrap():
    texture = Texture(2, 1, [Color(0, 0, 0), Color(200, 100, 50)])
    assert texture.sample(0.5, 0.0) == Color(100, 50, 25)
    assert texture.sample(1.5, 0.0) == Color(100, 50, 25)
    assert texture.sample(1.0, 0.0) == Color(0, 0, 0)
    assert texture.sample_vec3(0.0, 0.0) == Vec3(0.0, 0.0, 0.0)


def test_bmp_decoding_orientation_and_padding():
    rows = [
        [(255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(10, 20, 30), (40, 50, 60), (70, 80, 90)],
    ]
    texture = Texture.from_bytes(make_bmp(3, 2, rows))
    assert (texture.width, texture.height) == (3, 2)
    assert texture.get_pixel(0, 0) == Color(255, 0, 0)
    assert texture.get_pixel(2, 0) == Color(0, 0, 255)
    assert texture.get_pixel(1, 1) == Color(40, 50, 60)


def test_from_file(tmp_path):
    path = tmp_path / "tex.bmp"
    path.write_bytes(make_bmp(1, 1, [[(1, 2, 3)]]))
    texture = Texture.from_file(path)
    assert texture.pixels == [Color(1, 2, 3)]


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Texture.from_file(tmp_path / "missing.bmp")


def test_bad_signature_rejected():
    data = b"XX" + make_bmp(1, 1, [[(1, 2, 3)]])[2:]
    with pytest.raises(ValueError):
        Texture.from_bytes(data)


def test_truncated_pixels_rejected():
    data = make_bmp(2, 2, [[(1, 1, 1), (2, 2, 2)], [(3, 3, 3), (4, 4, 4)]])
    with pytest.raises(ValueError):
        Texture.from_bytes(data[:-4])