"""Colours and 24-bit textures with bilinear sampling."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .linalg import Vec3, clamp

_BMP_HEADER_SIZE = 54


def _channel(value: float) -> int:
    clamped = clamp(value, 0.0, 1.0)
    if math.isnan(clamped):
        return 0
    return int(clamped * 255.0)


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def to_vec3(self) -> Vec3:
        """RGB as floats in the 0..1 range."""
        return Vec3(self.r / 255.0, self.g / 255.0, self.b / 255.0)

    @classmethod
    def from_vec3(cls, v: Vec3) -> Color:
        """Opaque colour from 0..1 floats, clamping out-of-range components."""
        return cls(_channel(v.x), _channel(v.y), _channel(v.z))


def _mix(c0: Color, c1: Color, f: float) -> Color:
    return Color(
        int(c0.r * (1 - f) + c1.r * f),
        int(c0.g * (1 - f) + c1.g * f),
        int(c0.b * (1 - f) + c1.b * f),
    )


class Texture:
    """A width x height grid of colours stored row by row from the top."""

    def __init__(
        self, width: int = 0, height: int = 0, pixels: list[Color] | None = None
    ) -> None:
        self.width = width
        self.height = height
        if pixels is None:
            pixels = [Color() for _ in range(max(width, 0) * max(height, 0))]
        elif len(pixels) != width * height:
            raise ValueError(
                f"expected {width * height} pixels for {width}x{height}, got {len(pixels)}"
            )
        self.pixels = list(pixels)

    @classmethod
    def from_bytes(cls, data: bytes) -> Texture:
        """Decode an uncompressed 24-bit BMP image with a 54-byte header."""
        if data[:2] != b"BM":
            raise ValueError("not a BMP image")
        if len(data) < _BMP_HEADER_SIZE:
            raise ValueError("truncated BMP header")
        width, height = struct.unpack_from("<ii", data, 18)
        if width <= 0 or height <= 0:
            raise ValueError(f"unsupported BMP size {width}x{height}")
        row_size = width * 3
        stride = row_size + (4 - row_size % 4) % 4
        if len(data) < _BMP_HEADER_SIZE + stride * height:
            raise ValueError("truncated BMP pixel data")

        rows = []
        for row_index in range(height):
            start = _BMP_HEADER_SIZE + row_index * stride
            row = data[start : start + row_size]
            rows.append(
                [Color(r, g, b) for b, g, r in zip(row[0::3], row[1::3], row[2::3])]
            )
        # BMP rows are stored bottom-up.
        pixels = [color for row in reversed(rows) for color in row]
        return cls(width, height, pixels)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> Texture:
        return cls.from_bytes(Path(path).read_bytes())

    @classmethod
    def create_default(cls, width: int, height: int) -> Texture:
        """A grey radial gradient, bright in the centre and half as bright at the corners."""
        center_x = width / 2.0
        center_y = height / 2.0
        max_distance = math.hypot(center_x, center_y)

        def shade(x: int, y: int) -> Color:
            distance = math.hypot(x - center_x, y - center_y)
            value = int((1.0 - (distance / max_distance) * 0.5) * 255)
            return Color(value, value, value)

        pixels = [shade(x, y) for y in range(height) for x in range(width)]
        return cls(width, height, pixels)

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0 and bool(self.pixels)

    def sample(self, u: float, v: float) -> Color:
        """Bilinearly filtered colour at wrapped texture coordinates; magenta if empty."""
        if not self.is_valid():
            return Color(255, 0, 255)

        u -= math.floor(u)
        v -= math.floor(v)
        x = u * (self.width - 1)
        y = v * (self.height - 1)

        x0 = int(x)
        y0 = int(y)
        x1 = min(x0 + 1, self.width - 1)
        y1 = min(y0 + 1, self.height - 1)
        fx = x - x0
        fy = y - y0

        top = _mix(self.get_pixel(x0, y0), self.get_pixel(x1, y0), fx)
        bottom = _mix(self.get_pixel(x0, y1), self.get_pixel(x1, y1), fx)
        return _mix(top, bottom, fy)

    def sample_vec3(self, u: float, v: float) -> Vec3:
        return self.sample(u, v).to_vec3()

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> Color:
        """Colour at (x, y); opaque black outside the texture."""
        if not self._in_bounds(x, y):
            return Color(0, 0, 0)
        return self.pixels[y * self.width + x]

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        """Set the colour at (x, y); writes outside the texture are ignored."""
        if self._in_bounds(x, y):
            self.pixels[y * self.width + x] = color