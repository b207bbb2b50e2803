"""A scanline-free software rasteriser with a point light and a depth buffer."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .linalg import Matrix4, Vec2, Vec3, inverse, transpose
from .model import Model, Vertex
from .texture import Color, Texture

_BMP_HEADER = struct.Struct("<2sIIIIiiHHIIiiII")


@dataclass(frozen=True)
class Pixel:
    """A frame-buffer entry: colour plus the depth it was written at."""

    color: Color = Color()
    depth: float = 1.0


@dataclass(frozen=True)
class _ShadedVertex:
    position: Vec3
    normal: Vec3
    tex_coord: Vec2
    world_pos: Vec3


def barycentric(a: Vec2, b: Vec2, c: Vec2, p: Vec2) -> Vec3:
    """Barycentric weights of ``p`` in triangle abc; (1, 0, 0) for a degenerate triangle."""
    v0 = b - a
    v1 = c - a
    v2 = p - a
    d00 = v0.dot(v0)
    d01 = v0.dot(v1)
    d11 = v1.dot(v1)
    d20 = v2.dot(v0)
    d21 = v2.dot(v1)
    denom = d00 * d11 - d01 * d01
    if abs(denom) < 1e-6:
        return Vec3(1.0, 0.0, 0.0)
    v = (d11 * d20 - d01 * d21) / denom
    w = (d00 * d21 - d01 * d20) / denom
    return Vec3(1.0 - v - w, v, w)


def _finite(v: Vec3) -> bool:
    return all(math.isfinite(c) for c in (v.x, v.y))


class Renderer:
    """Renders triangles into a colour frame buffer and a separate depth buffer."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"invalid size {width}x{height}")
        self.width = width
        self.height = height
        self.frame_buffer: list[Pixel] = [Pixel()] * (width * height)
        self.depth_buffer: list[float] = [0.0] * (width * height)

        self.model_matrix = Matrix4()
        self.view_matrix = Matrix4()
        self.projection_matrix = Matrix4()
        self.viewport_matrix = Matrix4()
        self.normal_matrix = transpose(inverse(self.model_matrix))

        self.texture: Texture | None = None

        self.light_position = Vec3(3.0, 3.0, 3.0)
        self.light_color = Vec3(1.0, 1.0, 1.0)
        self.light_intensity = 10.0
        self.ambient_intensity = 0.2

    def clear(self, color: Color = Color(0, 0, 0)) -> None:
        """Fill the frame buffer with ``color`` at depth 1."""
        self.frame_buffer = [Pixel(color, 1.0)] * (self.width * self.height)

    def clear_depth(self) -> None:
        self.depth_buffer = [1.0] * (self.width * self.height)

    def render_model(self, model: Model) -> None:
        vertices = model.vertices
        for start in range(0, len(vertices) - 2, 3):
            self.render_triangle(*vertices[start : start + 3])

    def render_triangle(self, v0: Vertex, v1: Vertex, v2: Vertex) -> None:
        """Shade and rasterise one triangle, skipping it if it faces away."""
        shaded = [self._vertex_shader(v) for v in (v0, v1, v2)]
        view_positions = [
            self.view_matrix @ (self.model_matrix @ v.position) for v in (v0, v1, v2)
        ]
        if not self._is_front_face(*view_positions):
            return
        self._rasterize(*shaded)

    def _vertex_shader(self, vertex: Vertex) -> _ShadedVertex:
        world_pos = self.model_matrix @ vertex.position
        view_pos = self.view_matrix @ world_pos
        clip_pos = self.projection_matrix @ view_pos
        screen_pos = self.viewport_matrix @ clip_pos
        normal = (self.normal_matrix @ vertex.normal).normalize()
        return _ShadedVertex(screen_pos, normal, vertex.tex_coord, world_pos)

    def _fragment_shader(self, normal: Vec3, tex_coord: Vec2, world_pos: Vec3) -> Color:
        base = Vec3(1.0, 1.0, 1.0)
        if self.texture is not None and self.texture.is_valid():
            base = self.texture.sample_vec3(tex_coord.x, tex_coord.y)
        return Color.from_vec3(self._lighting(normal, world_pos, base))

    def _rasterize(self, s0: _ShadedVertex, s1: _ShadedVertex, s2: _ShadedVertex) -> None:
        if not all(_finite(s.position) for s in (s0, s1, s2)):
            return
        corners = [(int(s.position.x), int(s.position.y)) for s in (s0, s1, s2)]
        xs = [x for x, _ in corners]
        ys = [y for _, y in corners]
        min_x = max(0, min(xs))
        max_x = min(self.width - 1, max(xs))
        min_y = max(0, min(ys))
        max_y = min(self.height - 1, max(ys))
        a, b, c = (Vec2(float(x), float(y)) for x, y in corners)

        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                bary = barycentric(a, b, c, Vec2(float(x), float(y)))
                if bary.x < 0 or bary.y < 0 or bary.z < 0:
                    continue
                depth = (
                    bary.x * s0.position.z + bary.y * s1.position.z + bary.z * s2.position.z
                )
                if not self._depth_test(x, y, depth):
                    continue
                normal = (
                    s0.normal * bary.x + s1.normal * bary.y + s2.normal * bary.z
                ).normalize()
                tex_coord = s0.tex_coord * bary.x + s1.tex_coord * bary.y + s2.tex_coord * bary.z
                world_pos = s0.world_pos * bary.x + s1.world_pos * bary.y + s2.world_pos * bary.z
                color = self._fragment_shader(normal, tex_coord, world_pos)
                self._set_pixel(x, y, color, depth)

    def _depth_test(self, x: int, y: int, depth: float) -> bool:
        index = y * self.width + x
        if depth < self.depth_buffer[index]:
            self.depth_buffer[index] = depth
            return True
        return False

    def _set_pixel(self, x: int, y: int, color: Color, depth: float) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.frame_buffer[y * self.width + x] = Pixel(color, depth)

    def _lighting(self, normal: Vec3, world_pos: Vec3, base: Vec3) -> Vec3:
        ambient = base * self.ambient_intensity

        light_vector = self.light_position - world_pos
        distance = light_vector.norm()
        light_dir = light_vector.normalize()
        attenuation = self.light_intensity / (
            1.0 + 0.1 * distance + 0.01 * distance * distance
        )

        diffuse_strength = max(0.0, normal.dot(light_dir))
        diffuse = base * self.light_color * diffuse_strength * attenuation

        view_dir = Vec3(0.0, 0.0, 1.0)
        reflect_dir = normal * (2.0 * normal.dot(light_dir)) - light_dir
        specular_strength = max(0.0, view_dir.dot(reflect_dir)) ** 32
        specular = self.light_color * specular_strength * attenuation * 0.5

        return ambient + diffuse + specular

    @staticmethod
    def _is_front_face(v0: Vec3, v1: Vec3, v2: Vec3) -> bool:
        return (v1 - v0).cross(v2 - v0).z < 0

    def color_buffer(self) -> list[Color]:
        """The frame buffer's colours, row by row from the top."""
        return [pixel.color for pixel in self.frame_buffer]

    def to_bmp(self) -> bytes:
        """Encode the frame buffer as an uncompressed 24-bit BMP image."""
        image_size = self.width * self.height * 3
        header = _BMP_HEADER.pack(
            b"BM", 54 + image_size, 0, 54, 40, self.width, self.height,
            1, 24, 0, image_size, 0, 0, 0, 0,
        )
        padding = bytes((4 - (self.width * 3) % 4) % 4)
        rows = []
        for y in reversed(range(self.height)):
            row = self.frame_buffer[y * self.width : (y + 1) * self.width]
            rows.append(bytes(ch for p in row for ch in (p.color.b, p.color.g, p.color.r)))
            rows.append(padding)
        return header + b"".join(rows)

    def save_image(self, path: str | PathLike[str]) -> None:
        Path(path).write_bytes(self.to_bmp())