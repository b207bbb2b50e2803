"""Render a row of textured, lit cubes and save the picture as a BMP file."""

from __future__ import annotations

import argparse
import sys
from typing import Iterator, Sequence

from .linalg import Matrix4, Vec2, Vec3, look_at, perspective, rotate, scale, translate
from .model import Vertex
from .renderer import Renderer
from .texture import Color, Texture

_CORNERS = (
    Vec3(-1, -1, -1), Vec3(1, -1, -1), Vec3(1, 1, -1), Vec3(-1, 1, -1),
    Vec3(-1, -1, 1), Vec3(1, -1, 1), Vec3(1, 1, 1), Vec3(-1, 1, 1),
)

# Two triangles for each side: front, back, left, right, top, bottom.
_SIDES = (
    ((0, 1, 2), (0, 2, 3)),
    ((5, 4, 7), (5, 7, 6)),
    ((4, 0, 3), (4, 3, 7)),
    ((1, 5, 6), (1, 6, 2)),
    ((3, 2, 6), (3, 6, 7)),
    ((4, 5, 1), (4, 1, 0)),
)

_TEX_COORDS = (Vec2(0, 0), Vec2(1, 0), Vec2(0, 1))

_POSITIONS = (
    Vec3(-2, 0, 0),
    Vec3(0, 0, 0),
    Vec3(2, 0, 0),
    Vec3(-1, 1.5, 0),
    Vec3(1, 1.5, 0),
)
_ROTATIONS = (0.0, 30.0, 60.0, 45.0, 90.0)

_BACKGROUND = Color(30, 30, 60)
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_OUTPUT = "demo_output.bmp"


def cube_vertices() -> list[Vertex]:
    """The 36 vertices of a unit cube's 12 triangles, each with its flat face normal."""
    vertices = []
    for side in _SIDES:
        for triangle in side:
            v0, v1, v2 = (_CORNERS[i] for i in triangle)
            normal = (v1 - v0).cross(v2 - v0).normalize()
            vertices.extend(
                Vertex(position, normal, tex)
                for position, tex in zip((v0, v1, v2), _TEX_COORDS)
            )
    return vertices


def _viewport(width: int, height: int) -> Matrix4:
    matrix = Matrix4()
    matrix[0, 0] = width / 2.0
    matrix[1, 1] = height / 2.0
    matrix[2, 2] = 1.0
    matrix[0, 3] = width / 2.0
    matrix[1, 3] = height / 2.0
    return matrix


def _prepare(width: int, height: int) -> Renderer:
    renderer = Renderer(width, height)
    renderer.view_matrix = look_at(Vec3(3, 2, 5), Vec3(0, 0, 0), Vec3(0, 1, 0))
    renderer.projection_matrix = perspective(45.0, width / height, 0.1, 100.0)
    renderer.viewport_matrix = _viewport(width, height)
    renderer.light_color = Vec3(1, 1, 1)
    renderer.ambient_intensity = 0.2
    renderer.texture = Texture.create_default(512, 512)
    renderer.clear(_BACKGROUND)
    renderer.clear_depth()
    return renderer


def _draw_cubes(renderer: Renderer) -> Iterator[int]:
    """Draw each cube in turn, yielding how many have been drawn so far."""
    vertices = cube_vertices()
    for count, (position, angle) in enumerate(zip(_POSITIONS, _ROTATIONS), start=1):
        renderer.model_matrix = (
            translate(position) @ rotate(angle, Vec3(0, 1, 0)) @ scale(Vec3(0.8, 0.8, 0.8))
        )
        for start in range(0, len(vertices), 3):
            renderer.render_triangle(*vertices[start : start + 3])
        yield count


def render_demo(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Renderer:
    """Render the demo scene and return the renderer holding the picture."""
    renderer = _prepare(width, height)
    for _ in _draw_cubes(renderer):
        pass
    return renderer


def _positive(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render the cube demo scene to a BMP file.")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="output BMP path")
    parser.add_argument("--width", type=_positive, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=_positive, default=DEFAULT_HEIGHT)
    args = parser.parse_args(argv)

    print("Software rasteriser demo")
    print("========================")
    renderer = _prepare(args.width, args.height)
    total = len(_POSITIONS)
    for count in _draw_cubes(renderer):
        print(f"Rendered cube {count}/{total}")

    print("Saving image...")
    try:
        renderer.save_image(args.output)
    except OSError as exc:
        print(f"Saving failed: {exc}", file=sys.stderr)
        return 1
    print(f"Done. The picture was saved as {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())