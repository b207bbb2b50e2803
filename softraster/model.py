"""Triangle meshes loaded from Wavefront OBJ text."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Sequence, TypeVar

from .linalg import Vec2, Vec3

_T = TypeVar("_T")


@dataclass(frozen=True)
class Vertex:
    """A fully resolved mesh vertex."""

    position: Vec3 = Vec3()
    normal: Vec3 = Vec3()
    tex_coord: Vec2 = Vec2()


@dataclass(frozen=True)
class Face:
    """Zero-based indices of a triangle's corners; -1 marks a missing index."""

    vertices: tuple[int, int, int] = (-1, -1, -1)
    tex_coords: tuple[int, int, int] = (-1, -1, -1)
    normals: tuple[int, int, int] = (-1, -1, -1)


def _lookup(items: Sequence[_T], index: int, default: _T) -> _T:
    return items[index] if 0 <= index < len(items) else default


def _floats(fields: list[str], count: int, line_no: int) -> list[float]:
    if len(fields) < count:
        raise ValueError(f"line {line_no}: expected {count} numbers, got {len(fields)}")
    try:
        return [float(field) for field in fields[:count]]
    except ValueError as exc:
        raise ValueError(f"line {line_no}: {exc}") from None


def _corner(token: str, line_no: int) -> tuple[int, int, int]:
    """Split a ``v/vt/vn`` corner reference into zero-based indices."""
    fields = token.split("/")

    def index(position: int) -> int:
        if position >= len(fields) or not fields[position]:
            return -1
        try:
            return int(fields[position]) - 1
        except ValueError:
            raise ValueError(
                f"line {line_no}: bad face index {fields[position]!r}"
            ) from None

    return index(0), index(1), index(2)


class Model:
    """A mesh made of triangles, with per-corner vertices ready to render."""

    def __init__(
        self,
        positions: Sequence[Vec3] = (),
        normals: Sequence[Vec3] = (),
        tex_coords: Sequence[Vec2] = (),
        faces: Sequence[Face] = (),
    ) -> None:
        self.positions: list[Vec3] = list(positions)
        self.normals: list[Vec3] = list(normals)
        self.tex_coords: list[Vec2] = list(tex_coords)
        self.faces: list[Face] = list(faces)
        self.vertices: list[Vertex] = []
        self._process()

    @classmethod
    def parse(cls, text: str) -> Model:
        """Build a model from OBJ text; only the first three corners of a face are used."""
        positions: list[Vec3] = []
        normals: list[Vec3] = []
        tex_coords: list[Vec2] = []
        faces: list[Face] = []

        for line_no, line in enumerate(text.splitlines(), start=1):
            fields = line.split()
            if not fields:
                continue
            keyword, args = fields[0], fields[1:]
            if keyword == "v":
                positions.append(Vec3(*_floats(args, 3, line_no)))
            elif keyword == "vn":
                normals.append(Vec3(*_floats(args, 3, line_no)))
            elif keyword == "vt":
                tex_coords.append(Vec2(*_floats(args, 2, line_no)))
            elif keyword == "f":
                if len(args) < 3:
                    raise ValueError(f"line {line_no}: a face needs three vertices")
                corners = [_corner(token, line_no) for token in args[:3]]
                v, t, n = zip(*corners)
                faces.append(Face(vertices=v, tex_coords=t, normals=n))

        return cls(positions, normals, tex_coords, faces)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> Model:
        return cls.parse(Path(path).read_text())

    def _face_normal(self, face: Face) -> Vec3:
        v0, v1, v2 = (_lookup(self.positions, i, Vec3()) for i in face.vertices)
        return (v1 - v0).cross(v2 - v0).normalize()

    def _resolve(self, face: Face, corner: int) -> Vertex:
        position = _lookup(self.positions, face.vertices[corner], Vec3())
        normal_index = face.normals[corner]
        if 0 <= normal_index < len(self.normals):
            normal = self.normals[normal_index]
        else:
            normal = self._face_normal(face)
        tex_coord = _lookup(self.tex_coords, face.tex_coords[corner], Vec2())
        return Vertex(position, normal, tex_coord)

    def _process(self) -> None:
        self.vertices = [
            self._resolve(face, corner) for face in self.faces for corner in range(3)
        ]

    def face_count(self) -> int:
        return len(self.faces)

    def face_vertices(self, index: int) -> tuple[Vertex, Vertex, Vertex]:
        """The three resolved vertices of face ``index``."""
        if index < 0 or index * 3 + 2 >= len(self.vertices):
            raise IndexError(f"face index {index} out of range")
        start = index * 3
        v0, v1, v2 = self.vertices[start : start + 3]
        return v0, v1, v2

    def bounding_box(self) -> tuple[Vec3, Vec3]:
        """Component-wise minimum and maximum of all positions; zeros when empty."""
        if not self.positions:
            return Vec3(), Vec3()
        xs, ys, zs = zip(*((p.x, p.y, p.z) for p in self.positions))
        return Vec3(min(xs), min(ys), min(zs)), Vec3(max(xs), max(ys), max(zs))

    def center(self) -> None:
        """Move the model so that its bounding box is centred on the origin."""
        low, high = self.bounding_box()
        middle = (low + high) * 0.5
        self.positions = [p - middle for p in self.positions]
        self._process()

    def scale(self, factor: float) -> None:
        """Scale every position about the origin."""
        self.positions = [p * factor for p in self.positions]
        self._process()