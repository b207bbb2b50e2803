"""Vector and matrix types plus the transform helpers used by the rasteriser."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics: zero divisors give inf or nan instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


@dataclass(frozen=True)
class Vec2:
    """A two-component vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec2:
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return Vec2(_div(self.x, divisor), _div(self.y, divisor))

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def norm(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction (nan components for a zero vector)."""
        return self / self.norm()

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y


@dataclass(frozen=True)
class Vec3:
    """A three-component vector; also used for RGB colours in the 0..1 range."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: float | Vec3) -> Vec3:
        """Scale by a number, or multiply component-wise by another vector."""
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, (int, float)):
            return Vec3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec3:
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return Vec3(_div(self.x, divisor), _div(self.y, divisor), _div(self.z, divisor))

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Vec3:
        """Unit vector in the same direction (nan components for a zero vector)."""
        return self / self.norm()

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


class Matrix4:
    """A 4x4 row-major matrix; a fresh matrix is the identity."""

    __slots__ = ("_m",)

    def __init__(self, rows: Iterable[Iterable[float]] | None = None) -> None:
        if rows is None:
            self._m = [[1.0 if i == j else 0.0 for j in range(4)] for i in range(4)]
            return
        m = [[float(value) for value in row] for row in rows]
        if len(m) != 4 or any(len(row) != 4 for row in m):
            raise ValueError("a Matrix4 needs exactly 4 rows of 4 values")
        self._m = m

    @classmethod
    def identity(cls) -> Matrix4:
        return cls()

    @property
    def rows(self) -> tuple[tuple[float, ...], ...]:
        return tuple(tuple(row) for row in self._m)

    def __getitem__(self, key: tuple[int, int]) -> float:
        i, j = key
        return self._m[i][j]

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        i, j = key
        self._m[i][j] = float(value)

    def __matmul__(self, other: Matrix4 | Vec3) -> Matrix4 | Vec3:
        if isinstance(other, Matrix4):
            columns = list(zip(*other._m))
            return Matrix4(
                [sum(a * b for a, b in zip(row, column)) for column in columns]
                for row in self._m
            )
        if isinstance(other, Vec3):
            return self.transform_point(other)
        return NotImplemented

    def transform_point(self, point: Vec3) -> Vec3:
        """Apply the matrix to a point with w=1 and divide by the resulting w."""

        def apply(row: Sequence[float]) -> float:
            return row[0] * point.x + row[1] * point.y + row[2] * point.z + row[3]

        r0, r1, r2, r3 = self._m
        w = apply(r3)
        return Vec3(_div(apply(r0), w), _div(apply(r1), w), _div(apply(r2), w))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return self._m == other._m

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix4({self._m!r})"


def perspective(fov: float, aspect: float, near: float, far: float) -> Matrix4:
    """Perspective projection; ``fov`` is the vertical field of view in degrees."""
    f = 1.0 / math.tan(math.radians(fov * 0.5))
    result = Matrix4()
    result[0, 0] = f / aspect
    result[1, 1] = f
    result[2, 2] = (far + near) / (near - far)
    result[2, 3] = (2.0 * far * near) / (near - far)
    result[3, 2] = -1.0
    result[3, 3] = 0.0
    return result


def look_at(eye: Vec3, center: Vec3, up: Vec3) -> Matrix4:
    """View matrix looking from ``eye`` towards ``center``."""
    f = (center - eye).normalize()
    s = f.cross(up).normalize()
    u = s.cross(f)
    result = Matrix4()
    result[0, 0], result[0, 1], result[0, 2] = s.x, s.y, s.z
    result[1, 0], result[1, 1], result[1, 2] = u.x, u.y, u.z
    result[2, 0], result[2, 1], result[2, 2] = -f.x, -f.y, -f.z
    result[3, 0] = -s.dot(eye)
    result[3, 1] = -u.dot(eye)
    result[3, 2] = f.dot(eye)
    return result


def translate(v: Vec3) -> Matrix4:
    result = Matrix4()
    result[0, 3] = v.x
    result[1, 3] = v.y
    result[2, 3] = v.z
    return result


def rotate(angle: float, axis: Vec3) -> Matrix4:
    """Rotation by ``angle`` degrees about ``axis``."""
    radians = math.radians(angle)
    c = math.cos(radians)
    s = math.sin(radians)
    a = axis.normalize()
    k = 1.0 - c
    return Matrix4(
        [
            [a.x * a.x * k + c, a.x * a.y * k - a.z * s, a.x * a.z * k + a.y * s, 0.0],
            [a.y * a.x * k + a.z * s, a.y * a.y * k + c, a.y * a.z * k - a.x * s, 0.0],
            [a.z * a.x * k - a.y * s, a.z * a.y * k + a.x * s, a.z * a.z * k + c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def scale(v: Vec3) -> Matrix4:
    result = Matrix4()
    result[0, 0] = v.x
    result[1, 1] = v.y
    result[2, 2] = v.z
    return result


def transpose(m: Matrix4) -> Matrix4:
    return Matrix4(zip(*m.rows))


def inverse(m: Matrix4) -> Matrix4:
    """Inverse of a rigid transform (rotation plus translation only)."""
    result = Matrix4()
    for i in range(3):
        for j in range(3):
            result[i, j] = m[j, i]
    translation = Vec3(-m[0, 3], -m[1, 3], -m[2, 3])
    for i in range(3):
        result[i, 3] = (
            result[i, 0] * translation.x
            + result[i, 1] * translation.y
            + result[i, 2] * translation.z
        )
    result[3, 3] = 1.0
    return result


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def lerp(a, b, t: float):
    """Linear interpolation between two numbers or two vectors."""
    return a + (b - a) * t