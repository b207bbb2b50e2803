import math

import pytest

from softraster.linalg import (
    Matrix4,
    Vec2,
    Vec3,
    clamp,
    inverse,
    lerp,
    look_at,
    perspective,
    rotate,
    scale,
    translate,
    transpose,
)


def assert_matrix_close(a, b, tol=1e-9):
    for i in range(4):
        for j in range(4):
            assert a[i, j] == pytest.approx(b[i, j], abs=tol)


def test_vector_sum():
    total = Vec3(1, 2, 3) + Vec3(4, 5, 6)
    assert (total.x, total.y, total.z) == (5, 7, 9)


def test_translate_entries():
    trans = translate(Vec3(1, 2, 3))
    assert trans[0, 3] == 1 and trans[1, 3] == 2 and trans[2, 3] == 3


def test_perspective_w_row():
    proj = perspective(45.0, 1.0, 0.1, 100.0)
    assert proj[3, 2] == -1.0
    assert proj[3, 3] == 0.0
    assert proj[0, 0] == pytest.approx(1.0 / math.tan(math.radians(22.5)))


def test_vec3_arithmetic():
    v = Vec3(2, 4, 6)
    assert v - Vec3(1, 1, 1) == Vec3(1, 3, 5)
    assert v * 0.5 == Vec3(1, 2, 3)
    assert 2 * Vec3(1, 2, 3) == Vec3(2, 4, 6)
    assert v / 2 == Vec3(1, 2, 3)
    assert Vec3(1, 2, 3) * Vec3(2, 3, 4) == Vec3(2, 6, 12)
    assert -Vec3(1, -2, 3) == Vec3(-1, 2, -3)


def test_vec3_dot_cross_norm():
    assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32
    assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)
    assert Vec3(3, 4, 0).norm() == 5
    assert Vec3(0, 0, 7).normalize() == Vec3(0, 0, 1)


def test_vec2_operations():
    assert Vec2(1, 2) + Vec2(3, 4) == Vec2(4, 6)
    assert Vec2(3, 4) - Vec2(1, 1) == Vec2(2, 3)
    assert Vec2(1, 2) * 3 == Vec2(3, 6)
    assert Vec2(4, 2) / 2 == Vec2(2, 1)
    assert Vec2(3, 4).norm() == 5
    assert Vec2(1, 2).dot(Vec2(3, 4)) == 11
    assert Vec2(0, 5).normalize() == Vec2(0, 1)


def test_zero_vector_normalize_gives_nan():
    n = Vec3().normalize()
    flags = [math.isnan(component) for component in (n.x, n.y, n.z)]
    assert flags == [True, True, True]
    m = Vec2().normalize()
    assert [math.isnan(m.x), math.isnan(m.y)] == [True, True]


def test_identity_and_product():
    m = translate(Vec3(1, 2, 3))
    assert Matrix4.identity() @ m == m
    assert m @ Matrix4() == m
    combined = translate(Vec3(1, 0, 0)) @ translate(Vec3(0, 2, 0))
    assert combined @ Vec3(0, 0, 0) == Vec3(1, 2, 0)


def test_matrix_rejects_bad_shape():
    with pytest.raises(ValueError):
        Matrix4([[1, 2, 3]])


def test_transform_point_divides_by_w():
    m = Matrix4()
    m[3, 3] = 2.0
    assert m.transform_point(Vec3(2, 4, 6)) == Vec3(1, 2, 3)


def test_scale_matrix():
    assert scale(Vec3(2, 3, 4)) @ Vec3(1, 1, 1) == Vec3(2, 3, 4)


def test_rotate_about_y():
    p = rotate(90, Vec3(0, 1, 0)) @ Vec3(1, 0, 0)
    assert p.x == pytest.approx(0, abs=1e-12)
    assert p.y == pytest.approx(0, abs=1e-12)
    assert p.z == pytest.approx(-1)


def test_transpose_is_involution():
    m = rotate(30, Vec3(1, 1, 0)) @ translate(Vec3(1, 2, 3))
    assert transpose(transpose(m)) == m
    assert transpose(m)[0, 3] == m[3, 0]


def test_inverse_of_rigid_transform():
    m = translate(Vec3(1, 2, 3)) @ rotate(30, Vec3(0, 1, 0))
    assert_matrix_close(m @ inverse(m), Matrix4())
    inv = inverse(translate(Vec3(1, 2, 3)))
    assert (inv[0, 3], inv[1, 3], inv[2, 3]) == (-1, -2, -3)


def test_look_at_layout():
    view = look_at(Vec3(0, 0, 5), Vec3(0, 0, 0), Vec3(0, 1, 0))
    expected = Matrix4(
        [
            [1, 0, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 1, 0],
            [0, 0, -5, 1],
        ]
    )
    assert_matrix_close(view, expected)


def test_clamp_and_lerp():
    assert clamp(2.0, 0.0, 1.0) == 1.0
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(0.25, 0.0, 1.0) == 0.25
    assert lerp(2.0, 4.0, 0.5) == 3.0
    assert lerp(Vec3(0, 0, 0), Vec3(2, 4, 6), 0.5) == Vec3(1, 2, 3)
    assert lerp(Vec2(0, 0), Vec2(2, 4), 0.25) == Vec2(0.5, 1)