import math

import pytest

from icosa_lcd.linalg import identity, multiply, point, transform
from icosa_lcd.symmetry import (
    REGION_COUNT,
    build_region_transforms,
    build_transforms,
    rotation_matrix_from_triangle,
)


def _close(a, b, tol=1e-9):
    return all(math.isclose(x, y, abs_tol=tol) for x, y in zip(a, b))


@pytest.fixture(scope="module")
def face():
    return build_transforms()


@pytest.fixture(scope="module")
def regions(face):
    return build_region_transforms(face)


def test_face_transform_pair_is_inverse(face):
    assert _close(multiply(face.to_global, face.to_local), identity())


def test_face_centre_maps_to_global_z(face):
    """The equatorial face's centroid lands on the +Z axis of the face frame."""
    ridge = math.atan(2.0)
    corners = [
        (math.sin(ridge), 0.0, math.cos(ridge)),
        (math.sin(ridge) * math.cos(math.radians(36.0)), math.sin(ridge) * math.sin(math.radians(36.0)), -math.cos(ridge)),
        (math.sin(ridge) * math.cos(math.radians(36.0)), -math.sin(ridge) * math.sin(math.radians(36.0)), -math.cos(ridge)),
    ]
    cx, cy, cz = (sum(c[i] for c in corners) / 3 for i in range(3))
    n = math.sqrt(cx * cx + cy * cy + cz * cz)
    g = transform(face.to_global, point(cx / n, cy / n, cz / n))
    assert _close(g, (0.0, 0.0, 1.0, 1.0))


def test_first_subface_rotation_is_identity(face):
    assert _close(face.rotations[0], identity())
    assert _close(face.inverse_rotations[0], identity())


def test_subface_rotations_step_by_120_degrees(face):
    p = point(1.0, 0.0, 0.0)
    q = transform(face.rotations[1], p)
    assert _close(q, (math.cos(math.radians(-120.0)), math.sin(math.radians(-120.0)), 0.0, 1.0))
    assert _close(transform(face.inverse_rotations[1], q), p)


def test_diagonal_is_identity(regions):
    for i in range(REGION_COUNT):
        assert _close(regions.matrix(i, i), identity(), tol=1e-15)


def test_all_pairs_are_mutual_inverses(regions):
    p = point(0.11, -0.07, 0.99)
    for i in range(REGION_COUNT):
        for j in range(REGION_COUNT):
            back = regions.exchange(j, i, regions.exchange(i, j, p))
            assert _close(back, p), (i, j)


def test_images_keep_height_and_radius(regions):
    p = point(0.12, -0.05, 0.98)
    r = math.sqrt(p[0] ** 2 + p[1] ** 2)
    images = [regions.exchange(0, j, p) for j in range(REGION_COUNT)]
    for q in images:
        assert math.isclose(q[2], p[2], abs_tol=1e-12)
        assert math.isclose(math.hypot(q[0], q[1]), r, abs_tol=1e-12)
    # Six distinct images for a point away from the mirror lines.
    for a in range(REGION_COUNT):
        for b in range(a + 1, REGION_COUNT):
            assert not _close(images[a], images[b], tol=1e-6)


def test_region_five_is_x_mirror_of_region_zero(regions):
    p = point(0.12, -0.05, 0.98)
    assert _close(regions.exchange(0, 5, p), (-0.12, -0.05, 0.98, 1.0), tol=1e-12)


def test_region_chain_composes(regions):
    p = point(0.2, -0.1, 0.97)
    via = regions.exchange(2, 4, regions.exchange(0, 2, p))
    assert _close(via, regions.exchange(0, 4, p))


def test_region_index_bounds(regions):
    with pytest.raises(IndexError):
        regions.matrix(0, 6)
    with pytest.raises(IndexError):
        regions.exchange(-1, 0, point(0.0, 0.0, 1.0))


def test_rotation_from_triangle_axes():
    m, mt = rotation_matrix_from_triangle(
        point(1.0, 0.0, 0.0), point(0.0, 1.0, 0.0), point(0.0, 0.0, 0.0)
    )
    assert _close(m, identity())
    assert _close(mt, identity())
