import math

import pytest

from icosa_lcd.linalg import point
from icosa_lcd.spherical import SphericalCoord, to_cartesian, to_spherical


@pytest.mark.parametrize(
    "xy, expected_deg",
    [
        ((0.0, 0.0), 0.0),
        ((0.0, 1.0), 90.0),
        ((0.0, -1.0), -90.0),
        ((1.0, 0.0), 0.0),
        ((1.0, 1.0), 45.0),
        ((1.0, -1.0), -45.0),
        ((-1.0, 0.0), 180.0),
        ((-1.0, 1.0), 135.0),
        ((-1.0, -1.0), -135.0),
    ],
)
def test_azimuth_quadrants(xy, expected_deg):
    sc = to_spherical(point(xy[0], xy[1], 0.5))
    assert math.isclose(math.degrees(sc.azimuth), expected_deg, abs_tol=1e-12)


def test_inclination_from_pole():
    assert math.isclose(to_spherical(point(0.0, 0.0, 2.0)).inclination, 0.0, abs_tol=1e-15)
    assert math.isclose(to_spherical(point(0.0, 0.0, -2.0)).inclination, math.pi)
    sc = to_spherical(point(1.0, 0.0, 0.0))
    assert math.isclose(sc.inclination, math.pi / 2)
    assert math.isclose(sc.radius, 1.0)


def test_origin_keeps_previous_angles():
    previous = SphericalCoord(radius=1.0, azimuth=0.25, inclination=1.5)
    sc = to_spherical(point(0.0, 0.0, 0.0), previous)
    assert sc.radius == 0.0
    assert sc.azimuth == 0.25
    assert sc.inclination == 1.5


def test_round_trip():
    for az_deg in (-170.0, -90.0, -30.0, 0.0, 36.0, 90.0, 179.0):
        for inc_deg in (5.0, 63.4, 90.0, 121.7, 175.0):
            sc = SphericalCoord(1.0, math.radians(az_deg), math.radians(inc_deg))
            p = to_cartesian(sc)
            back = to_cartesian(to_spherical(p))
            assert all(math.isclose(a, b, abs_tol=1e-9) for a, b in zip(p, back))
            assert math.isclose(math.degrees(to_spherical(p).azimuth), az_deg, abs_tol=1e-9)


def test_degrees_helper():
    sc = SphericalCoord(1.0, math.pi / 2, math.pi / 4)
    az, inc = sc.degrees()
    assert math.isclose(az, 90.0)
    assert math.isclose(inc, 45.0)
