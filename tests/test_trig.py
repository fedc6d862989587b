import math

from icosa_lcd import trig
from icosa_lcd.trig import reference_triangle, solve_oblique

DEG = math.radians


def test_reference_triangle_sides():
    ref = reference_triangle()
    a, b, c, A, B, C = ref.degrees()
    assert math.isclose(a, 20.905, abs_tol=1e-3)
    assert math.isclose(b, 31.717, abs_tol=1e-3)
    assert math.isclose(c, 37.377, abs_tol=1e-3)
    assert math.isclose(A, 36.0)
    assert math.isclose(B, 60.0)
    assert math.isclose(C, 90.0)


def test_reference_triangle_matches_icosahedron():
    """Twice b is an icosahedron edge; twice (a + c) reaches the lower vertex ring."""
    ref = reference_triangle()
    assert math.isclose(2 * ref.b, math.atan(2.0), abs_tol=1e-12)
    assert math.isclose(2 * (ref.a + ref.c), math.pi - math.atan(2.0), abs_tol=1e-12)


def test_right_triangle_pythagoras():
    st = solve_oblique(DEG(30.0), DEG(60.0), DEG(90.0))
    # c is the hypotenuse: cos c = cos a * cos b.
    assert math.isclose(math.cos(st.c), math.cos(st.a) * math.cos(st.b), abs_tol=1e-9)
    assert math.isclose(math.degrees(st.a), 54.7356, abs_tol=1e-3)


def test_unambiguous_case_satisfies_sine_rule():
    st = solve_oblique(DEG(63.0), DEG(90.0), DEG(144.0))
    ratio = math.sin(st.c) / math.sin(st.C)
    assert math.isclose(math.sin(st.a) / math.sin(st.A), ratio, abs_tol=1e-9)
    assert math.isclose(math.sin(st.b) / math.sin(st.B), ratio, abs_tol=1e-9)


class TestAmbiguousCase:
    """b > c with acute C admits two triangles."""

    def test_primary_kept_when_non_negative(self):
        b, c, C = DEG(50.0), DEG(40.0), DEG(30.0)
        (A, B), _ = trig.ambiguous_candidates(b, c, C)
        st = solve_oblique(b, c, C)
        assert A >= 0
        assert math.isclose(st.A, A)
        assert math.isclose(st.B, B)

    def test_negative_primary_switches_to_supplement(self):
        b, c, C = DEG(150.0), DEG(40.0), DEG(30.0)
        (A, B), (A2, B2) = trig.ambiguous_candidates(b, c, C)
        assert A < 0
        assert math.isclose(B2, math.pi - B)
        st = solve_oblique(b, c, C)
        assert st.A >= 0
        assert math.isclose(st.A, A2)
        assert math.isclose(math.degrees(st.B), 157.11, abs_tol=0.01)
        assert math.isclose(math.degrees(st.A), 44.486, abs_tol=1e-3)
        assert math.isclose(
            math.sin(st.a) / math.sin(st.A), math.sin(c) / math.sin(C), abs_tol=1e-9
        )


def test_clamped_inverse_trig():
    assert trig.asin_clamp(1.0 + 1e-15) == math.pi / 2
    assert trig.acos_clamp(-1.0 - 1e-15) == math.pi


def test_vertex_from_triangle_places_c_and_A():
    st, sc, p = trig.vertex_from_triangle(DEG(63.0), DEG(90.0), DEG(144.0))
    assert sc.inclination == st.c
    assert sc.azimuth == st.A
    assert math.isclose(math.sqrt(p[0] ** 2 + p[1] ** 2 + p[2] ** 2), 1.0)
