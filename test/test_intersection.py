"""
Unit tests for the intersection engine and collision tests.

Run with: pytest test/test_intersection.py
"""

import pytest
import math
from clothoids import ClothoidCurve, CircleArc, LineSegment, Settings
from clothoids import config
from clothoids.exceptions import DegenerateGeometryError
from clothoids.geometry.intersection import solve_2x2


def _quarter_circle():
    # unit circle around the origin, from (1, 0) to (0, 1)
    return ClothoidCurve(1, 0, math.pi / 2, 1.0, 0.0, math.pi / 2)


class TestSolve2x2:
    """Tests for the 2x2 linear solver."""

    def test_regular(self):
        """Test a well conditioned system."""
        x = solve_2x2(((2.0, 1.0), (1.0, 3.0)), (3.0, 5.0))
        assert abs(x[0] - 0.8) < 1e-15
        assert abs(x[1] - 1.4) < 1e-15

    def test_singular(self):
        """Test singular matrices are detected."""
        assert solve_2x2(((1.0, 2.0), (2.0, 4.0)), (1.0, 1.0)) is None
        assert solve_2x2(((0.0, 0.0), (0.0, 0.0)), (1.0, 1.0)) is None


class TestIntersect:
    """Tests for exact crossings."""

    def test_line_crosses_arc_once(self):
        """Test a segment crossing a quarter circle yields exactly one pair."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        s1, s2 = line.intersect(_quarter_circle())
        assert len(s1) == len(s2) == 1
        assert abs(s1[0] - (2 + math.sqrt(0.75))) < 1e-9
        assert abs(s2[0] - math.pi / 6) < 1e-9

    def test_primitive_inputs(self):
        """Test LineSegment and CircleArc are accepted directly."""
        arc = CircleArc(1, 0, math.pi / 2, 1.0, math.pi / 2)
        line = LineSegment(-2, 0.5, 0, 4)
        s1, s2 = ClothoidCurve.from_line(line).intersect_arc(arc)
        assert len(s1) == 1
        assert abs(s2[0] - math.pi / 6) < 1e-9
        s2b, s1b = _quarter_circle().intersect_line(line)
        assert abs(s2b[0] - math.pi / 6) < 1e-9
        assert abs(s1b[0] - s1[0]) < 1e-9

    def test_line_crosses_half_circle_twice(self):
        """Test both crossings are found and sorted on the first curve."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        half = ClothoidCurve(1, 0, math.pi / 2, 1.0, 0.0, math.pi)
        s1, s2 = line.intersect(half)
        assert len(s1) == 2
        assert abs(s1[0] - (2 - math.sqrt(0.75))) < 1e-9
        assert abs(s1[1] - (2 + math.sqrt(0.75))) < 1e-9
        assert abs(s2[0] - 5 * math.pi / 6) < 1e-9
        assert abs(s2[1] - math.pi / 6) < 1e-9

    def test_clothoid_pair(self):
        """Test crossings of two spirals coincide in the plane."""
        c1 = ClothoidCurve(0, 0, 0, 0.0, 0.3, 6)
        c2 = ClothoidCurve(1.5, -2, math.pi / 2, 0.02, 0.01, 6)
        s1, s2 = c1.intersect_clothoid(c2)
        assert len(s1) >= 1
        for a, b in zip(s1, s2):
            assert 0 <= a <= c1.length()
            assert 0 <= b <= c2.length()
            x1, y1 = c1.eval(a)
            x2, y2 = c2.eval(b)
            assert math.hypot(x1 - x2, y1 - y2) < 1e-9

    def test_offset_curve(self):
        """Test crossings of a laterally offset curve."""
        line = ClothoidCurve(-2, 0, 0, 0, 0, 4)
        s1, s2 = line.intersect(_quarter_circle(), offs=0.5)
        assert len(s1) == 1
        assert abs(s2[0] - math.pi / 6) < 1e-9

    def test_disjoint_curves(self):
        """Test far apart curves have no crossings."""
        c1 = ClothoidCurve(0, 0, 0, 0.1, 0.0, 5)
        c2 = ClothoidCurve(0, 10, 0, -0.1, 0.0, 5)
        s1, s2 = c1.intersect(c2)
        assert s1 == []
        assert s2 == []

    def test_zero_length(self):
        """Test an empty arc is rejected."""
        with pytest.raises(DegenerateGeometryError):
            ClothoidCurve(L=1).intersect(ClothoidCurve(L=0))


class TestCollision:
    """Tests for the boolean collision variants."""

    def test_collision(self):
        """Test crossing and non crossing pairs."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        assert line.collision(_quarter_circle())
        far = ClothoidCurve(-2, 5.0, 0, 0, 0, 4)
        assert not far.collision(_quarter_circle())

    def test_approximate_collision_is_conservative(self):
        """Test triangle overlap never misses a true crossing."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        assert line.approximate_collision(_quarter_circle())
        far = ClothoidCurve(-2, 5.0, 0, 0, 0, 4)
        assert not far.approximate_collision(_quarter_circle())

    def test_approximate_collision_resolution(self):
        """Test a near miss is reported only at coarse resolution."""
        # line at distance 1.04 from the center, normal to the direction pi/8
        u = math.pi / 8
        heading = u + math.pi / 2
        px = 1.04 * math.cos(u) - 1.5 * math.cos(heading)
        py = 1.04 * math.sin(u) - 1.5 * math.sin(heading)
        line = ClothoidCurve(px, py, heading, 0, 0, 3.0)
        circle = _quarter_circle()
        assert not line.collision(circle)
        assert line.approximate_collision(circle, max_angle=math.pi / 3)
        assert not line.approximate_collision(circle, max_angle=math.pi / 64)


class TestSplitBoundaryCrossing:
    """Tests for crossings found from two neighbouring sub-arcs."""

    def test_crossing_on_sub_arc_boundary(self):
        """Test a crossing at a sub-arc end point is reported once."""
        # the quarter circle is bisected at s = pi/4, exactly where y = sqrt(0.5)
        line = ClothoidCurve(-2, math.sqrt(0.5), 0, 0, 0, 4)
        circle = _quarter_circle()
        assert any(abs(rec.s0 - math.pi / 4) < 1e-15 for rec in circle.bb_split())
        s1, s2 = line.intersect(circle)
        assert len(s1) == len(s2) == 1
        assert abs(s1[0] - (2 + math.sqrt(0.5))) < 1e-9
        assert abs(s2[0] - math.pi / 4) < 1e-9

    def test_boundary_crossing_both_orders(self):
        """Test the reversed query finds the same single crossing."""
        line = ClothoidCurve(-2, math.sqrt(0.5), 0, 0, 0, 4)
        s2, s1 = _quarter_circle().intersect(line)
        assert len(s1) == 1
        assert abs(s2[0] - math.pi / 4) < 1e-9


class TestIntersectOverrides:
    """Tests for per-call budgets and settings objects."""

    def test_max_iter_keyword(self):
        """Test a one-step Newton budget cannot polish any crossing."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        s1, _ = line.intersect(_quarter_circle(), max_iter=1)
        assert s1 == []

    def test_settings_object(self):
        """Test the budget of a settings object is used for omitted keywords."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        tight = Settings(intersect_max_iter=1)
        s1, _ = line.intersect(_quarter_circle(), settings=tight)
        assert s1 == []
        assert not line.collision(_quarter_circle(), settings=tight)
        s1, _ = line.intersect(_quarter_circle(), max_iter=20, settings=tight)
        assert len(s1) == 1

    def test_fine_angle_and_max_level(self):
        """Test coarser Newton sub-arcs and a depth cap still find the crossing."""
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        for kwargs in ({"fine_angle": math.pi / 7}, {"max_level": 0}):
            s1, s2 = line.intersect(_quarter_circle(), **kwargs)
            assert len(s1) == 1
            assert abs(s2[0] - math.pi / 6) < 1e-9

    def test_settings_from_environment(self, monkeypatch):
        """Test settings read from CLOTHOIDS_* variables drive the query."""
        monkeypatch.setenv("CLOTHOIDS_INTERSECT_MAX_ITER", "1")
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        s1, _ = line.intersect(_quarter_circle(), settings=Settings.from_env())
        assert s1 == []

    def test_process_defaults_are_used(self, monkeypatch):
        """Test replacing the process defaults changes calls without settings."""
        monkeypatch.setattr(config, "DEFAULT_SETTINGS",
                            Settings.from_env({"CLOTHOIDS_INTERSECT_MAX_ITER": "1"}))
        line = ClothoidCurve(-2, 0.5, 0, 0, 0, 4)
        assert not line.collision(_quarter_circle())
        monkeypatch.undo()
        assert line.collision(_quarter_circle())
