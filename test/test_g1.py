"""
Unit tests for the G1 Hermite solver and the forward problem.

Run with: pytest test/test_g1.py
"""

import pytest
import math
from clothoids.exceptions import ConvergenceError, DegenerateGeometryError
from clothoids.fitting.g1 import build_g1, build_g1_d, build_forward, solve_shape
from clothoids.models.clothoid_data import ClothoidData


class TestG1Examples:
    """Tests with known closed-form answers."""

    def test_straight_segment(self):
        """Test (0,0,0) -> (1,0,0) gives the unit segment."""
        sol = build_g1(0, 0, 0, 1, 0, 0)
        assert abs(sol.data.kappa0) < 1e-12
        assert abs(sol.data.dk) < 1e-12
        assert abs(sol.length - 1) < 1e-12
        assert sol.iterations == 0

    def test_quarter_circle(self):
        """Test a quarter of the unit circle is recovered."""
        sol = build_g1(0, 0, 0, 1, 1, math.pi / 2)
        assert abs(sol.data.kappa0 - 1) < 1e-10
        assert abs(sol.data.dk) < 1e-10
        assert abs(sol.length - math.pi / 2) < 1e-10

    def test_end_pose_is_reached(self):
        """Test the fitted curve ends at the requested pose."""
        x1, y1, th1 = 3.0, 2.0, -0.4
        sol = build_g1(0.5, -0.5, 1.2, x1, y1, th1)
        x, y = sol.data.eval(sol.length)
        assert abs(x - x1) < 1e-10
        assert abs(y - y1) < 1e-10
        dth = sol.data.theta(sol.length) - th1
        assert abs(math.remainder(dth, 2 * math.pi)) < 1e-10

    def test_shape_solver_converges(self):
        """Test the Newton iteration needs only a few steps."""
        A, niter = solve_shape(0.3, -0.8, 1e-12, 20)
        assert niter <= 10
        assert math.isfinite(A)


class TestG1RoundTrip:
    """Tests fitting poses sampled from a known clothoid."""

    @pytest.mark.parametrize("s", [0.5, 2.0, 4.0])
    def test_round_trip(self, s):
        """Test the fit from C(0) to C(s) reproduces (kappa0, dk, s)."""
        ref = ClothoidData(x0=1.0, y0=-2.0, theta0=0.4, kappa0=0.3, dk=-0.1)
        x1, y1 = ref.eval(s)
        sol = build_g1(ref.x0, ref.y0, ref.theta0, x1, y1, ref.theta(s))
        assert abs(sol.data.kappa0 - ref.kappa0) < 1e-8
        assert abs(sol.data.dk - ref.dk) < 1e-8
        assert abs(sol.length - s) < 1e-8

    def test_round_trip_with_flex(self):
        """Test a clothoid whose curvature changes sign."""
        ref = ClothoidData(theta0=-0.5, kappa0=-0.6, dk=0.5)
        s = 2.5
        x1, y1 = ref.eval(s)
        sol = build_g1(0, 0, -0.5, x1, y1, ref.theta(s))
        assert abs(sol.data.kappa0 - ref.kappa0) < 1e-8
        assert abs(sol.data.dk - ref.dk) < 1e-8
        assert abs(sol.length - s) < 1e-8

    def test_round_trip_large_turning(self):
        """Test an arc turning by almost 5 rad keeps its direction of rotation."""
        ref = ClothoidData(x0=0.0, y0=0.0, theta0=0.248, kappa0=0.927, dk=0.617)
        s = 2.79
        x1, y1 = ref.eval(s)
        assert ref.theta(s) - ref.theta0 > math.pi
        sol = build_g1(0, 0, 0.248, x1, y1, ref.theta(s))
        assert abs(sol.data.kappa0 - ref.kappa0) < 1e-8
        assert abs(sol.data.dk - ref.dk) < 1e-8
        assert abs(sol.length - s) < 1e-8
        assert abs(sol.data.theta(sol.length) - ref.theta(s)) < 1e-8

    def test_clockwise_turning_is_kept(self):
        """Test a negative turning beyond -pi is fitted clockwise."""
        ref = ClothoidData(x0=1.0, y0=1.0, theta0=-0.248, kappa0=-0.927, dk=-0.617)
        s = 2.79
        x1, y1 = ref.eval(s)
        assert ref.theta(s) - ref.theta0 < -math.pi
        sol = build_g1(1.0, 1.0, -0.248, x1, y1, ref.theta(s))
        assert sol.data.kappa0 < 0
        assert abs(sol.data.kappa0 - ref.kappa0) < 1e-8
        assert abs(sol.data.dk - ref.dk) < 1e-8
        assert abs(sol.length - s) < 1e-8


class TestG1Errors:
    """Tests for the failure modes of the solver."""

    def test_coincident_points(self):
        """Test coincident end points are rejected as degenerate."""
        with pytest.raises(DegenerateGeometryError):
            build_g1(1, 1, 0, 1, 1, 1)

    def test_degenerate_is_value_error(self):
        """Test degenerate input can be caught as ValueError."""
        with pytest.raises(ValueError):
            build_g1(0, 0, 0, 0, 0, 0.5)

    def test_iteration_budget(self):
        """Test a zero iteration budget raises ConvergenceError."""
        with pytest.raises(ConvergenceError) as exc_info:
            build_g1(0, 0, 0, 1, 0.5, 1.0, max_iter=0)
        assert exc_info.value.iterations == 0
        assert exc_info.value.residual > 0
        assert isinstance(exc_info.value, RuntimeError)


class TestG1Gradient:
    """Tests of the implicit derivatives against finite differences."""

    def test_gradient(self):
        """Test d(L, kappa0, dk)/d(theta0, theta1)."""
        pose0 = (0.0, 0.0, 0.3)
        pose1 = (2.0, 1.0, -0.2)
        sol, grad = build_g1_d(*pose0, *pose1)
        h = 1e-6

        def fit(th0, th1):
            s = build_g1(pose0[0], pose0[1], th0, pose1[0], pose1[1], th1)
            return s.length, s.data.kappa0, s.data.dk

        for i in range(2):
            plus = [pose0[2], pose1[2]]
            minus = [pose0[2], pose1[2]]
            plus[i] += h
            minus[i] -= h
            fp = fit(*plus)
            fm = fit(*minus)
            fd = [(a - b) / (2 * h) for a, b in zip(fp, fm)]
            assert abs(grad.L_D[i] - fd[0]) < 1e-6
            assert abs(grad.k_D[i] - fd[1]) < 1e-6
            assert abs(grad.dk_D[i] - fd[2]) < 1e-6

    def test_gradient_solution_matches_plain_fit(self):
        """Test the gradient companion returns the same curve."""
        sol, _ = build_g1_d(0, 0, 0.1, 1, 2, 0.9)
        plain = build_g1(0, 0, 0.1, 1, 2, 0.9)
        assert sol.length == plain.length
        assert sol.data == plain.data


class TestForward:
    """Tests for the forward problem (fixed initial curvature, free end heading)."""

    def test_recovers_reference(self):
        """Test a reference clothoid is recovered from its start and end point."""
        ref = ClothoidData(theta0=0.2, kappa0=0.2, dk=0.1)
        L = 3.0
        x1, y1 = ref.eval(L)
        sol = build_forward(0, 0, 0.2, 0.2, x1, y1)
        assert sol is not None
        assert abs(sol.data.kappa0 - 0.2) < 1e-8
        assert abs(sol.data.dk - 0.1) < 1e-8
        assert abs(sol.length - L) < 1e-8

    def test_coincident_points(self):
        """Test the forward problem rejects coincident points."""
        with pytest.raises(DegenerateGeometryError):
            build_forward(0, 0, 0, 0.1, 0, 0)
