"""
Unit tests for ClothoidData evaluation and transforms.

Run with: pytest test/test_clothoid_data.py
"""

import pytest
import math
from clothoids.exceptions import PreconditionError
from clothoids.models.clothoid_data import ClothoidData


def _fd(f, s, h=1e-6):
    (xp, yp), (xm, ym) = f(s + h), f(s - h)
    return (xp - xm) / (2 * h), (yp - ym) / (2 * h)


class TestDegenerateCases:
    """Tests that dk = 0 reduces to circles and lines."""

    @pytest.mark.parametrize("s", [0.0, 0.1, 1.0, 5.0, 12.0])
    def test_circle(self, s):
        """Test dk = 0, kappa0 != 0 follows a circle."""
        k = 0.5
        data = ClothoidData(x0=1.0, y0=2.0, theta0=0.3, kappa0=k, dk=0.0)
        R = 1 / k
        cx = 1.0 - R * math.sin(0.3)
        cy = 2.0 + R * math.cos(0.3)
        th = 0.3 + k * s
        x, y = data.eval(s)
        assert abs(x - (cx + R * math.sin(th))) < 1e-12
        assert abs(y - (cy - R * math.cos(th))) < 1e-12

    @pytest.mark.parametrize("s", [0.0, 0.5, 3.0, 40.0])
    def test_line(self, s):
        """Test kappa0 = dk = 0 follows a straight line."""
        data = ClothoidData(x0=-1.0, y0=0.5, theta0=2.0)
        x, y = data.eval(s)
        assert abs(x - (-1.0 + s * math.cos(2.0))) < 1e-12
        assert abs(y - (0.5 + s * math.sin(2.0))) < 1e-12

    def test_heading_and_curvature(self):
        """Test theta and kappa are the quadratic and affine profiles."""
        data = ClothoidData(theta0=0.1, kappa0=0.2, dk=-0.3)
        s = 1.5
        assert abs(data.theta(s) - (0.1 + 0.2 * s - 0.15 * s * s)) < 1e-15
        assert abs(data.kappa(s) - (0.2 - 0.3 * s)) < 1e-15
        assert abs(data.delta_theta(s) - (data.theta(s) - 0.1)) < 1e-15
        theta, kappa, x, y = data.evaluate(s)
        assert (x, y) == data.eval(s)
        assert theta == data.theta(s)
        assert kappa == data.kappa(s)
        assert data.theta_d(s) == data.kappa(s)
        assert data.theta_dd(s) == -0.3
        assert data.theta_ddd(s) == 0.0


class TestDerivatives:
    """Tests of the position derivatives against finite differences."""

    @pytest.mark.parametrize("t", [0.0, 0.3, -0.4])
    def test_derivative_chain(self, t):
        """Test eval_d, eval_dd and eval_ddd with a lateral offset."""
        data = ClothoidData(x0=0.5, y0=-1.0, theta0=0.7, kappa0=0.4, dk=-0.25)
        s = 1.3
        d = data.eval_d(s, t)
        dd = data.eval_dd(s, t)
        ddd = data.eval_ddd(s, t)
        fd1 = _fd(lambda u: data.eval(u, t), s)
        fd2 = _fd(lambda u: data.eval_d(u, t), s)
        fd3 = _fd(lambda u: data.eval_dd(u, t), s)
        for exact, approx in ((d, fd1), (dd, fd2), (ddd, fd3)):
            assert abs(exact[0] - approx[0]) < 1e-7
            assert abs(exact[1] - approx[1]) < 1e-7

    def test_component_accessors(self):
        """Test X/Y and their derivatives match the paired calls."""
        data = ClothoidData(theta0=-0.2, kappa0=0.1, dk=0.05)
        s, t = 2.0, 0.2
        assert data.X(s, t) == data.eval(s, t)[0]
        assert data.Y(s, t) == data.eval(s, t)[1]
        assert data.X_D(s, t) == data.eval_d(s, t)[0]
        assert data.Y_DD(s, t) == data.eval_dd(s, t)[1]
        assert data.X_DDD(s, t) == data.eval_ddd(s, t)[0]

    def test_tangent_and_normal(self):
        """Test tangent and normal are orthonormal and tangent derivatives match."""
        data = ClothoidData(theta0=1.1, kappa0=-0.3, dk=0.2)
        s = 0.8
        tx, ty = data.tg(s)
        nx, ny = data.nor(s)
        assert abs(tx * tx + ty * ty - 1) < 1e-15
        assert abs(tx * nx + ty * ny) < 1e-15
        for f, df in ((data.tg, data.tg_d), (data.tg_d, data.tg_dd),
                      (data.tg_dd, data.tg_ddd)):
            fx, fy = _fd(f, s)
            ex, ey = df(s)
            assert abs(fx - ex) < 1e-7
            assert abs(fy - ey) < 1e-7

    def test_eval_many(self):
        """Test the first Fresnel momentum reproduces the position."""
        data = ClothoidData(x0=1.0, y0=1.0, theta0=0.4, kappa0=0.2, dk=0.1)
        s = 2.5
        C, S = data.eval_many(s)
        x, y = data.eval(s)
        assert abs(data.x0 + s * C[0] - x) < 1e-14
        assert abs(data.y0 + s * S[0] - y) < 1e-14


class TestAsymptoticPoints:
    """Tests for the s -> +/- infinity limits."""

    def test_standard_spiral(self):
        """Test the normalised Fresnel spiral tends to (1/2, 1/2)."""
        data = ClothoidData(dk=math.pi)
        xp, yp = data.p_infinity(plus=True)
        xm, ym = data.p_infinity(plus=False)
        assert abs(xp - 0.5) < 1e-14
        assert abs(yp - 0.5) < 1e-14
        assert abs(xm + 0.5) < 1e-14
        assert abs(ym + 0.5) < 1e-14

    @pytest.mark.parametrize("dk", [1.0, -0.7])
    def test_limit_is_approached(self, dk):
        """Test far points of the curve get close to the limits."""
        data = ClothoidData(x0=2.0, y0=-1.0, theta0=0.3, kappa0=0.5, dk=dk)
        s_far = 5000.0
        for plus, s in ((True, s_far), (False, -s_far)):
            px, py = data.p_infinity(plus)
            x, y = data.eval(s)
            assert math.hypot(x - px, y - py) < 1e-3

    def test_no_limit_for_circle(self):
        """Test a circle has no asymptotic points."""
        with pytest.raises(PreconditionError):
            ClothoidData(kappa0=1.0).p_infinity()


class TestTransforms:
    """Tests for origin shift, reversal, rotation and translation."""

    def test_origin_at(self):
        """Test moving the origin keeps the infinite-support curve."""
        data = ClothoidData(x0=0.2, y0=0.1, theta0=0.5, kappa0=-0.2, dk=0.15)
        shifted = data.copy()
        shifted.origin_at(1.7)
        assert shifted.dk == data.dk
        for s in (-1.0, 0.0, 0.6, 2.0):
            x1, y1 = shifted.eval(s)
            x2, y2 = data.eval(1.7 + s)
            assert abs(x1 - x2) < 1e-12
            assert abs(y1 - y2) < 1e-12

    def test_reverse(self):
        """Test the reversed arc runs through the same points backwards."""
        L = 3.0
        data = ClothoidData(x0=1.0, y0=-2.0, theta0=0.2, kappa0=0.3, dk=-0.1)
        rev = data.copy()
        rev.reverse(L)
        assert abs(rev.kappa0 + data.kappa(L)) < 1e-15
        assert abs(rev.theta0 - data.theta(L) - math.pi) < 1e-15
        for s in (0.0, 1.0, 2.2, L):
            x1, y1 = rev.eval(s)
            x2, y2 = data.eval(L - s)
            assert abs(x1 - x2) < 1e-12
            assert abs(y1 - y2) < 1e-12

    def test_rotate_about_pivot(self):
        """Test rotation by pi/2 about a pivot."""
        data = ClothoidData(x0=2.0, y0=1.0, theta0=0.0)
        data.rotate(math.pi / 2, 1.0, 1.0)
        assert abs(data.x0 - 1.0) < 1e-15
        assert abs(data.y0 - 2.0) < 1e-15
        assert abs(data.theta0 - math.pi / 2) < 1e-15

    def test_translate(self):
        """Test translation moves the origin only."""
        data = ClothoidData(x0=2.0, y0=1.0, theta0=0.4, kappa0=0.1)
        data.translate(-2.0, 3.0)
        assert data.x0 == 0.0
        assert data.y0 == 4.0
        assert data.theta0 == 0.4


class TestBoundingTriangle:
    """Tests for the single covering triangle."""

    @pytest.mark.parametrize("kappa0,dk,L,offs", [
        (0.5, 0.2, 1.5, 0.0),
        (0.0, 0.0, 2.0, 0.0),
        (1e-6, 0.0, 1.0, 0.2),
        (-0.4, -0.1, 2.0, -0.3),
    ])
    def test_contains_arc(self, kappa0, dk, L, offs):
        """Test samples of the arc lie inside its triangle."""
        data = ClothoidData(x0=0.3, y0=0.7, theta0=1.0, kappa0=kappa0, dk=dk)
        tri = data.bb_triangle(L, offs)
        assert tri is not None
        for i in range(51):
            x, y = data.eval(L * i / 50, offs)
            assert tri.is_inside(x, y, margin=1e-9)

    def test_too_much_turning(self):
        """Test no triangle is produced for heading variation >= pi/2."""
        data = ClothoidData(kappa0=1.0)
        assert data.bb_triangle(math.pi / 2) is None
