"""
CLOTHOID DATA MODULE

@Description: Canonical parameters of a clothoid (Euler spiral) and the pure
evaluation of its geometry. The curve has infinite support: nothing in here
knows about a length, which is passed explicitly where needed.

    kappa(s) = kappa0 + dk*s
    theta(s) = theta0 + kappa0*s + dk*s^2/2
    x(s)     = x0 + int_0^s cos(theta(u)) du
    y(s)     = y0 + int_0^s sin(theta(u)) du

A lateral offset t moves the point along the left normal (-sin, cos).
"""

from dataclasses import dataclass
import math
from typing import Tuple

from ..exceptions import PreconditionError
from ..special.fresnel import generalized_fresnel_cs, generalized_fresnel_cs1
from ..special.trig import M_PI, M_PI_2
from .triangle import Triangle2D


@dataclass
class Pose:
    """A position and a heading (radians): the unit of boundary conditions."""
    x: float
    y: float
    theta: float


@dataclass
class ClothoidData:
    """
    Canonical clothoid parameters.

    Attributes:
        x0: x coordinate of the origin
        y0: y coordinate of the origin
        theta0: heading at the origin (radians)
        kappa0: curvature at the origin
        dk: curvature derivative with respect to arclength
    """

    x0: float = 0.0
    y0: float = 0.0
    theta0: float = 0.0
    kappa0: float = 0.0
    dk: float = 0.0

    def copy(self) -> "ClothoidData":
        return ClothoidData(self.x0, self.y0, self.theta0, self.kappa0, self.dk)

    # --- HEADING AND CURVATURE ---

    def theta(self, s: float) -> float:
        return self.theta0 + s * (self.kappa0 + 0.5 * s * self.dk)

    def theta_d(self, s: float) -> float:
        return self.kappa0 + s * self.dk

    def theta_dd(self, s: float = 0.0) -> float:
        return self.dk

    def theta_ddd(self, s: float = 0.0) -> float:
        return 0.0

    def kappa(self, s: float) -> float:
        return self.kappa0 + s * self.dk

    def delta_theta(self, s: float) -> float:
        """Heading change between the origin and s."""
        return s * (self.kappa0 + 0.5 * s * self.dk)

    # --- POSITION ---

    def _fresnel(self, s: float) -> Tuple[float, float]:
        return generalized_fresnel_cs1(self.dk * s * s, self.kappa0 * s, self.theta0)

    def X(self, s: float, t: float = 0.0) -> float:
        C, _ = self._fresnel(s)
        x = self.x0 + s * C
        if t != 0.0:
            x -= t * math.sin(self.theta(s))
        return x

    def Y(self, s: float, t: float = 0.0) -> float:
        _, S = self._fresnel(s)
        y = self.y0 + s * S
        if t != 0.0:
            y += t * math.cos(self.theta(s))
        return y

    def eval(self, s: float, t: float = 0.0) -> Tuple[float, float]:
        """
        Point of the (offset) curve at arclength s.

        Args:
            s: Arclength
            t: Lateral offset along the left normal

        Returns:
            Tuple (x, y)
        """
        C, S = self._fresnel(s)
        x = self.x0 + s * C
        y = self.y0 + s * S
        if t != 0.0:
            th = self.theta(s)
            x -= t * math.sin(th)
            y += t * math.cos(th)
        return x, y

    def evaluate(self, s: float) -> Tuple[float, float, float, float]:
        """Returns (theta, kappa, x, y) at arclength s."""
        x, y = self.eval(s)
        return self.theta(s), self.kappa(s), x, y

    def eval_d(self, s: float, t: float = 0.0) -> Tuple[float, float]:
        th = self.theta(s)
        scale = 1 - t * self.kappa(s)
        return math.cos(th) * scale, math.sin(th) * scale

    def eval_dd(self, s: float, t: float = 0.0) -> Tuple[float, float]:
        th = self.theta(s)
        k = self.kappa(s)
        c = math.cos(th)
        sn = math.sin(th)
        scale = 1 - t * k
        return (-k * sn * scale - t * self.dk * c,
                k * c * scale - t * self.dk * sn)

    def eval_ddd(self, s: float, t: float = 0.0) -> Tuple[float, float]:
        th = self.theta(s)
        k = self.kappa(s)
        c = math.cos(th)
        sn = math.sin(th)
        k2 = k * k * (1 - t * k)
        dk3 = self.dk * (1 - 3 * t * k)
        return -dk3 * sn - k2 * c, dk3 * c - k2 * sn

    def X_D(self, s: float, t: float = 0.0) -> float:
        return self.eval_d(s, t)[0]

    def Y_D(self, s: float, t: float = 0.0) -> float:
        return self.eval_d(s, t)[1]

    def X_DD(self, s: float, t: float = 0.0) -> float:
        return self.eval_dd(s, t)[0]

    def Y_DD(self, s: float, t: float = 0.0) -> float:
        return self.eval_dd(s, t)[1]

    def X_DDD(self, s: float, t: float = 0.0) -> float:
        return self.eval_ddd(s, t)[0]

    def Y_DDD(self, s: float, t: float = 0.0) -> float:
        return self.eval_ddd(s, t)[1]

    # --- TANGENT AND NORMAL ---

    def tg(self, s: float) -> Tuple[float, float]:
        th = self.theta(s)
        return math.cos(th), math.sin(th)

    def tg_d(self, s: float) -> Tuple[float, float]:
        th = self.theta(s)
        k = self.kappa(s)
        return -k * math.sin(th), k * math.cos(th)

    def tg_dd(self, s: float) -> Tuple[float, float]:
        # the tangent is the first derivative of the zero-offset position
        return self.eval_ddd(s)

    def tg_ddd(self, s: float) -> Tuple[float, float]:
        th = self.theta(s)
        k = self.kappa(s)
        c = math.cos(th)
        sn = math.sin(th)
        k3 = k * k * k
        kdk = 3 * k * self.dk
        return kdk * -c + k3 * sn, kdk * -sn - k3 * c

    def nor(self, s: float) -> Tuple[float, float]:
        th = self.theta(s)
        return -math.sin(th), math.cos(th)

    def tg0(self) -> Tuple[float, float]:
        return math.cos(self.theta0), math.sin(self.theta0)

    def nor0(self) -> Tuple[float, float]:
        return -math.sin(self.theta0), math.cos(self.theta0)

    def eval_many(self, s: float, nk: int = 3):
        """
        Position through the Fresnel momenta, all at once.

        Returns the lists C_k, S_k (k < nk) of the generalised Fresnel
        integrals scaled so that x(s) = x0 + s*C[0].
        """
        return generalized_fresnel_cs(nk, self.dk * s * s, self.kappa0 * s, self.theta0)

    # --- ASYMPTOTIC POINTS ---

    def p_infinity(self, plus: bool = True) -> Tuple[float, float]:
        """
        Limit point of the spiral for s -> +inf (plus) or s -> -inf.

        This is an exact limit of the infinite-support curve and does not
        depend on any segment length.

        Raises:
            PreconditionError: if dk == 0 (circle or line)
        """
        if self.dk == 0:
            raise PreconditionError(
                "Asymptotic points need a non-zero curvature derivative",
                {"kappa0": self.kappa0})
        s_flex = -self.kappa0 / self.dk
        th = self.theta(s_flex)
        xf, yf = self.eval(s_flex)
        half = 0.5 * math.sqrt(M_PI / abs(self.dk))
        sgn = 1.0 if self.dk > 0 else -1.0
        c = math.cos(th)
        sn = math.sin(th)
        dx = half * (c - sgn * sn)
        dy = half * (sn + sgn * c)
        if plus:
            return xf + dx, yf + dy
        return xf - dx, yf - dy

    # --- TRANSFORMS ---

    def origin_at(self, s_origin: float) -> None:
        """Move the origin to arclength s_origin; dk is unchanged."""
        x, y = self.eval(s_origin)
        self.theta0 = self.theta(s_origin)
        self.kappa0 = self.kappa(s_origin)
        self.x0 = x
        self.y0 = y

    def reverse(self, L: float) -> None:
        """Parameters of the same arc [0, L] traversed backwards."""
        x, y = self.eval(L)
        theta_end = self.theta(L)
        kappa_end = self.kappa(L)
        self.x0 = x
        self.y0 = y
        self.theta0 = theta_end + M_PI
        self.kappa0 = -kappa_end

    def rotate(self, angle: float, cx: float, cy: float) -> None:
        dx = self.x0 - cx
        dy = self.y0 - cy
        C = math.cos(angle)
        S = math.sin(angle)
        self.x0 = cx + C * dx - S * dy
        self.y0 = cy + C * dy + S * dx
        self.theta0 += angle

    def translate(self, tx: float, ty: float) -> None:
        self.x0 += tx
        self.y0 += ty

    # --- BOUNDING TRIANGLE ---

    def bb_triangle(self, L: float, offs: float = 0.0):
        """
        Triangle containing the arc [0, L] (with lateral offset offs).

        The arc must have monotone heading with variation below pi/2, which
        makes it convex: it then lies between its chord and the two end
        tangents.

        Returns:
            Triangle2D, or None if the heading variation is pi/2 or more
        """
        theta_min = self.theta0
        theta_max = self.theta(L)
        dtheta = abs(theta_max - theta_min)
        if dtheta >= M_PI_2:
            return None
        x0, y0 = self.eval(0.0, offs)
        x2, y2 = self.eval(L, offs)
        t0x, t0y = self.tg0()
        if dtheta > 0.0001 * M_PI_2:
            t1x, t1y = self.tg(L)
            det = t0x * t1y - t0y * t1x
            alpha = ((x2 - x0) * t1y - (y2 - y0) * t1x) / det
        else:
            # nearly straight: any apex beyond the tangent crossing works
            alpha = L * (1 + abs(offs) * max(abs(self.kappa0), abs(self.kappa(L))))
        x1 = x0 + alpha * t0x
        y1 = y0 + alpha * t0y
        return Triangle2D((x0, y0), (x1, y1), (x2, y2))
