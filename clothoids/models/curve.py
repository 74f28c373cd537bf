"""
CLOTHOID CURVE MODULE

@Description: A clothoid arc: canonical parameters plus a length L >= 0.
The arc is the restriction of the infinite-support curve to s in [0, L].
Construction, evaluation, in-place transforms, integral quantities and
the geometric queries (bounding, intersection, projection) all live here.
"""

import logging
import math
from typing import List, Optional, Tuple, Union

import numpy as np
from numpy.polynomial import Polynomial

from ..config import Settings
from ..exceptions import DegenerateGeometryError, PreconditionError
from ..fitting import g1
from ..geometry import bounding, intersection, projection
from ..geometry.bounding import SplitRecord
from ..geometry.projection import ProjectionResult
from .clothoid_data import ClothoidData, Pose
from .primitives import CircleArc, CurveType, LineSegment
from .triangle import Triangle2D

logger = logging.getLogger(__name__)

CurveLike = Union["ClothoidCurve", LineSegment, CircleArc]


class ClothoidCurve:
    """
    Clothoid arc of length L.

    Attributes:
        data: ClothoidData (x0, y0, theta0, kappa0, dk)
        L: Arc length
    """

    curve_type = CurveType.CLOTHOID

    def __init__(self, x0: float = 0.0, y0: float = 0.0, theta0: float = 0.0,
                 kappa0: float = 0.0, dk: float = 0.0, L: float = 0.0):
        self.build(x0, y0, theta0, kappa0, dk, L)

    # --- CONSTRUCTION ---

    @classmethod
    def from_data(cls, data: ClothoidData, L: float) -> "ClothoidCurve":
        return cls(data.x0, data.y0, data.theta0, data.kappa0, data.dk, L)

    @classmethod
    def from_line(cls, line: LineSegment) -> "ClothoidCurve":
        """Straight segment as a clothoid with kappa0 = dk = 0."""
        return cls(line.x0, line.y0, line.theta0, 0.0, 0.0, line.L)

    @classmethod
    def from_arc(cls, arc: CircleArc) -> "ClothoidCurve":
        """Circular arc as a clothoid with dk = 0."""
        return cls(arc.x0, arc.y0, arc.theta0, arc.k, 0.0, arc.L)

    @classmethod
    def from_g1(cls, x0: float, y0: float, theta0: float,
                x1: float, y1: float, theta1: float,
                tol: Optional[float] = None,
                max_iter: Optional[int] = None,
                settings: Optional[Settings] = None) -> "ClothoidCurve":
        """Clothoid joining two poses (see build_g1)."""
        curve = cls()
        curve.build_g1(x0, y0, theta0, x1, y1, theta1, tol, max_iter, settings)
        return curve

    @classmethod
    def from_poses(cls, p0: Pose, p1: Pose, **kwargs) -> "ClothoidCurve":
        return cls.from_g1(p0.x, p0.y, p0.theta, p1.x, p1.y, p1.theta, **kwargs)

    @classmethod
    def as_curve(cls, obj: CurveLike) -> "ClothoidCurve":
        """
        Convert any supported curve kind to a ClothoidCurve.

        Args:
            obj: ClothoidCurve, LineSegment or CircleArc

        Raises:
            PreconditionError: for objects without a known curve_type
        """
        kind = getattr(obj, "curve_type", None)
        if kind is CurveType.CLOTHOID:
            return obj
        if kind is CurveType.LINE:
            return cls.from_line(obj)
        if kind is CurveType.CIRCLE:
            return cls.from_arc(obj)
        raise PreconditionError("Unsupported curve kind", {"type": type(obj).__name__})

    def build(self, x0: float, y0: float, theta0: float,
              kappa0: float, dk: float, L: float) -> None:
        """Set all parameters directly."""
        if L < 0:
            raise PreconditionError("Length must be >= 0", {"L": L})
        self.data = ClothoidData(x0, y0, theta0, kappa0, dk)
        self.L = L

    def build_g1(self, x0: float, y0: float, theta0: float,
                 x1: float, y1: float, theta1: float,
                 tol: Optional[float] = None,
                 max_iter: Optional[int] = None,
                 settings: Optional[Settings] = None) -> int:
        """
        Fit the clothoid joining (x0, y0, theta0) and (x1, y1, theta1).

        Returns:
            Number of Newton iterations

        Raises:
            DegenerateGeometryError: if the two points coincide
            ConvergenceError: if the iteration budget is exhausted
        """
        sol = g1.build_g1(x0, y0, theta0, x1, y1, theta1, tol, max_iter, settings)
        self.data = sol.data
        self.L = sol.length
        return sol.iterations

    def build_g1_d(self, x0: float, y0: float, theta0: float,
                   x1: float, y1: float, theta1: float,
                   tol: Optional[float] = None,
                   max_iter: Optional[int] = None,
                   settings: Optional[Settings] = None) -> g1.G1Gradient:
        """
        Same as build_g1, returning the derivatives of (L, kappa0, dk)
        with respect to theta0 and theta1.
        """
        sol, grad = g1.build_g1_d(x0, y0, theta0, x1, y1, theta1, tol, max_iter,
                                  settings)
        self.data = sol.data
        self.L = sol.length
        return grad

    def build_forward(self, x0: float, y0: float, theta0: float, kappa0: float,
                      x1: float, y1: float, tol: Optional[float] = None,
                      max_iter: Optional[int] = None,
                      settings: Optional[Settings] = None) -> bool:
        """
        Clothoid from a pose with given initial curvature to a point.

        Returns:
            True on success; on failure the curve is left unchanged
        """
        sol = g1.build_forward(x0, y0, theta0, kappa0, x1, y1, tol, max_iter,
                               settings)
        if sol is None:
            return False
        self.data = sol.data
        self.L = sol.length
        return True

    def copy(self) -> "ClothoidCurve":
        return ClothoidCurve.from_data(self.data, self.L)

    # --- ACCESSORS ---

    def length(self, offs: float = 0.0) -> float:
        """
        Arc length.

        The length of an offset clothoid has no closed form, so only
        offs == 0 is accepted.

        Raises:
            PreconditionError: if offs != 0
        """
        if offs != 0:
            raise PreconditionError("Offset length is not available for a clothoid",
                                    {"offs": offs})
        return self.L

    @property
    def kappa_d(self) -> float:
        return self.data.dk

    @property
    def kappa_dd(self) -> float:
        return 0.0

    @property
    def kappa_ddd(self) -> float:
        return 0.0

    @property
    def tx_begin(self) -> float:
        return self.data.tg(0.0)[0]

    @property
    def ty_begin(self) -> float:
        return self.data.tg(0.0)[1]

    @property
    def nx_begin(self) -> float:
        return self.data.nor(0.0)[0]

    @property
    def ny_begin(self) -> float:
        return self.data.nor(0.0)[1]

    @property
    def tx_end(self) -> float:
        return self.data.tg(self.L)[0]

    @property
    def ty_end(self) -> float:
        return self.data.tg(self.L)[1]

    @property
    def nx_end(self) -> float:
        return self.data.nor(self.L)[0]

    @property
    def ny_end(self) -> float:
        return self.data.nor(self.L)[1]

    @property
    def x_begin(self) -> float:
        return self.data.x0

    @property
    def y_begin(self) -> float:
        return self.data.y0

    @property
    def theta_begin(self) -> float:
        return self.data.theta0

    @property
    def kappa_begin(self) -> float:
        return self.data.kappa0

    @property
    def xy_begin(self) -> Tuple[float, float]:
        return self.data.x0, self.data.y0

    @property
    def x_end(self) -> float:
        return self.data.X(self.L)

    @property
    def y_end(self) -> float:
        return self.data.Y(self.L)

    @property
    def theta_end(self) -> float:
        return self.data.theta(self.L)

    @property
    def kappa_end(self) -> float:
        return self.data.kappa(self.L)

    @property
    def xy_end(self) -> Tuple[float, float]:
        return self.data.eval(self.L)

    def pose_begin(self) -> Pose:
        return Pose(self.data.x0, self.data.y0, self.data.theta0)

    def pose_end(self) -> Pose:
        x, y = self.data.eval(self.L)
        return Pose(x, y, self.data.theta(self.L))

    def get_pars(self) -> dict:
        d = self.data
        return {"x0": d.x0, "y0": d.y0, "theta0": d.theta0,
                "kappa0": d.kappa0, "dk": d.dk, "L": self.L}

    # --- EVALUATION ---

    def theta(self, s: float) -> float:
        return self.data.theta(s)

    def theta_d(self, s: float) -> float:
        return self.data.theta_d(s)

    def theta_dd(self, s: float) -> float:
        return self.data.theta_dd(s)

    def kappa(self, s: float) -> float:
        return self.data.kappa(s)

    def X(self, s: float, offs: float = 0.0) -> float:
        return self.data.X(s, offs)

    def Y(self, s: float, offs: float = 0.0) -> float:
        return self.data.Y(s, offs)

    def eval(self, s: float, offs: float = 0.0) -> Tuple[float, float]:
        return self.data.eval(s, offs)

    def eval_d(self, s: float, offs: float = 0.0) -> Tuple[float, float]:
        return self.data.eval_d(s, offs)

    def eval_dd(self, s: float, offs: float = 0.0) -> Tuple[float, float]:
        return self.data.eval_dd(s, offs)

    def eval_ddd(self, s: float, offs: float = 0.0) -> Tuple[float, float]:
        return self.data.eval_ddd(s, offs)

    def evaluate(self, s: float) -> Tuple[float, float, float, float]:
        """Returns (theta, kappa, x, y) at arclength s."""
        return self.data.evaluate(s)

    def tg(self, s: float) -> Tuple[float, float]:
        return self.data.tg(s)

    def nor(self, s: float) -> Tuple[float, float]:
        return self.data.nor(s)

    def sample(self, n: int = 100,
               offs: float = 0.0) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Evaluate the arc at n equally spaced arclengths.

        Args:
            n: Number of samples (>= 2), end points included
            offs: Lateral offset

        Returns:
            Tuple (s, x, y) of numpy arrays
        """
        if n < 2:
            raise PreconditionError("At least two samples are needed", {"n": n})
        s = np.linspace(0.0, self.L, n)
        xy = np.array([self.data.eval(si, offs) for si in s])
        return s, xy[:, 0], xy[:, 1]

    def infinity(self) -> Tuple[float, float, float, float]:
        """
        Asymptotic points of the spiral for s -> +inf and s -> -inf.

        These are exact limits of the infinite-support curve and do not
        depend on L.

        Returns:
            Tuple (x_plus, y_plus, x_minus, y_minus)

        Raises:
            PreconditionError: if dk == 0
        """
        xp, yp = self.data.p_infinity(plus=True)
        xm, ym = self.data.p_infinity(plus=False)
        return xp, yp, xm, ym

    # --- TRANSFORMS ---

    def translate(self, tx: float, ty: float) -> None:
        self.data.translate(tx, ty)

    def rotate(self, angle: float, cx: float, cy: float) -> None:
        """Rotate by angle around the pivot (cx, cy)."""
        self.data.rotate(angle, cx, cy)

    def scale(self, sc: float) -> None:
        """
        Uniform scaling about the start point.

        Raises:
            PreconditionError: if sc <= 0
        """
        if not sc > 0:
            raise PreconditionError("Scale factor must be > 0", {"scale": sc})
        self.data.kappa0 /= sc
        self.data.dk /= sc * sc
        self.L *= sc

    def reverse(self) -> None:
        """Traverse the same arc in the opposite direction."""
        self.data.reverse(self.L)

    def change_origin(self, newx0: float, newy0: float) -> None:
        """Move the start point, keeping the shape."""
        self.data.x0 = newx0
        self.data.y0 = newy0

    def trim(self, s_begin: float, s_end: float) -> None:
        """
        Keep only the portion [s_begin, s_end]; the rest is lost.

        Raises:
            PreconditionError: if s_end < s_begin
            DegenerateGeometryError: if s_end == s_begin
        """
        if s_end < s_begin:
            raise PreconditionError("trim needs s_begin <= s_end",
                                    {"s_begin": s_begin, "s_end": s_end})
        if s_end == s_begin:
            raise DegenerateGeometryError("trim would leave an empty arc",
                                          {"s": s_begin})
        self.data.origin_at(s_begin)
        self.L = s_end - s_begin

    def change_curvilinear_origin(self, s0: float, newL: float) -> None:
        """Move the origin to arclength s0 and set the new length."""
        if newL < 0:
            raise PreconditionError("Length must be >= 0", {"L": newL})
        self.data.origin_at(s0)
        self.L = newL

    # --- VARIATIONS AND INTEGRALS ---

    def _flex_inside(self) -> Optional[float]:
        """Arclength of the curvature zero when it lies strictly inside (0, L)."""
        if self.data.kappa0 * self.data.kappa(self.L) < 0:
            return -self.data.kappa0 / self.data.dk
        return None

    def theta_total_variation(self) -> float:
        th_end = self.data.delta_theta(self.L)
        s_flex = self._flex_inside()
        if s_flex is None:
            return abs(th_end)
        th_flex = self.data.delta_theta(s_flex)
        return abs(th_flex) + abs(th_end - th_flex)

    def theta_min_max(self) -> Tuple[float, float]:
        th0 = self.data.theta0
        th1 = self.data.theta(self.L)
        values = [th0, th1]
        s_flex = self._flex_inside()
        if s_flex is not None:
            values.append(self.data.theta(s_flex))
        return min(values), max(values)

    def delta_theta(self) -> float:
        """Width of the heading range over the arc."""
        th_min, th_max = self.theta_min_max()
        return th_max - th_min

    def curvature_min_max(self) -> Tuple[float, float]:
        k0 = self.data.kappa0
        k1 = self.data.kappa(self.L)
        return min(k0, k1), max(k0, k1)

    def curvature_total_variation(self) -> float:
        # curvature is affine, hence monotone
        return abs(self.data.kappa(self.L) - self.data.kappa0)

    def _integral(self, p: Polynomial) -> float:
        return float(p.integ()(self.L))

    def integral_curvature2(self) -> float:
        """int_0^L kappa(s)^2 ds"""
        k = Polynomial([self.data.kappa0, self.data.dk])
        return self._integral(k ** 2)

    def integral_jerk2(self) -> float:
        """int_0^L (kappa'^2 + kappa^4) ds, the squared jerk at unit speed."""
        k = Polynomial([self.data.kappa0, self.data.dk])
        return self._integral(k ** 4 + self.data.dk ** 2)

    def integral_snap2(self) -> float:
        """int_0^L (9 kappa^2 kappa'^2 + kappa^6) ds, the squared snap at unit speed."""
        k = Polynomial([self.data.kappa0, self.data.dk])
        return self._integral(k ** 6 + 9 * self.data.dk ** 2 * k ** 2)

    # --- BOUNDING ---

    def bb_split(self, offs: float = 0.0, max_angle: Optional[float] = None,
                 max_size: Optional[float] = None, max_level: Optional[int] = None,
                 settings: Optional[Settings] = None) -> List[SplitRecord]:
        return bounding.bb_split(self.data, self.L, offs, max_angle, max_size,
                                 max_level, settings)

    def bb_triangles(self, offs: float = 0.0, max_angle: Optional[float] = None,
                     max_size: Optional[float] = None, max_level: Optional[int] = None,
                     settings: Optional[Settings] = None) -> List[Triangle2D]:
        return bounding.bb_triangles(self.data, self.L, offs, max_angle, max_size,
                                     max_level, settings)

    def bbox(self, offs: float = 0.0, max_angle: Optional[float] = None,
             max_size: Optional[float] = None, max_level: Optional[int] = None,
             settings: Optional[Settings] = None) -> Tuple[float, float, float, float]:
        """Returns (xmin, ymin, xmax, ymax)."""
        return bounding.bbox(self.data, self.L, offs, max_angle, max_size,
                             max_level, settings)

    # --- INTERSECTION ---

    def intersect(self, other: CurveLike, offs: float = 0.0, other_offs: float = 0.0,
                  max_iter: Optional[int] = None,
                  tolerance: Optional[float] = None,
                  max_level: Optional[int] = None,
                  fine_angle: Optional[float] = None,
                  settings: Optional[Settings] = None) -> Tuple[List[float], List[float]]:
        """
        Crossings with another curve.

        Args:
            other: ClothoidCurve, LineSegment or CircleArc
            offs: Lateral offset of this curve
            other_offs: Lateral offset of the other curve
            max_iter: Newton budget per candidate pair
            tolerance: Distance under which two points coincide
            max_level: Pair subdivision depth after which Newton is tried anyway
            fine_angle: Heading variation of sub-arcs handed to Newton
            settings: Defaults for the omitted keywords

        Returns:
            Tuple (s1, s2): arclengths on this curve and on the other one
        """
        other = ClothoidCurve.as_curve(other)
        return intersection.intersect(self.data, self.L, offs, other.data, other.L,
                                      other_offs, max_iter, tolerance, max_level,
                                      fine_angle, settings)

    def intersect_line(self, line: LineSegment, offs: float = 0.0,
                       **kwargs) -> Tuple[List[float], List[float]]:
        return self.intersect(ClothoidCurve.from_line(line), offs, **kwargs)

    def intersect_arc(self, arc: CircleArc, offs: float = 0.0,
                      **kwargs) -> Tuple[List[float], List[float]]:
        return self.intersect(ClothoidCurve.from_arc(arc), offs, **kwargs)

    def intersect_clothoid(self, other: "ClothoidCurve", offs: float = 0.0,
                           **kwargs) -> Tuple[List[float], List[float]]:
        return self.intersect(other, offs, **kwargs)

    def collision(self, other: CurveLike, offs: float = 0.0,
                  other_offs: float = 0.0,
                  max_iter: Optional[int] = None,
                  tolerance: Optional[float] = None,
                  settings: Optional[Settings] = None) -> bool:
        """True if the two (offset) curves cross."""
        other = ClothoidCurve.as_curve(other)
        return intersection.collision(self.data, self.L, offs,
                                      other.data, other.L, other_offs,
                                      max_iter, tolerance, settings)

    def approximate_collision(self, other: CurveLike, offs: float = 0.0,
                              other_offs: float = 0.0,
                              max_angle: Optional[float] = None,
                              max_size: Optional[float] = None,
                              max_level: Optional[int] = None,
                              settings: Optional[Settings] = None) -> bool:
        """Triangle-overlap test at the given resolution, no refinement."""
        other = ClothoidCurve.as_curve(other)
        return intersection.approximate_collision(self.data, self.L, offs,
                                                  other.data, other.L, other_offs,
                                                  max_angle, max_size, max_level,
                                                  settings)

    # --- PROJECTION ---

    def projection(self, qx: float, qy: float, offs: float = 0.0,
                   tol: Optional[float] = None, max_iter: Optional[int] = None,
                   settings: Optional[Settings] = None) -> ProjectionResult:
        return projection.projection(self.data, self.L, qx, qy, offs,
                                     tol, max_iter, settings)

    def closest_point(self, qx: float, qy: float, offs: float = 0.0,
                      tol: Optional[float] = None, max_iter: Optional[int] = None,
                      settings: Optional[Settings] = None) -> ProjectionResult:
        return projection.closest_point(self.data, self.L, qx, qy, offs,
                                        tol, max_iter, settings)

    def distance(self, qx: float, qy: float, offs: float = 0.0, **kwargs) -> float:
        return self.closest_point(qx, qy, offs, **kwargs).distance

    def find_st(self, qx: float, qy: float, tol: Optional[float] = None,
                max_iter: Optional[int] = None,
                settings: Optional[Settings] = None) -> Tuple[bool, float, float]:
        """Returns (ok, s, t) with (qx, qy) = P(s) + t*N(s)."""
        return projection.find_st(self.data, self.L, qx, qy, tol, max_iter, settings)

    def closest_point_by_sample(self, qx: float, qy: float, ds: float,
                                offs: float = 0.0) -> Tuple[float, float, float, float]:
        """Returns (x, y, s, distance) of the closest sample."""
        return projection.closest_point_by_sample(self.data, self.L, qx, qy, ds, offs)

    def distance_by_sample(self, qx: float, qy: float, ds: float,
                           offs: float = 0.0) -> float:
        return self.closest_point_by_sample(qx, qy, ds, offs)[3]

    def __repr__(self) -> str:
        d = self.data
        return (f"ClothoidCurve(x0={d.x0:.6g}, y0={d.y0:.6g}, theta0={d.theta0:.6g}, "
                f"kappa0={d.kappa0:.6g}, dk={d.dk:.6g}, L={self.L:.6g})")


if __name__ == "__main__":
    curve = ClothoidCurve.from_g1(0, 0, 0, 10, 5, math.pi / 2)
    print(curve)
    print(f"End pose: {curve.pose_end()}")
    print(f"Heading variation: {curve.theta_total_variation():.4f} rad")
    print(f"Curvature^2 integral: {curve.integral_curvature2():.6f}")
