"""
Orthogonal projection of a point onto a clothoid arc.

A foot of the perpendicular from Q is a root of

    g(s) = (P(s) - Q) . P'(s)

where P is the (offset) curve. The arc is split into sub-arcs of small
heading variation; every sub-arc where g changes sign is searched with a
Newton iteration safeguarded by bisection.
"""

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from ..config import Settings, resolve
from ..exceptions import PreconditionError
from ..models.clothoid_data import ClothoidData
from .bounding import SplitRecord, bb_split

logger = logging.getLogger(__name__)

_SAME_FOOT = 1e-8


class ProjectionStatus(IntEnum):
    UNIQUE = 1
    MULTIPLE = 0
    NOT_ORTHOGONAL = -1


@dataclass
class ProjectionResult:
    """
    Outcome of a projection.

    Attributes:
        status: UNIQUE, MULTIPLE (the first foot is returned) or
            NOT_ORTHOGONAL (the closest end point is returned)
        x: x coordinate of the returned point
        y: y coordinate of the returned point
        s: Arclength of the returned point
        distance: Distance from the query point
    """
    status: ProjectionStatus
    x: float
    y: float
    s: float
    distance: float


def _g(data: ClothoidData, s: float, offs: float,
       qx: float, qy: float) -> Tuple[float, float, float]:
    """Returns g, g' and the scale of g at s."""
    px, py = data.eval(s, offs)
    dx, dy = data.eval_d(s, offs)
    ddx, ddy = data.eval_dd(s, offs)
    rx = px - qx
    ry = py - qy
    g = rx * dx + ry * dy
    dg = dx * dx + dy * dy + rx * ddx + ry * ddy
    scale = max(1.0, math.hypot(rx, ry) * math.hypot(dx, dy))
    return g, dg, scale


def _foot_in_record(rec: SplitRecord, offs: float, qx: float, qy: float,
                    tol: float, max_iter: int) -> Optional[float]:
    a, b = 0.0, rec.L
    ga, _, scale_a = _g(rec.data, a, offs, qx, qy)
    gb, _, scale_b = _g(rec.data, b, offs, qx, qy)
    if abs(ga) <= 1e-12 * scale_a:
        return a
    if abs(gb) <= 1e-12 * scale_b:
        return b
    if ga * gb > 0:
        return None

    s = (a + b) / 2
    for _ in range(max_iter):
        gs, dgs, scale = _g(rec.data, s, offs, qx, qy)
        if abs(gs) <= 1e-14 * scale:
            return s
        if (gs < 0) == (ga < 0):
            a, ga = s, gs
        else:
            b = s
        s_new = s - gs / dgs if dgs != 0 else a
        if not a < s_new < b:
            s_new = (a + b) / 2
        if abs(s_new - s) <= tol * max(1.0, rec.L):
            return s_new
        s = s_new
    logger.debug("projection: budget exhausted in sub-arc at s0=%g, bracket width %g",
                 rec.s0, b - a)
    return s


def feet(data: ClothoidData, L: float, qx: float, qy: float, offs: float = 0.0,
         tol: Optional[float] = None, max_iter: Optional[int] = None,
         settings: Optional[Settings] = None) -> List[float]:
    """
    Arclengths of all feet of perpendicular from (qx, qy), increasing.
    """
    cfg = resolve(settings)
    tol = cfg.projection_tolerance if tol is None else tol
    max_iter = cfg.projection_max_iter if max_iter is None else max_iter
    if L == 0:
        return []
    result: List[float] = []
    for rec in bb_split(data, L, offs, max_angle=cfg.intersect_angle, settings=cfg):
        s_loc = _foot_in_record(rec, offs, qx, qy, tol, max_iter)
        if s_loc is None:
            continue
        s = min(max(rec.s0 + s_loc, 0.0), L)
        if result and abs(result[-1] - s) <= _SAME_FOOT * max(1.0, L):
            continue
        result.append(s)
    return result


def _point_result(data: ClothoidData, s: float, offs: float, qx: float, qy: float,
                  status: ProjectionStatus) -> ProjectionResult:
    x, y = data.eval(s, offs)
    return ProjectionResult(status, x, y, s, math.hypot(x - qx, y - qy))


def projection(data: ClothoidData, L: float, qx: float, qy: float,
               offs: float = 0.0, tol: Optional[float] = None,
               max_iter: Optional[int] = None,
               settings: Optional[Settings] = None) -> ProjectionResult:
    """
    Orthogonal projection of (qx, qy) onto the arc.

    Args:
        data: Clothoid parameters
        L: Arc length
        qx, qy: Query point
        offs: Lateral offset of the curve
        tol: Step tolerance of the Newton iteration
        max_iter: Newton budget per sub-arc
        settings: Defaults for the omitted keywords (process defaults if None)

    Returns:
        ProjectionResult; when no foot exists the closest end point is used
    """
    found = feet(data, L, qx, qy, offs, tol, max_iter, settings)
    if not found:
        ends = [_point_result(data, s, offs, qx, qy, ProjectionStatus.NOT_ORTHOGONAL)
                for s in (0.0, L)]
        return min(ends, key=lambda r: r.distance)
    status = ProjectionStatus.UNIQUE if len(found) == 1 else ProjectionStatus.MULTIPLE
    return _point_result(data, found[0], offs, qx, qy, status)


def closest_point(data: ClothoidData, L: float, qx: float, qy: float,
                  offs: float = 0.0, tol: Optional[float] = None,
                  max_iter: Optional[int] = None,
                  settings: Optional[Settings] = None) -> ProjectionResult:
    """
    Point of the arc closest to (qx, qy).

    Candidates are all feet of perpendicular and the two end points.
    The status reports whether the winner is a foot of perpendicular.
    """
    candidates = [_point_result(data, s, offs, qx, qy, ProjectionStatus.UNIQUE)
                  for s in feet(data, L, qx, qy, offs, tol, max_iter, settings)]
    candidates += [_point_result(data, s, offs, qx, qy, ProjectionStatus.NOT_ORTHOGONAL)
                   for s in (0.0, L)]
    return min(candidates, key=lambda r: r.distance)


def find_st(data: ClothoidData, L: float, qx: float, qy: float,
            tol: Optional[float] = None, max_iter: Optional[int] = None,
            settings: Optional[Settings] = None) -> Tuple[bool, float, float]:
    """
    Curvilinear coordinates of a point.

    Returns:
        Tuple (ok, s, t) with (qx, qy) = P(s) + t*N(s); ok is False when
        the point has no orthogonal projection on the arc
    """
    res = projection(data, L, qx, qy, 0.0, tol, max_iter, settings)
    nx, ny = data.nor(res.s)
    t = (qx - res.x) * nx + (qy - res.y) * ny
    return res.status != ProjectionStatus.NOT_ORTHOGONAL, res.s, t


def closest_point_by_sample(data: ClothoidData, L: float, qx: float, qy: float,
                            ds: float,
                            offs: float = 0.0) -> Tuple[float, float, float, float]:
    """
    Closest point among samples spaced ds apart (L always included).

    Returns:
        Tuple (x, y, s, distance)

    Raises:
        PreconditionError: if ds <= 0
    """
    if not ds > 0:
        raise PreconditionError("Sampling step must be > 0", {"ds": ds})
    s_values = np.append(np.arange(0.0, L, ds), L)
    pts = np.array([data.eval(s, offs) for s in s_values])
    dist = np.hypot(pts[:, 0] - qx, pts[:, 1] - qy)
    i = int(np.argmin(dist))
    return float(pts[i, 0]), float(pts[i, 1]), float(s_values[i]), float(dist[i])
