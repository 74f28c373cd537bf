"""
Bounding decomposition of a clothoid arc.

The arc is first cut at its flex point (where the curvature changes sign)
so every piece has monotone heading. Each piece is then bisected in
arclength until its heading variation is below max_angle and its covering
triangle is not taller than max_size. A convex arc with heading variation
below pi/2 lies inside the triangle formed by its end points and the
crossing of its end tangents.

The recursion runs on an explicit work stack; the records come out in
increasing arclength order.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import Settings, resolve
from ..exceptions import DegenerateGeometryError, PreconditionError
from ..models.clothoid_data import ClothoidData
from ..models.triangle import Triangle2D
from ..special.trig import M_PI_2, range_symm

logger = logging.getLogger(__name__)


@dataclass
class SplitRecord:
    """
    A sub-arc with its covering triangle.

    Attributes:
        s0: Arclength of the sub-arc start on the parent curve
        L: Length of the sub-arc
        data: Clothoid parameters with origin at the sub-arc start
        triangle: Covering triangle
    """
    s0: float
    L: float
    data: ClothoidData
    triangle: Triangle2D

    @property
    def s1(self) -> float:
        return self.s0 + self.L

    def heading_span(self) -> float:
        return abs(self.data.delta_theta(self.L))

    def bisect(self, offs: float = 0.0) -> Tuple["SplitRecord", "SplitRecord"]:
        """Split at the arclength midpoint; both halves get new triangles."""
        half = self.L / 2
        second = self.data.copy()
        second.origin_at(half)
        return (
            SplitRecord(self.s0, half, self.data, self.data.bb_triangle(half, offs)),
            SplitRecord(self.s0 + half, half, second, second.bb_triangle(half, offs)),
        )


def _check_split_params(max_angle: float, max_size: float) -> None:
    if not 0 < max_angle < M_PI_2:
        raise PreconditionError("max_angle must be in (0, pi/2)", {"max_angle": max_angle})
    if not max_size > 0:
        raise PreconditionError("max_size must be > 0", {"max_size": max_size})


def _triangle_height(data: ClothoidData, L: float, offs: float) -> float:
    """Height of the covering triangle estimated from chord and initial tangent."""
    x0, y0 = data.eval(0.0, offs)
    x1, y1 = data.eval(L, offs)
    chord = math.hypot(x1 - x0, y1 - y0)
    if chord == 0:
        return 0.0
    dangle = abs(range_symm(math.atan2(y1 - y0, x1 - x0) - data.theta0))
    if dangle >= M_PI_2:
        return math.inf
    return chord * math.tan(dangle)


def _monotone_pieces(data: ClothoidData, L: float) -> List[Tuple[float, float, ClothoidData]]:
    k_begin = data.kappa0
    k_end = data.kappa(L)
    if k_begin * k_end < 0:
        s_flex = -k_begin / data.dk
        second = data.copy()
        second.origin_at(s_flex)
        return [(0.0, s_flex, data.copy()), (s_flex, L - s_flex, second)]
    return [(0.0, L, data.copy())]


def bb_split(data: ClothoidData, L: float, offs: float = 0.0,
             max_angle: Optional[float] = None,
             max_size: Optional[float] = None,
             max_level: Optional[int] = None,
             settings: Optional[Settings] = None) -> List[SplitRecord]:
    """
    Decompose the arc [0, L] into sub-arcs covered by triangles.

    Args:
        data: Clothoid parameters
        L: Arc length
        offs: Lateral offset of the covered curve
        max_angle: Maximum heading variation per sub-arc (< pi/2)
        max_size: Maximum triangle height per sub-arc
        max_level: Bisection depth after which max_size is no longer enforced
        settings: Defaults for the omitted keywords (process defaults if None)

    Returns:
        List of SplitRecord sorted by s0

    Raises:
        DegenerateGeometryError: if L <= 0
        PreconditionError: if max_angle or max_size are out of range
    """
    cfg = resolve(settings)
    max_angle = cfg.bb_max_angle if max_angle is None else max_angle
    max_size = cfg.bb_max_size if max_size is None else max_size
    max_level = cfg.bb_max_level if max_level is None else max_level
    _check_split_params(max_angle, max_size)
    if not L > 0:
        raise DegenerateGeometryError("Cannot cover an arc of non-positive length", {"L": L})

    records: List[SplitRecord] = []
    stack = [(s0, length, cd, 0) for s0, length, cd in reversed(_monotone_pieces(data, L))]
    while stack:
        s0, length, cd, level = stack.pop()
        dtheta = abs(cd.delta_theta(length))
        if dtheta <= max_angle and (level >= max_level
                                    or _triangle_height(cd, length, offs) <= max_size):
            records.append(SplitRecord(s0, length, cd, cd.bb_triangle(length, offs)))
            continue
        half = length / 2
        second = cd.copy()
        second.origin_at(half)
        stack.append((s0 + half, half, second, level + 1))
        stack.append((s0, half, cd, level + 1))

    logger.debug("bb_split: L=%g offs=%g -> %d records", L, offs, len(records))
    return records


def bb_triangles(data: ClothoidData, L: float, offs: float = 0.0,
                 max_angle: Optional[float] = None,
                 max_size: Optional[float] = None,
                 max_level: Optional[int] = None,
                 settings: Optional[Settings] = None) -> List[Triangle2D]:
    """Covering triangles of the arc, in arclength order."""
    return [rec.triangle for rec in bb_split(data, L, offs, max_angle, max_size,
                                             max_level, settings)]


def bbox(data: ClothoidData, L: float, offs: float = 0.0,
         max_angle: Optional[float] = None,
         max_size: Optional[float] = None,
         max_level: Optional[int] = None,
         settings: Optional[Settings] = None) -> Tuple[float, float, float, float]:
    """
    Axis aligned box containing the arc.

    Computed from the covering triangles, so it is conservative; finer
    split parameters give a tighter box.

    Returns:
        Tuple (xmin, ymin, xmax, ymax)
    """
    if L == 0:
        x, y = data.eval(0.0, offs)
        return x, y, x, y
    boxes = [t.bbox() for t in bb_triangles(data, L, offs, max_angle, max_size,
                                            max_level, settings)]
    return (min(b[0] for b in boxes), min(b[1] for b in boxes),
            max(b[2] for b in boxes), max(b[3] for b in boxes))
