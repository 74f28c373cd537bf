"""
Intersection of two clothoid arcs.

Both arcs are decomposed into covering triangles. Pairs of sub-arcs are
processed from a work stack: a pair whose triangles are disjoint is
dropped; a pair of nearly straight sub-arcs is handed to a bracketed
Newton iteration on position1(s1) = position2(s2); any other pair is
split on the sub-arc with the larger heading variation and pushed back.
"""

import logging
import math
from typing import Iterator, List, Optional, Sequence, Tuple

from ..config import Settings, resolve
from ..exceptions import DegenerateGeometryError
from ..models.clothoid_data import ClothoidData
from .bounding import SplitRecord, bb_split

logger = logging.getLogger(__name__)

# relative arclength slack allowed to Newton iterates beyond a sub-arc
_BRACKET_SLACK = 0.01
# roots from different candidate pairs closer than this are the same root
_DUPLICATE_TOL = 1e-10


def solve_2x2(A: Sequence[Sequence[float]],
              b: Sequence[float]) -> Optional[Tuple[float, float]]:
    """
    Solve a 2x2 linear system with full pivoting.

    Args:
        A: Matrix as ((a11, a12), (a21, a22))
        b: Right hand side (b1, b2)

    Returns:
        Tuple (x1, x2), or None if the matrix is numerically singular
    """
    (a11, a12), (a21, a22) = A
    b1, b2 = b
    scale = max(abs(a11), abs(a12), abs(a21), abs(a22))
    if scale == 0:
        return None
    det = a11 * a22 - a12 * a21
    if abs(det) <= 1e-14 * scale * scale:
        return None
    return (b1 * a22 - a12 * b2) / det, (a11 * b2 - b1 * a21) / det


def _keep_in_bracket(s_new: float, s_old: float, L: float) -> float:
    lo = -_BRACKET_SLACK * L
    hi = (1 + _BRACKET_SLACK) * L
    if s_new < lo:
        return (s_old + lo) / 2
    if s_new > hi:
        return (s_old + hi) / 2
    return s_new


def _newton_pair(a: SplitRecord, offs_a: float, b: SplitRecord, offs_b: float,
                 max_iter: int, tolerance: float) -> Optional[Tuple[float, float]]:
    """
    Newton iteration on the local parameters of two sub-arcs.

    A step leaving a sub-arc (plus a small slack) is replaced by a move
    halfway to the violated bound.

    Returns:
        Local parameters (s1, s2) of the crossing, or None
    """
    s1 = a.L / 2
    s2 = b.L / 2
    converged = False
    for it in range(max_iter + 1):
        p1x, p1y = a.data.eval(s1, offs_a)
        p2x, p2y = b.data.eval(s2, offs_b)
        px = p2x - p1x
        py = p2y - p1y
        if converged or math.hypot(px, py) <= tolerance:
            if converged:
                break
            # one more step polishes the root to machine precision
            converged = True
        elif it == max_iter:
            return None
        t1x, t1y = a.data.eval_d(s1, offs_a)
        t2x, t2y = b.data.eval_d(s2, offs_b)
        step = solve_2x2(((t1x, -t2x), (t1y, -t2y)), (px, py))
        if step is None:
            return (s1, s2) if converged else None
        s1 = _keep_in_bracket(s1 + step[0], s1, a.L)
        s2 = _keep_in_bracket(s2 + step[1], s2, b.L)

    p1x, p1y = a.data.eval(s1, offs_a)
    p2x, p2y = b.data.eval(s2, offs_b)
    if math.hypot(p2x - p1x, p2y - p1y) > tolerance:
        return None
    return s1, s2


def _in_range(s: float, lo: float, hi: float, slack: float) -> bool:
    return lo - slack <= s <= hi + slack


def iter_intersections(data1: ClothoidData, L1: float, offs1: float,
                       data2: ClothoidData, L2: float, offs2: float,
                       max_iter: Optional[int] = None,
                       tolerance: Optional[float] = None,
                       max_level: Optional[int] = None,
                       fine_angle: Optional[float] = None,
                       settings: Optional[Settings] = None) -> Iterator[Tuple[float, float]]:
    """
    Lazily generate the crossings of two arcs.

    Yields:
        (s1, s2) arclengths on the first and second arc, clamped to [0, L]
    """
    cfg = resolve(settings)
    max_iter = cfg.intersect_max_iter if max_iter is None else max_iter
    tolerance = cfg.intersect_tolerance if tolerance is None else tolerance
    max_level = cfg.bb_max_level if max_level is None else max_level
    fine_angle = cfg.intersect_angle if fine_angle is None else fine_angle
    if not (L1 > 0 and L2 > 0):
        raise DegenerateGeometryError("Cannot intersect an arc of non-positive length",
                                      {"L1": L1, "L2": L2})

    recs1 = bb_split(data1, L1, offs1, max_level=max_level, settings=cfg)
    recs2 = bb_split(data2, L2, offs2, max_level=max_level, settings=cfg)
    stack = [(r1, r2, 0) for r1 in reversed(recs1) for r2 in reversed(recs2)]
    slack1 = 1e-9 * max(1.0, L1)
    slack2 = 1e-9 * max(1.0, L2)
    found: List[Tuple[float, float]] = []
    n_newton = 0

    while stack:
        a, b, level = stack.pop()
        if not a.triangle.overlap(b.triangle, margin=tolerance):
            continue
        span_a = a.heading_span()
        span_b = b.heading_span()
        if (span_a <= fine_angle and span_b <= fine_angle) or level >= max_level:
            n_newton += 1
            local = _newton_pair(a, offs1, b, offs2, max_iter, tolerance)
            if local is None:
                continue
            s1 = a.s0 + local[0]
            s2 = b.s0 + local[1]
            if not (_in_range(s1, a.s0, a.s1, slack1) and _in_range(s2, b.s0, b.s1, slack2)):
                continue
            s1 = min(max(s1, 0.0), L1)
            s2 = min(max(s2, 0.0), L2)
            if any(abs(u1 - s1) <= _DUPLICATE_TOL * max(1.0, L1)
                   and abs(u2 - s2) <= _DUPLICATE_TOL * max(1.0, L2) for u1, u2 in found):
                continue
            found.append((s1, s2))
            yield s1, s2
        elif span_a >= span_b:
            first, second = a.bisect(offs1)
            stack.append((second, b, level + 1))
            stack.append((first, b, level + 1))
        else:
            first, second = b.bisect(offs2)
            stack.append((a, second, level + 1))
            stack.append((a, first, level + 1))

    logger.debug("intersection: %d Newton runs, %d crossings", n_newton, len(found))


def intersect(data1: ClothoidData, L1: float, offs1: float,
              data2: ClothoidData, L2: float, offs2: float,
              max_iter: Optional[int] = None,
              tolerance: Optional[float] = None,
              max_level: Optional[int] = None,
              fine_angle: Optional[float] = None,
              settings: Optional[Settings] = None) -> Tuple[List[float], List[float]]:
    """
    All crossings of two (offset) arcs.

    Args:
        data1, L1, offs1: First arc and its lateral offset
        data2, L2, offs2: Second arc and its lateral offset
        max_iter: Newton budget per candidate pair
        tolerance: Distance under which two points coincide
        max_level: Pair subdivision depth after which Newton is tried anyway
        fine_angle: Heading variation of sub-arcs handed to Newton
        settings: Defaults for the omitted keywords (process defaults if None)

    Returns:
        Tuple (s1_list, s2_list) of matching arclengths, sorted by s1
    """
    pairs = sorted(iter_intersections(data1, L1, offs1, data2, L2, offs2,
                                      max_iter, tolerance, max_level, fine_angle,
                                      settings))
    return [p[0] for p in pairs], [p[1] for p in pairs]


def collision(data1: ClothoidData, L1: float, offs1: float,
              data2: ClothoidData, L2: float, offs2: float,
              max_iter: Optional[int] = None,
              tolerance: Optional[float] = None,
              settings: Optional[Settings] = None) -> bool:
    """True if the two arcs cross; stops at the first crossing."""
    crossings = iter_intersections(data1, L1, offs1, data2, L2, offs2,
                                   max_iter, tolerance, settings=settings)
    return next(crossings, None) is not None


def approximate_collision(data1: ClothoidData, L1: float, offs1: float,
                          data2: ClothoidData, L2: float, offs2: float,
                          max_angle: Optional[float] = None,
                          max_size: Optional[float] = None,
                          max_level: Optional[int] = None,
                          settings: Optional[Settings] = None) -> bool:
    """
    Conservative collision test on the covering triangles.

    Never reports False for arcs that cross; may report True for arcs that
    only come close, depending on the resolution.

    Args:
        max_angle: Heading variation of the covering triangles
        max_size: Height of the covering triangles
        max_level: Bisection depth after which max_size is no longer enforced
    """
    tris1 = [r.triangle for r in bb_split(data1, L1, offs1, max_angle, max_size,
                                          max_level, settings)]
    tris2 = [r.triangle for r in bb_split(data2, L2, offs2, max_angle, max_size,
                                          max_level, settings)]
    return any(t1.overlap(t2) for t1 in tris1 for t2 in tris2)
