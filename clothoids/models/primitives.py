"""
Line and circle-arc input records.

The kernel treats both as degenerate clothoids (dk = 0, and kappa0 = 0 for
lines). CurveType is the closed set of curve kinds the kernel knows how
to turn into a ClothoidCurve.
"""

from dataclasses import dataclass
from enum import Enum


class CurveType(Enum):
    LINE = "line"
    CIRCLE = "circle"
    CLOTHOID = "clothoid"


@dataclass
class LineSegment:
    """
    Straight segment starting at (x0, y0) with heading theta0.

    Attributes:
        x0: x coordinate of the start point
        y0: y coordinate of the start point
        theta0: heading (radians)
        L: length
    """
    x0: float
    y0: float
    theta0: float
    L: float

    curve_type = CurveType.LINE


@dataclass
class CircleArc:
    """
    Circular arc starting at (x0, y0) with heading theta0 and curvature k.

    Attributes:
        x0: x coordinate of the start point
        y0: y coordinate of the start point
        theta0: initial heading (radians)
        k: signed curvature (positive turns left)
        L: arc length
    """
    x0: float
    y0: float
    theta0: float
    k: float
    L: float

    curve_type = CurveType.CIRCLE
