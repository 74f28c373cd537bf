"""
Models module for clothoid parameters, covering triangles and input primitives.

ClothoidCurve lives in models.curve and is exported from the package root;
it is not imported here because it depends on the geometry subpackage.
"""

from .clothoid_data import ClothoidData, Pose
from .triangle import Triangle2D
from .primitives import CurveType, LineSegment, CircleArc

__all__ = ['ClothoidData', 'Pose', 'Triangle2D', 'CurveType', 'LineSegment', 'CircleArc']
