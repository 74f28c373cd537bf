"""
Geometry queries on clothoid arcs: bounding triangles, intersections and
projections.
"""

from .bounding import SplitRecord, bb_split, bb_triangles, bbox
from .intersection import (
    solve_2x2,
    iter_intersections,
    intersect,
    collision,
    approximate_collision,
)
from .projection import (
    ProjectionStatus,
    ProjectionResult,
    feet,
    closest_point,
    find_st,
    closest_point_by_sample,
)

__all__ = [
    'SplitRecord',
    'bb_split',
    'bb_triangles',
    'bbox',
    'solve_2x2',
    'iter_intersections',
    'intersect',
    'collision',
    'approximate_collision',
    'ProjectionStatus',
    'ProjectionResult',
    'feet',
    'closest_point',
    'find_st',
    'closest_point_by_sample',
]
