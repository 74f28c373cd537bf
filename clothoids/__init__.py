"""
Clothoids

A Python library for clothoid (Euler spiral) geometry: evaluation, G1
fitting, bounding triangles, intersections and projections.
"""

__version__ = "0.1.0"
__author__ = "Vaishanth Srinivasan"
__license__ = "MIT"

from .log import setup_logging
from .config import Settings, DEFAULT_SETTINGS
from .exceptions import (
    ClothoidError,
    PreconditionError,
    DegenerateGeometryError,
    ConvergenceError,
)
from .models.clothoid_data import ClothoidData, Pose
from .models.triangle import Triangle2D
from .models.primitives import CurveType, LineSegment, CircleArc
from .models.curve import ClothoidCurve
from .fitting.g1 import G1Solution, G1Gradient, build_g1, build_g1_d, build_forward
from .geometry.projection import ProjectionStatus, ProjectionResult

__all__ = [
    'setup_logging',
    'Settings',
    'DEFAULT_SETTINGS',
    'ClothoidError',
    'PreconditionError',
    'DegenerateGeometryError',
    'ConvergenceError',
    'ClothoidData',
    'Pose',
    'Triangle2D',
    'CurveType',
    'LineSegment',
    'CircleArc',
    'ClothoidCurve',
    'G1Solution',
    'G1Gradient',
    'build_g1',
    'build_g1_d',
    'build_forward',
    'ProjectionStatus',
    'ProjectionResult',
]
