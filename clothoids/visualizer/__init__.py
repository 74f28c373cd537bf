"""
Visualization module for clothoid curves.
"""

from .visualizer import (
    plot_curves,
    plot_bounding_triangles,
    plot_intersections,
    plot_curvature_profile
)

__all__ = [
    'plot_curves',
    'plot_bounding_triangles',
    'plot_intersections',
    'plot_curvature_profile',
]
