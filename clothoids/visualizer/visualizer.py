"""
Visualization module for clothoid arcs.

This module provides functions to plot curves, their covering triangles,
intersection points and curvature profiles.
"""

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from typing import List, Optional, Sequence
from ..models.curve import ClothoidCurve
from ..models.triangle import Triangle2D


def plot_curves(curves: Sequence[ClothoidCurve],
                offsets: Sequence[float] = (),
                n_samples: int = 200,
                title: str = "Clothoid Curves",
                save_path: Optional[str] = None,
                show: bool = True):
    """
    Plot one or more clothoid arcs.

    Args:
        curves: Curves to draw
        offsets: Lateral offsets drawn dashed next to every curve
        n_samples: Samples per curve
        title: Plot title
        save_path: Optional path to save figure
        show: Whether to display the plot
    """
    fig, ax = plt.subplots(figsize=(12, 8))

    colors = ['blue', 'green', 'orange', 'purple', 'cyan']
    for i, curve in enumerate(curves):
        color = colors[i % len(colors)]
        _, x, y = curve.sample(n_samples)
        ax.plot(x, y, color=color, linewidth=2, label=f'Curve {i}', zorder=4)

        # Mark start and end
        ax.plot(x[0], y[0], 'o', color=color, markersize=8, zorder=5)
        ax.plot(x[-1], y[-1], '^', color=color, markersize=8, zorder=5)

        for offs in offsets:
            _, xo, yo = curve.sample(n_samples, offs)
            ax.plot(xo, yo, color=color, linestyle='--', linewidth=1, alpha=0.6)

    _finish(ax, title, save_path, show)


def _plot_triangles(ax, triangles: List[Triangle2D], color: str):
    """Plot covering triangles as shaded polygons."""
    for i, tri in enumerate(triangles):
        poly = patches.Polygon(tri.vertices, alpha=0.2, facecolor=color,
                               edgecolor=color, linewidth=1,
                               label='Covering Triangles' if i == 0 else '')
        ax.add_patch(poly)


def plot_bounding_triangles(curve: ClothoidCurve,
                            offs: float = 0.0,
                            max_angle: Optional[float] = None,
                            max_size: Optional[float] = None,
                            title: str = "Covering Triangles",
                            save_path: Optional[str] = None,
                            show: bool = True):
    """
    Plot a curve together with its covering triangles.

    Args:
        curve: Curve to draw
        offs: Lateral offset of the covered curve
        max_angle: Heading variation per triangle
        max_size: Triangle height limit
        title: Plot title
        save_path: Optional save path
        show: Whether to display
    """
    fig, ax = plt.subplots(figsize=(12, 8))

    _plot_triangles(ax, curve.bb_triangles(offs, max_angle, max_size), 'green')
    _, x, y = curve.sample(200, offs)
    ax.plot(x, y, 'b-', linewidth=2, label='Curve', zorder=4)

    _finish(ax, title, save_path, show)


def plot_intersections(curve1: ClothoidCurve,
                       curve2: ClothoidCurve,
                       title: str = "Curve Intersections",
                       save_path: Optional[str] = None,
                       show: bool = True):
    """
    Plot two curves and mark their crossings.

    Args:
        curve1: First curve
        curve2: Second curve
        title: Plot title
        save_path: Optional save path
        show: Whether to display
    """
    fig, ax = plt.subplots(figsize=(12, 8))

    for curve, style, name in ((curve1, 'b-', 'Curve 1'), (curve2, 'g-', 'Curve 2')):
        _, x, y = curve.sample(200)
        ax.plot(x, y, style, linewidth=2, label=name, zorder=4)

    s1, _ = curve1.intersect(curve2)
    if s1:
        pts = [curve1.eval(s) for s in s1]
        ax.plot([p[0] for p in pts], [p[1] for p in pts], 'rx',
                markersize=12, markeredgewidth=2, label='Intersections', zorder=6)

    _finish(ax, title, save_path, show)


def plot_curvature_profile(curve: ClothoidCurve,
                           n_samples: int = 200,
                           title: str = "Curvature Along Curve",
                           save_path: Optional[str] = None,
                           show: bool = True):
    """
    Plot curvature and heading against arclength.

    Args:
        curve: Curve to analyse
        n_samples: Number of samples
        title: Plot title
        save_path: Optional save path
        show: Whether to display
    """
    s, _, _ = curve.sample(n_samples)
    kappa = [curve.kappa(si) for si in s]
    theta = [curve.theta(si) for si in s]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
    ax1.plot(s, kappa, 'b-', linewidth=2)
    ax1.set_ylabel('Curvature (1/m)', fontsize=12)
    ax1.set_title(title, fontsize=14, fontweight='bold')
    ax1.grid(True, alpha=0.3)

    ax2.plot(s, theta, 'g-', linewidth=2)
    ax2.set_xlabel('Arclength (m)', fontsize=12)
    ax2.set_ylabel('Heading (rad)', fontsize=12)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()
    else:
        plt.close()


def _finish(ax, title: str, save_path: Optional[str], show: bool):
    ax.set_xlabel('X Position (m)', fontsize=12)
    ax.set_ylabel('Y Position (m)', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved to {save_path}")

    if show:
        plt.show()
    else:
        plt.close()


if __name__ == "__main__":
    import math

    spiral = ClothoidCurve(0, 0, 0, 0.0, 0.05, 12)
    arc = ClothoidCurve(2, -3, math.pi / 2, 0.1, 0.0, 15)
    plot_intersections(spiral, arc, title="Spiral Against Arc")
