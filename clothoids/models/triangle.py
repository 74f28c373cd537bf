"""
Covering triangles.

A Triangle2D stores its vertices counter-clockwise. Overlap between two
triangles is decided with the separating axis theorem: two convex
polygons are disjoint iff the projections on one of their edge normals
do not overlap.
"""

from typing import Tuple
import numpy as np

Point = Tuple[float, float]


class Triangle2D:
    """
    Triangle given by three points.

    Attributes:
        vertices: 3x2 numpy array, counter-clockwise
    """

    def __init__(self, p1: Point, p2: Point, p3: Point):
        v = np.array([p1, p2, p3], dtype=float)
        if self._signed_area(v) < 0:
            v = v[[0, 2, 1]]
        self.vertices = v

    @staticmethod
    def _signed_area(v: np.ndarray) -> float:
        (x0, y0), (x1, y1), (x2, y2) = v
        return 0.5 * ((x1 - x0) * (y2 - y0) - (x2 - x0) * (y1 - y0))

    @property
    def area(self) -> float:
        return self._signed_area(self.vertices)

    @property
    def p1(self) -> Point:
        return tuple(self.vertices[0])

    @property
    def p2(self) -> Point:
        return tuple(self.vertices[1])

    @property
    def p3(self) -> Point:
        return tuple(self.vertices[2])

    def bbox(self) -> Tuple[float, float, float, float]:
        """Returns (xmin, ymin, xmax, ymax)."""
        xmin, ymin = self.vertices.min(axis=0)
        xmax, ymax = self.vertices.max(axis=0)
        return float(xmin), float(ymin), float(xmax), float(ymax)

    def _edge_normals(self) -> np.ndarray:
        edges = np.roll(self.vertices, -1, axis=0) - self.vertices
        return np.column_stack((-edges[:, 1], edges[:, 0]))

    def overlap(self, other: "Triangle2D", margin: float = 0.0) -> bool:
        """
        Check if two triangles share at least one point.

        Args:
            other: Second triangle
            margin: Gap still considered as contact

        Returns:
            True if the triangles overlap or touch
        """
        axes = np.vstack((self._edge_normals(), other._edge_normals()))
        for axis in axes:
            norm = np.hypot(axis[0], axis[1])
            if norm == 0:
                continue
            axis = axis / norm
            pa = self.vertices @ axis
            pb = other.vertices @ axis
            if pa.max() + margin < pb.min() or pb.max() + margin < pa.min():
                return False
        return True

    def is_inside(self, x: float, y: float, margin: float = 0.0) -> bool:
        """
        Check if a point lies inside the triangle (or within margin of it).
        """
        p = np.array([x, y])
        edges = np.roll(self.vertices, -1, axis=0) - self.vertices
        lengths = np.hypot(edges[:, 0], edges[:, 1])
        # edges at rounding level carry no orientation (flat triangles of straight arcs)
        min_length = 1e-12 * lengths.max()
        for i in range(3):
            a = self.vertices[i]
            edge = edges[i]
            length = lengths[i]
            if length <= min_length:
                continue
            # signed distance, positive on the inner (left) side
            dist = (edge[0] * (p[1] - a[1]) - edge[1] * (p[0] - a[0])) / length
            if dist < -margin:
                return False
        return True

    def distance_min(self, x: float, y: float) -> float:
        """Distance from a point to the triangle (zero inside)."""
        if self.is_inside(x, y):
            return 0.0
        p = np.array([x, y])
        best = np.inf
        for i in range(3):
            a = self.vertices[i]
            b = self.vertices[(i + 1) % 3]
            ab = b - a
            denom = ab @ ab
            t = 0.0 if denom == 0 else np.clip((p - a) @ ab / denom, 0.0, 1.0)
            best = min(best, float(np.hypot(*(a + t * ab - p))))
        return best

    def distance_max(self, x: float, y: float) -> float:
        """Distance from a point to the farthest vertex."""
        d = self.vertices - np.array([x, y])
        return float(np.hypot(d[:, 0], d[:, 1]).max())

    def __repr__(self) -> str:
        (x0, y0), (x1, y1), (x2, y2) = self.vertices
        return (f"Triangle2D(({x0:.6g}, {y0:.6g}), ({x1:.6g}, {y1:.6g}), "
                f"({x2:.6g}, {y2:.6g}))")
