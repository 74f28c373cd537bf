"""
Intersection and projection demo.

Crosses a spiral with a circle arc and with a line, checks collisions
and projects a few points on the spiral.
"""

import sys
sys.path.append('..')

import math
import logging
from clothoids import ClothoidCurve, LineSegment, CircleArc, setup_logging
from clothoids.visualizer.visualizer import plot_intersections


def main():
    """Run the intersection demonstration."""

    setup_logging(logging.INFO)

    print("=" * 70)
    print("CLOTHOIDS - Intersection and Projection")
    print("=" * 70)

    spiral = ClothoidCurve(0, 0, 0, 0.0, 0.05, 12)
    arc = CircleArc(2, -3, math.pi / 2, 0.1, 15)
    line = LineSegment(-1, 2, 0, 12)

    # ------------------------------------------------------------------------
    print("\n[1] Spiral against circle arc")
    s1, s2 = spiral.intersect_arc(arc)
    for a, b in zip(s1, s2):
        x, y = spiral.eval(a)
        print(f"    s_spiral={a:8.4f}  s_arc={b:8.4f}  point=({x:.4f}, {y:.4f})")

    print("\n[2] Spiral against line")
    s1, s2 = spiral.intersect_line(line)
    for a, b in zip(s1, s2):
        print(f"    s_spiral={a:8.4f}  s_line={b:8.4f}")

    print("\n[3] Collision checks")
    far = ClothoidCurve(-1, 30, 0, 0, 0, 12)
    print(f"    spiral x line: {spiral.collision(ClothoidCurve.from_line(line))}")
    print(f"    spiral x far line: {spiral.collision(far)}")
    print(f"    approximate, offset 0.5: "
          f"{spiral.approximate_collision(far, offs=0.5)}")

    # ------------------------------------------------------------------------
    print("\n[4] Projections on the spiral")
    for qx, qy in ((5.0, 3.0), (8.0, -1.0), (-3.0, 0.0)):
        res = spiral.projection(qx, qy)
        ok, s, t = spiral.find_st(qx, qy)
        print(f"    Q=({qx:5.1f}, {qy:5.1f})  {res.status.name:<15} "
              f"s={res.s:7.4f}  d={res.distance:7.4f}  (s, t)=({s:.4f}, {t:.4f}) ok={ok}")

    plot_intersections(spiral, ClothoidCurve.from_arc(arc),
                       title="Spiral Against Arc",
                       save_path="intersections.png", show=False)


if __name__ == "__main__":
    main()
