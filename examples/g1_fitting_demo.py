"""
G1 Hermite interpolation demo.

Fits clothoids between pairs of poses, prints the fitted parameters and
the sensitivity of the fit to the boundary headings, then joins a list
of poses into a G1 spline.
"""

import sys
sys.path.append('..')

import math
from clothoids import ClothoidCurve, Pose, ConvergenceError, setup_logging
from clothoids.visualizer.visualizer import plot_curves


def fit_pairs():
    """Fit single arcs between pose pairs."""

    print("=" * 80)
    print("G1 FITTING")
    print("=" * 80)

    cases = [
        (Pose(0, 0, 0), Pose(1, 0, 0)),
        (Pose(0, 0, 0), Pose(1, 1, math.pi / 2)),
        (Pose(0, 0, 0.5), Pose(4, 0, 0.5)),
        (Pose(0, 0, -1.0), Pose(3, 2, 2.5)),
    ]

    print(f"\n{'start':>22} {'end':>22} {'L':>9} {'kappa0':>9} {'dk':>9} {'iter':>5}")
    print("-" * 80)
    for start, end in cases:
        curve = ClothoidCurve()
        try:
            iterations = curve.build_g1(start.x, start.y, start.theta,
                                        end.x, end.y, end.theta)
        except ConvergenceError as e:
            print(f"    fit failed: {e}")
            continue
        start_txt = f"({start.x}, {start.y}, {start.theta:.3f})"
        end_txt = f"({end.x}, {end.y}, {end.theta:.3f})"
        print(f"{start_txt:>22} {end_txt:>22} "
              f"{curve.length():9.4f} {curve.kappa_begin:9.4f} "
              f"{curve.kappa_d:9.4f} {iterations:5d}")

    grad = ClothoidCurve().build_g1_d(0, 0, -1.0, 3, 2, 2.5)
    print(f"\ndL/dtheta = {grad.L_D}")
    print(f"dk0/dtheta = {grad.k_D}")
    print(f"ddk/dtheta = {grad.dk_D}")


def fit_spline():
    """Join a list of poses with consecutive G1 arcs."""

    poses = [
        Pose(0, 0, 0),
        Pose(5, 2, 0.6),
        Pose(9, 6, 1.2),
        Pose(10, 11, 2.0),
        Pose(6, 14, 3.0),
    ]
    curves = [ClothoidCurve.from_poses(a, b) for a, b in zip(poses, poses[1:])]

    total = sum(c.length() for c in curves)
    energy = sum(c.integral_curvature2() for c in curves)
    print(f"\nSpline of {len(curves)} arcs, length {total:.3f}, "
          f"bending energy {energy:.4f}")

    for a, b in zip(curves, curves[1:]):
        gap = math.hypot(a.x_end - b.x_begin, a.y_end - b.y_begin)
        print(f"    joint gap {gap:.2e}, heading jump {b.theta_begin - a.theta_end:.2e}")

    plot_curves(curves, title="G1 Clothoid Spline",
                save_path="g1_spline.png", show=False)


if __name__ == "__main__":
    setup_logging()
    fit_pairs()
    fit_spline()
