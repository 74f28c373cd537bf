"""
Basic clothoid example.

This script shows how to:
1. Build a clothoid arc from its parameters
2. Evaluate positions, headings and curvature
3. Apply rigid transforms
4. Compute curvature integrals and variations
5. Visualize the arc and its covering triangles
"""

import sys
sys.path.append('..')

import math
from clothoids import ClothoidCurve, setup_logging
from clothoids.visualizer.visualizer import (
    plot_curves, plot_bounding_triangles, plot_curvature_profile
)


def main():
    """Run the basic clothoid demonstration."""

    setup_logging()

    print("=" * 70)
    print("CLOTHOIDS - Basic Curve Demonstration")
    print("=" * 70)

    # ========================================================================
    # Step 1: Build the Arc
    # ========================================================================
    print("\n[1] Building a spiral with a flex point...")

    curve = ClothoidCurve(x0=0, y0=0, theta0=0.3, kappa0=-0.4, dk=0.15, L=8)
    print(f"    {curve}")

    # ========================================================================
    # Step 2: Evaluate
    # ========================================================================
    print("\n[2] Evaluating along the arc...")

    for s in (0.0, 2.0, 4.0, 6.0, curve.length()):
        x, y = curve.eval(s)
        print(f"    s={s:5.2f}  x={x:8.4f}  y={y:8.4f}  "
              f"theta={curve.theta(s):7.4f}  kappa={curve.kappa(s):7.4f}")

    x, y = curve.eval(4.0, 0.5)
    print(f"    Offset point at s=4, t=0.5: ({x:.4f}, {y:.4f})")

    # ========================================================================
    # Step 3: Integrals and Variations
    # ========================================================================
    print("\n[3] Curvature statistics...")

    th_min, th_max = curve.theta_min_max()
    print(f"    Heading range: [{th_min:.4f}, {th_max:.4f}] rad")
    print(f"    Heading total variation: {curve.theta_total_variation():.4f} rad")
    print(f"    Curvature range: {curve.curvature_min_max()}")
    print(f"    Integral of kappa^2: {curve.integral_curvature2():.6f}")
    print(f"    Integral of jerk^2:  {curve.integral_jerk2():.6f}")
    print(f"    Integral of snap^2:  {curve.integral_snap2():.6f}")

    # ========================================================================
    # Step 4: Transforms
    # ========================================================================
    print("\n[4] Transforming a copy...")

    moved = curve.copy()
    moved.rotate(math.pi / 2, 0, 0)
    moved.translate(2, 0)
    print(f"    Rotated and translated end: ({moved.x_end:.4f}, {moved.y_end:.4f})")

    reversed_curve = curve.copy()
    reversed_curve.reverse()
    print(f"    Reversed start heading: {reversed_curve.theta_begin:.4f} rad")

    # ========================================================================
    # Step 5: Visualize
    # ========================================================================
    print("\n[5] Generating visualizations...")

    plot_curves([curve, moved], offsets=(0.5, -0.5),
                title="Spiral and Transformed Copy",
                save_path="basic_curves.png", show=False)
    plot_bounding_triangles(curve, max_angle=math.pi / 8,
                            save_path="basic_triangles.png", show=False)
    plot_curvature_profile(curve, save_path="basic_profile.png", show=False)

    print("\n" + "=" * 70)
    print("Demonstration complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
