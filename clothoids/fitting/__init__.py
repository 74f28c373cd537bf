"""
Clothoid fitting: G1 Hermite interpolation and the forward problem.
"""

from .g1 import G1Solution, G1Gradient, solve_shape, build_g1, build_g1_d, build_forward

__all__ = ['G1Solution', 'G1Gradient', 'solve_shape', 'build_g1', 'build_g1_d', 'build_forward']
