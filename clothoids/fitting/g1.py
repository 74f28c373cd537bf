"""
G1 Hermite interpolation with a single clothoid.

Given two poses (x0, y0, theta0) and (x1, y1, theta1), find kappa0, dk and
L such that the clothoid starting at the first pose ends at the second one.

The problem is moved to the chord frame (chord of unit length on the x
axis). With phi0, phi1 the boundary headings relative to the chord and
the phase

    p(t) = A*(t^2 - t) + phi1*t + phi0*(1 - t),   t in [0, 1]

the end point lies on the chord iff

    g(A) = int_0^1 sin(p(t)) dt = 0

which is solved for A by Newton iteration from a fitted initial guess.
Then L = r / int_0^1 cos(p(t)) dt, kappa0 = (delta - A)/L, dk = 2A/L^2.

Only phi0 is wrapped to (-pi, pi]. phi1 is phi0 plus the requested turning
theta1 - theta0 with whole turns removed, so an arc turning by more than
pi keeps its direction of rotation.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from scipy.optimize import brentq

from ..config import Settings, resolve
from ..exceptions import ConvergenceError, DegenerateGeometryError
from ..models.clothoid_data import ClothoidData
from ..special.fresnel import generalized_fresnel_cs
from ..special.trig import M_1_PI, M_2PI, M_PI, range_symm

logger = logging.getLogger(__name__)

# coefficients of the initial guess A(phi0, phi1)
_GUESS_CF = (2.989696028701907, 0.716228953608281,
             -0.458969738821509, -0.502821153340377,
             0.261062141752652, -0.045854475238709)

# half width of the end-angle bracket of the forward problem
_FORWARD_ALPHA = 2.6


@dataclass
class G1Solution:
    """
    Result of a G1 fit.

    Attributes:
        data: Clothoid parameters, origin at the first pose
        length: Arc length between the two poses
        iterations: Newton iterations performed
    """
    data: ClothoidData
    length: float
    iterations: int


@dataclass
class G1Gradient:
    """
    Derivatives of (L, kappa0, dk) with respect to (theta0, theta1).
    """
    L_D: Tuple[float, float]
    k_D: Tuple[float, float]
    dk_D: Tuple[float, float]


def _initial_guess(phi0: float, phi1: float) -> float:
    CF = _GUESS_CF
    X = phi0 * M_1_PI
    Y = phi1 * M_1_PI
    xy = X * Y
    X *= X
    Y *= Y
    return (phi0 + phi1) * (CF[0] + xy * (CF[1] + xy * CF[2])
                            + (CF[3] + xy * CF[4]) * (X + Y)
                            + CF[5] * (X * X + Y * Y))


def _chord_frame(x0, y0, theta0, x1, y1, theta1):
    dx = x1 - x0
    dy = y1 - y0
    r = math.hypot(dx, dy)
    if r == 0:
        raise DegenerateGeometryError(
            "G1 fit needs distinct boundary points",
            {"x0": x0, "y0": y0, "x1": x1, "y1": y1})
    phi = math.atan2(dy, dx)
    phi0 = range_symm(theta0 - phi)
    # theta1 - theta0 keeps its sign; only whole turns are dropped
    phi1 = phi0 + math.fmod(theta1 - theta0, M_2PI)
    return r, phi0, phi1


def solve_shape(phi0: float, phi1: float, tol: float,
                max_iter: int) -> Tuple[float, int]:
    """
    Newton iteration for the shape parameter A in the chord frame.

    Args:
        phi0: Initial heading relative to the chord, in (-pi, pi]
        phi1: Final heading relative to the chord, phi0 plus the turning
            theta1 - theta0 reduced to (-2pi, 2pi)
        tol: Tolerance on |g(A)|
        max_iter: Iteration budget

    Returns:
        Tuple (A, iterations)

    Raises:
        ConvergenceError: if |g| > tol after max_iter steps or the pivot vanishes
    """
    if phi0 == 0 and phi1 == 0:
        # straight segment, nothing to solve
        return 0.0, 0

    delta = phi1 - phi0
    A = _initial_guess(phi0, phi1)
    niter = 0
    while True:
        C, S = generalized_fresnel_cs(3, 2 * A, delta - A, phi0)
        g = S[0]
        if abs(g) <= tol:
            return A, niter
        dg = C[2] - C[1]
        if niter >= max_iter or dg == 0 or not math.isfinite(dg):
            logger.warning("G1 Newton stopped: phi0=%g phi1=%g g=%g after %d iterations",
                           phi0, phi1, g, niter)
            raise ConvergenceError("G1 Newton iteration did not converge",
                                   iterations=niter, residual=abs(g),
                                   details={"phi0": phi0, "phi1": phi1})
        A -= g / dg
        niter += 1


def build_g1(x0: float, y0: float, theta0: float,
             x1: float, y1: float, theta1: float,
             tol: Optional[float] = None,
             max_iter: Optional[int] = None,
             settings: Optional[Settings] = None) -> G1Solution:
    """
    Fit a clothoid to two poses.

    Args:
        x0, y0, theta0: Initial pose
        x1, y1, theta1: Final pose
        tol: Newton tolerance (default from settings, 1e-12)
        max_iter: Newton iteration budget
        settings: Defaults for the omitted keywords (process defaults if None)

    Returns:
        G1Solution with the fitted parameters

    Raises:
        DegenerateGeometryError: if the two points coincide
        ConvergenceError: if the Newton iteration fails
    """
    cfg = resolve(settings)
    tol = cfg.g1_tolerance if tol is None else tol
    max_iter = cfg.g1_max_iter if max_iter is None else max_iter

    r, phi0, phi1 = _chord_frame(x0, y0, theta0, x1, y1, theta1)
    A, niter = solve_shape(phi0, phi1, tol, max_iter)
    delta = phi1 - phi0

    C, _ = generalized_fresnel_cs(1, 2 * A, delta - A, phi0)
    L = r / C[0]
    if not L > 0:
        raise ConvergenceError("G1 fit produced a non-positive length",
                               iterations=niter, residual=float("nan"),
                               details={"L": L})

    data = ClothoidData(x0=x0, y0=y0, theta0=theta0,
                        kappa0=(delta - A) / L, dk=2 * A / (L * L))
    logger.debug("G1 fit converged in %d iterations: L=%g kappa0=%g dk=%g",
                 niter, L, data.kappa0, data.dk)
    return G1Solution(data=data, length=L, iterations=niter)


def build_g1_d(x0: float, y0: float, theta0: float,
               x1: float, y1: float, theta1: float,
               tol: Optional[float] = None,
               max_iter: Optional[int] = None,
               settings: Optional[Settings] = None) -> Tuple[G1Solution, G1Gradient]:
    """
    Fit a clothoid to two poses and differentiate the result.

    The gradient comes from implicit differentiation of g(A; phi0, phi1) = 0
    at the converged solution; the chord is fixed, so derivatives with
    respect to theta0/theta1 equal those with respect to phi0/phi1.

    Returns:
        Tuple (solution, gradient) where every gradient entry is
        (d/dtheta0, d/dtheta1)
    """
    sol = build_g1(x0, y0, theta0, x1, y1, theta1, tol, max_iter, settings)
    _, phi0, phi1 = _chord_frame(x0, y0, theta0, x1, y1, theta1)
    L = sol.length
    A = 0.5 * sol.data.dk * L * L
    delta = phi1 - phi0
    C, S = generalized_fresnel_cs(3, 2 * A, delta - A, phi0)

    # partial derivatives of p(t): dp/dA = t^2 - t, dp/dphi0 = 1 - t, dp/dphi1 = t
    g_A = C[2] - C[1]
    g_phi = (C[0] - C[1], C[1])
    c_A = -(S[2] - S[1])
    c_phi = (-(S[0] - S[1]), -S[1])
    d_delta = (-1.0, 1.0)

    kappa0 = sol.data.kappa0
    dk = sol.data.dk
    L_D, k_D, dk_D = [], [], []
    for i in range(2):
        A_d = -g_phi[i] / g_A
        C0_d = c_phi[i] + c_A * A_d
        l_d = -L / C[0] * C0_d
        L_D.append(l_d)
        k_D.append((d_delta[i] - A_d) / L - kappa0 / L * l_d)
        dk_D.append(2 * A_d / (L * L) - 2 * dk / L * l_d)
    return sol, G1Gradient(L_D=tuple(L_D), k_D=tuple(k_D), dk_D=tuple(dk_D))


def build_forward(x0: float, y0: float, theta0: float, kappa0: float,
                  x1: float, y1: float,
                  tol: Optional[float] = None,
                  max_iter: Optional[int] = None,
                  settings: Optional[Settings] = None) -> Optional[G1Solution]:
    """
    Clothoid from a pose with prescribed curvature to a point.

    The final heading is free: it is searched so that the G1 fit from
    (x0, y0, theta0) has initial curvature kappa0.

    Args:
        x0, y0, theta0: Initial pose
        kappa0: Initial curvature
        x1, y1: Final point
        tol: Tolerance of the end-angle search and of the G1 fits
        max_iter: Newton budget of the G1 fits
        settings: Defaults for the omitted keywords (process defaults if None)

    Returns:
        G1Solution, or None if no end heading in range matches kappa0

    Raises:
        DegenerateGeometryError: if the two points coincide
    """
    cfg = resolve(settings)
    tol = cfg.g1_tolerance if tol is None else tol
    max_iter = cfg.g1_max_iter if max_iter is None else max_iter
    r, phi0, _ = _chord_frame(x0, y0, theta0, x1, y1, theta0)
    k_target = kappa0 * r

    def residual(phi1: float) -> float:
        A, _ = solve_shape(phi0, phi1, tol, max_iter)
        C, _ = generalized_fresnel_cs(1, 2 * A, phi1 - phi0 - A, phi0)
        # curvature of the unit-chord fit is (delta - A) / L with L = 1 / C0
        return (phi1 - phi0 - A) * C[0] - k_target

    lo = max(-M_PI, -phi0 / 2 - _FORWARD_ALPHA)
    hi = min(M_PI, -phi0 / 2 + _FORWARD_ALPHA)
    f_lo = residual(lo)
    f_hi = residual(hi)
    if f_lo * f_hi > 0:
        logger.debug("forward problem has no bracket: f(%g)=%g f(%g)=%g",
                     lo, f_lo, hi, f_hi)
        return None
    phi1 = brentq(residual, lo, hi, xtol=max(tol, 1e-15))
    theta1 = theta0 - phi0 + phi1
    return build_g1(x0, y0, theta0, x1, y1, theta1, tol, max_iter, cfg)
