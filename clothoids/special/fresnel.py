"""
Fresnel integrals and their generalisations.

The clothoid position is the integral of (cos, sin) of a quadratic phase.
With the normalised Fresnel integrals

    C(t) = int_0^t cos(pi/2 u^2) du,   S(t) = int_0^t sin(pi/2 u^2) du

everything reduces to the momenta

    X_k(a, b) = int_0^1 t^k cos(a/2 t^2 + b t) dt
    Y_k(a, b) = int_0^1 t^k sin(a/2 t^2 + b t) dt

Two regimes are needed:

* |a| large: complete the square and difference the Fresnel integrals.
  Accuracy degrades as a -> 0 because the difference is divided by sqrt(a).
* |a| small: expand the quadratic part of the phase in a power series and
  use the a = 0 momenta, which in turn combine a forward recurrence
  (stable while k < 2|b|) with the reduced Lommel function for the rest.
  That function is summed as a power series for small arguments and
  through Bessel functions for large ones.
"""

import math
from typing import List, Tuple

from scipy.special import fresnel, gamma, jv, yv

from .trig import M_1_PI, M_1_SQRT_PI, M_PI, M_PI_2

# |a| below this uses the series branch
A_THRESHOLD = 0.01
# number of extra series terms in the small-|a| branch
A_SERIES_SIZE = 3

LOMMEL_MAX_TERMS = 100
# |b| beyond which the reduced Lommel function uses its large-argument form
LOMMEL_SWITCH = 4.0
LOMMEL_SWITCH_GENERAL = 16.0


def fresnel_cs(t: float) -> Tuple[float, float]:
    """
    Normalised Fresnel integrals.

    Args:
        t: Upper integration limit

    Returns:
        Tuple (C(t), S(t))
    """
    s, c = fresnel(t)
    return float(c), float(s)


def fresnel_cs_moments(nk: int, t: float) -> Tuple[List[float], List[float]]:
    """
    Momenta int_0^t u^k cos(pi/2 u^2) du (and sin) for k = 0..nk-1, nk <= 3.
    """
    c0, s0 = fresnel_cs(t)
    C = [c0]
    S = [s0]
    if nk > 1:
        tt = M_PI_2 * t * t
        ss = math.sin(tt)
        cc = math.cos(tt)
        C.append(ss * M_1_PI)
        S.append((1 - cc) * M_1_PI)
        if nk > 2:
            C.append((t * ss - s0) * M_1_PI)
            S.append((c0 - t * cc) * M_1_PI)
    return C, S


def _asymptotic_terminates(mu: float, nu: float) -> bool:
    """True if mu - nu or mu + nu is an odd positive integer."""
    for v in (mu - nu, mu + nu):
        n = round(v)
        if v > 0 and abs(v - n) <= 1e-12 and n % 2 == 1:
            return True
    return False


def _lommel_switch(mu: float, nu: float) -> float:
    base = LOMMEL_SWITCH if _asymptotic_terminates(mu, nu) else LOMMEL_SWITCH_GENERAL
    return max(base, abs(mu))


def _lommel_series(mu: float, nu: float, z: float) -> float:
    tmp = 1 / ((mu + nu + 1) * (mu - nu + 1))
    res = tmp
    for n in range(1, LOMMEL_MAX_TERMS + 1):
        tmp *= (-z / (2 * n + mu - nu + 1)) * (z / (2 * n + mu + nu + 1))
        res += tmp
        if abs(tmp) < abs(res) * 1e-50:
            break
    return res


def _lommel_asymptotic(mu: float, nu: float, z: float) -> float:
    """
    s_{mu,nu}(z) / z^(mu+1) from S_{mu,nu}(z) and Bessel functions.

    S_{mu,nu}(z) ~ z^(mu-1) * sum_m (-1)^m a_m z^(-2m), where
    a_m = prod_{j<=m} ((mu - 2j + 1)^2 - nu^2), and

        s_{mu,nu} = S_{mu,nu} - 2^(mu-1) G((mu-nu+1)/2) G((mu+nu+1)/2)
                    * (sin((mu-nu)pi/2) J_nu(z) - cos((mu-nu)pi/2) Y_nu(z))

    The sum is finite when mu - nu or mu + nu is an odd positive integer;
    otherwise it is cut at its smallest term.
    """
    z = abs(z)
    z2 = z * z
    finite = _asymptotic_terminates(mu, nu)
    term = 1.0
    total = 1.0
    for m in range(1, LOMMEL_MAX_TERMS + 1):
        factor = (mu - 2 * m + 1) ** 2 - nu * nu
        if abs(factor) < 1e-12:
            break
        new = -term * factor / z2
        if not finite and abs(new) >= abs(term):
            break
        term = new
        total += term
        if not finite and abs(term) <= 1e-17 * abs(total):
            break
    half = 0.5 * (mu - nu) * M_PI
    bessel = (2 ** (mu - 1) * gamma(0.5 * (mu - nu + 1)) * gamma(0.5 * (mu + nu + 1))
              * (math.sin(half) * jv(nu, z) - math.cos(half) * yv(nu, z)))
    return total / z2 - bessel / z ** (mu + 1)


def lommel_reduced(mu: float, nu: float, b: float) -> float:
    """
    Reduced Lommel function s_{mu,nu}(b) / b^(mu+1).

    The function is even in b. Up to a switch point the ascending series
    is summed; beyond it the large-argument form is used. The switch is
    at |b| = max(LOMMEL_SWITCH, |mu|) when the asymptotic sum is finite
    (the case of every call made by the momenta below) and at
    max(LOMMEL_SWITCH_GENERAL, |mu|) otherwise.

    Args:
        mu, nu: Orders, with mu +- nu not a negative odd integer
        b: Argument

    Returns:
        s_{mu,nu}(b) / b^(mu+1)
    """
    if abs(b) <= _lommel_switch(mu, nu):
        return _lommel_series(mu, nu, b)
    return _lommel_asymptotic(mu, nu, b)


def eval_xy_a_zero(nk: int, b: float) -> Tuple[List[float], List[float]]:
    """Momenta X_k(0, b), Y_k(0, b) for k = 0..nk-1."""
    sb = math.sin(b)
    cb = math.cos(b)
    b2 = b * b
    X = [0.0] * nk
    Y = [0.0] * nk
    if abs(b) < 1e-3:
        X[0] = 1 - (b2 / 6) * (1 - (b2 / 20) * (1 - (b2 / 42)))
        Y[0] = (b / 2) * (1 - (b2 / 12) * (1 - (b2 / 30)))
    else:
        X[0] = sb / b
        Y[0] = (1 - cb) / b

    # forward recurrence is stable only in the first ~2|b| terms
    m = int(math.floor(2 * abs(b)))
    m = max(min(m, nk), 1)
    for k in range(1, m):
        X[k] = (sb - k * Y[k - 1]) / b
        Y[k] = (k * X[k - 1] - cb) / b

    if m < nk:
        A = b * sb
        D = sb - b * cb
        B = b * D
        C = -b2 * sb
        rLa = lommel_reduced(m + 0.5, 1.5, b)
        rLd = lommel_reduced(m + 0.5, 0.5, b)
        for k in range(m, nk):
            rLb = lommel_reduced(k + 1.5, 0.5, b)
            rLc = lommel_reduced(k + 1.5, 1.5, b)
            X[k] = (k * A * rLa + B * rLb + cb) / (1 + k)
            Y[k] = (C * rLc + sb) / (2 + k) + D * rLd
            rLa = rLc
            rLd = rLb
    return X, Y


def eval_xy_a_small(nk: int, a: float, b: float,
                    p: int = A_SERIES_SIZE) -> Tuple[List[float], List[float]]:
    """Series branch of the momenta, accurate for |a| < A_THRESHOLD."""
    X0, Y0 = eval_xy_a_zero(nk + 4 * p + 2, b)
    X = [X0[j] - a * Y0[j + 2] / 2 for j in range(nk)]
    Y = [Y0[j] + a * X0[j + 2] / 2 for j in range(nk)]
    t = 1.0
    aa = -a * a / 4
    for n in range(1, p + 1):
        t *= aa / (2 * n * (2 * n - 1))
        bf = a / (4 * n + 2)
        for j in range(nk):
            jj = 4 * n + j
            X[j] += t * (X0[jj] - bf * Y0[jj + 2])
            Y[j] += t * (Y0[jj] + bf * X0[jj + 2])
    return X, Y


def eval_xy_a_large(nk: int, a: float, b: float) -> Tuple[List[float], List[float]]:
    """Fresnel-difference branch of the momenta, nk <= 3."""
    s = 1.0 if a > 0 else -1.0
    absa = abs(a)
    z = M_1_SQRT_PI * math.sqrt(absa)
    ell = s * b * M_1_SQRT_PI / math.sqrt(absa)
    g = -0.5 * s * b * b / absa
    cg = math.cos(g) / z
    sg = math.sin(g) / z

    Cl, Sl = fresnel_cs_moments(nk, ell)
    Cz, Sz = fresnel_cs_moments(nk, ell + z)

    dC0 = Cz[0] - Cl[0]
    dS0 = Sz[0] - Sl[0]
    X = [cg * dC0 - s * sg * dS0]
    Y = [sg * dC0 + s * cg * dS0]
    if nk > 1:
        cg /= z
        sg /= z
        dC1 = Cz[1] - Cl[1]
        dS1 = Sz[1] - Sl[1]
        DC = dC1 - ell * dC0
        DS = dS1 - ell * dS0
        X.append(cg * DC - s * sg * DS)
        Y.append(sg * DC + s * cg * DS)
        if nk > 2:
            dC2 = Cz[2] - Cl[2]
            dS2 = Sz[2] - Sl[2]
            DC = dC2 + ell * (ell * dC0 - 2 * dC1)
            DS = dS2 + ell * (ell * dS0 - 2 * dS1)
            cg /= z
            sg /= z
            X.append(cg * DC - s * sg * DS)
            Y.append(sg * DC + s * cg * DS)
    return X, Y


def generalized_fresnel_cs(nk: int, a: float, b: float,
                           c: float) -> Tuple[List[float], List[float]]:
    """
    Generalised Fresnel integrals

        C_k = int_0^1 t^k cos(a/2 t^2 + b t + c) dt
        S_k = int_0^1 t^k sin(a/2 t^2 + b t + c) dt

    for k = 0..nk-1 (nk between 1 and 3).

    Args:
        nk: Number of momenta
        a: Quadratic phase coefficient (twice the t^2 factor)
        b: Linear phase coefficient
        c: Constant phase

    Returns:
        Tuple (C, S) of lists with nk entries
    """
    if not 1 <= nk <= 3:
        raise ValueError(f"nk must be in 1..3, got {nk}")
    if abs(a) < A_THRESHOLD:
        X, Y = eval_xy_a_small(nk, a, b)
    else:
        X, Y = eval_xy_a_large(nk, a, b)
    cc = math.cos(c)
    sc = math.sin(c)
    C = [X[k] * cc - Y[k] * sc for k in range(nk)]
    S = [X[k] * sc + Y[k] * cc for k in range(nk)]
    return C, S


def generalized_fresnel_cs1(a: float, b: float, c: float) -> Tuple[float, float]:
    """Zeroth momentum only; the hot path of position evaluation."""
    C, S = generalized_fresnel_cs(1, a, b, c)
    return C[0], S[0]
