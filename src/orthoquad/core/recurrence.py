"""recurrence.py – closed-form recurrence coefficients of classical weights

Every function returns ``(alpha, beta)`` of length *N* for the monic
three-term recurrence

    p_{k+1}(t) = (t − α_k) p_k(t) − β_k p_{k−1}(t),

with the convention that ``beta[0]`` is the total mass ∫ w(t) dt.  These
tables serve as golden references and as the input to the Golub–Welsch
rules in :mod:`orthoquad.core.quadrature`.
"""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from orthoquad.core.errors import DegenerateRequest

__all__ = [
    "legendre_recurrence",
    "chebyshev1_recurrence",
    "chebyshev2_recurrence",
    "jacobi_recurrence",
    "hermite_recurrence",
    "laguerre_recurrence",
]

Recurrence = Tuple[NDArray[np.float64], NDArray[np.float64]]


def _check_N(N: int) -> None:
    if N < 1:
        raise DegenerateRequest(f"need N ≥ 1 recurrence coefficients (got N={N})")


# ---------------------------------------------------------------------------
# Legendre & Chebyshev on [−1, 1]                                            ──
# ---------------------------------------------------------------------------

def legendre_recurrence(N: int) -> Recurrence:
    """w(t) = 1 on [−1, 1]:  α_k = 0,  β_0 = 2,  β_k = k² / (4k² − 1)."""
    _check_N(N)
    k = np.arange(1, N, dtype=np.float64)
    alpha = np.zeros(N)
    beta = np.empty(N)
    beta[0] = 2.0
    beta[1:] = k**2 / (4.0 * k**2 - 1.0)
    return alpha, beta


def chebyshev1_recurrence(N: int) -> Recurrence:
    """w(t) = 1/√(1 − t²):  α_k = 0,  β_0 = π,  β_1 = 1/2,  β_k = 1/4."""
    _check_N(N)
    alpha = np.zeros(N)
    beta = np.full(N, 0.25)
    beta[0] = math.pi
    if N > 1:
        beta[1] = 0.5
    return alpha, beta


def chebyshev2_recurrence(N: int) -> Recurrence:
    """w(t) = √(1 − t²):  α_k = 0,  β_0 = π/2,  β_k = 1/4."""
    _check_N(N)
    alpha = np.zeros(N)
    beta = np.full(N, 0.25)
    beta[0] = 0.5 * math.pi
    return alpha, beta


def jacobi_recurrence(N: int, a: float, b: float) -> Recurrence:
    """Jacobi weight w(t) = (1 − t)^a (1 + t)^b on [−1, 1], with a, b > −1.

    Parameters
    ----------
    N : int
        Number of coefficients.
    a, b : float
        Jacobi exponents.

    Notes
    -----
    The n = 0 and n = 1 entries are written out separately because the
    general formula has removable singularities there when a + b ∈ {0, −1}.
    """
    _check_N(N)
    if a <= -1.0 or b <= -1.0:
        raise DegenerateRequest(f"Jacobi exponents must exceed −1 (got a={a}, b={b})")

    alpha = np.empty(N)
    beta = np.empty(N)

    alpha[0] = (b - a) / (a + b + 2.0)
    beta[0] = math.exp(
        (a + b + 1.0) * math.log(2.0)
        + math.lgamma(a + 1.0)
        + math.lgamma(b + 1.0)
        - math.lgamma(a + b + 2.0)
    )
    if N == 1:
        return alpha, beta

    n = np.arange(1, N, dtype=np.float64)
    nab = 2.0 * n + a + b
    alpha[1:] = (b**2 - a**2) / (nab * (nab + 2.0))

    beta[1] = 4.0 * (a + 1.0) * (b + 1.0) / ((a + b + 2.0) ** 2 * (a + b + 3.0))
    if N > 2:
        n = n[1:]
        nab = nab[1:]
        beta[2:] = 4.0 * (n + a) * (n + b) * n * (n + a + b) / (nab**2 * (nab + 1.0) * (nab - 1.0))
    return alpha, beta


# ---------------------------------------------------------------------------
# Unbounded supports                                                         ──
# ---------------------------------------------------------------------------

def hermite_recurrence(N: int) -> Recurrence:
    """w(t) = e^{−t²} on ℝ:  α_k = 0,  β_0 = √π,  β_k = k/2."""
    _check_N(N)
    alpha = np.zeros(N)
    beta = 0.5 * np.arange(N, dtype=np.float64)
    beta[0] = math.sqrt(math.pi)
    return alpha, beta


def laguerre_recurrence(N: int, a: float = 0.0) -> Recurrence:
    """w(t) = t^a e^{−t} on [0, ∞):  α_k = 2k + a + 1,  β_0 = Γ(a+1),  β_k = k(k + a)."""
    _check_N(N)
    if a <= -1.0:
        raise DegenerateRequest(f"Laguerre exponent must exceed −1 (got a={a})")
    k = np.arange(N, dtype=np.float64)
    alpha = 2.0 * k + a + 1.0
    beta = k * (k + a)
    beta[0] = math.gamma(a + 1.0)
    return alpha, beta
