"""quadrature.py – Gaussian quadrature utilities

Builds Gauss rules from three-term recurrence coefficients using the
symmetric‑tridiagonal Jacobi matrix ("Golub–Welsch"), plus a couple of
closed-form rules (Gauss–Chebyshev, Fejér) and small combinators that
turn rules into *quadrature-rule providers*.

A provider is any callable

    rule(n: int) -> (nodes, weights)

approximating ∫ f(t) w(t) dt ≈ Σ f(nodes) · weights for one weight
term.  Providers are what :func:`orthoquad.models.multi_discretization.compute_recurrence`
consumes, one per additive component of a composite weight.
"""
from __future__ import annotations

import math
from typing import Callable, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from orthoquad.core.errors import DegenerateRequest
from orthoquad.core.recurrence import legendre_recurrence

__all__ = [
    "QuadratureRule",
    "gauss_quadrature",
    "gauss_rule",
    "gauss_legendre",
    "gauss_chebyshev",
    "fejer",
    "scaled",
    "mapped",
    "point_masses",
]

Rule = Tuple[NDArray[np.float64], NDArray[np.float64]]
QuadratureRule = Callable[[int], Rule]


# ---------------------------------------------------------------------------
# Golub–Welsch                                                               ──
# ---------------------------------------------------------------------------

def gauss_quadrature(alpha: ArrayLike, beta: ArrayLike, n: int | None = None) -> Rule:
    """Return the *n*-point Gauss rule for the measure described by (α, β).

    Parameters
    ----------
    alpha, beta : array_like, shape (N,)
        Recurrence coefficients; ``beta[0]`` must be the total mass.
    n : int, optional
        Number of nodes (``n ≤ N``).  Defaults to ``N``.

    Returns
    -------
    x : ndarray, shape (n,)
        Sorted nodes (eigenvalues of the Jacobi matrix).
    w : ndarray, shape (n,)
        Weights ``β_0 · v_0²`` from the first eigenvector components.

    Notes
    -----
    The Jacobi matrix has ``alpha`` on the diagonal and ``sqrt(beta[1:])``
    on the off-diagonals; it is symmetric, so ``eigh`` returns real,
    ascending eigenvalues.
    """
    alpha = np.asarray(alpha, dtype=np.float64).ravel()
    beta = np.asarray(beta, dtype=np.float64).ravel()
    if alpha.size != beta.size:
        raise ValueError(f"alpha and beta differ in length ({alpha.size} vs {beta.size})")
    if n is None:
        n = alpha.size
    if n < 1 or n > alpha.size:
        raise DegenerateRequest(f"need 1 ≤ n ≤ {alpha.size} nodes (got n={n})")
    if np.any(beta[:n] <= 0.0):
        raise ValueError("beta must be positive for a Gauss rule")

    off = np.sqrt(beta[1:n])
    J = np.diag(alpha[:n]) + np.diag(off, k=1) + np.diag(off, k=-1)

    eigvals, eigvecs = np.linalg.eigh(J)

    idx = np.argsort(eigvals)
    x = eigvals[idx]
    V = eigvecs[:, idx]

    w = beta[0] * V[0, :] ** 2
    return x, w


def gauss_rule(recurrence: Callable[[int], Tuple[NDArray, NDArray]]) -> QuadratureRule:
    """Wrap a recurrence-table function ``N -> (α, β)`` as a rule provider."""

    def rule(n: int) -> Rule:
        alpha, beta = recurrence(n)
        return gauss_quadrature(alpha, beta)

    return rule


def gauss_legendre(n: int) -> Rule:
    """*n*-point Gauss–Legendre rule on [−1, 1] (w = 1)."""
    return gauss_quadrature(*legendre_recurrence(n))


# ---------------------------------------------------------------------------
# Closed-form rules                                                          ──
# ---------------------------------------------------------------------------

def gauss_chebyshev(n: int) -> Rule:
    """*n*-point Gauss–Chebyshev rule for w(t) = 1/√(1 − t²).

    Nodes ``cos((2k − 1)π / 2n)`` with equal weights ``π / n``.  Agrees with
    ``gauss_quadrature(*chebyshev1_recurrence(n))`` but needs no eigensolve.
    """
    if n < 1:
        raise DegenerateRequest(f"need n ≥ 1 nodes (got n={n})")
    k = np.arange(1, n + 1, dtype=np.float64)
    x = np.cos((2.0 * k - 1.0) * math.pi / (2.0 * n))[::-1].copy()
    w = np.full(n, math.pi / n)
    return x, w


def fejer(n: int) -> Rule:
    """Fejér's first rule on [−1, 1] for w(t) = 1.

    Interpolatory rule on the Chebyshev points of the first kind; exact for
    polynomials of degree ``n − 1`` only (Gauss–Legendre reaches 2n − 1).
    """
    if n < 1:
        raise DegenerateRequest(f"need n ≥ 1 nodes (got n={n})")
    k = np.arange(1, n + 1, dtype=np.float64)
    theta = (2.0 * k - 1.0) * math.pi / (2.0 * n)
    j = np.arange(1, n // 2 + 1, dtype=np.float64)[:, np.newaxis]
    s = np.sum(np.cos(2.0 * j * theta[np.newaxis, :]) / (4.0 * j**2 - 1.0), axis=0)
    w = (2.0 / n) * (1.0 - 2.0 * s)
    x = np.cos(theta)
    return x[::-1].copy(), w[::-1].copy()


# ---------------------------------------------------------------------------
# Provider combinators                                                       ──
# ---------------------------------------------------------------------------

def scaled(rule: QuadratureRule, factor: float) -> QuadratureRule:
    """Provider for the component ``factor · w(t)``."""

    def scaled_rule(n: int) -> Rule:
        x, w = rule(n)
        return x, factor * np.asarray(w, dtype=np.float64)

    return scaled_rule


def mapped(rule: QuadratureRule, a: float, b: float) -> QuadratureRule:
    """Affinely map a rule on [−1, 1] to [a, b].

    The weight is transported as w((2t − a − b)/(b − a)), so the Jacobian
    ``(b − a)/2`` multiplies the weights.
    """
    if not b > a:
        raise DegenerateRequest(f"need a < b (got a={a}, b={b})")
    half = 0.5 * (b - a)
    mid = 0.5 * (b + a)

    def mapped_rule(n: int) -> Rule:
        x, w = rule(n)
        return half * np.asarray(x, dtype=np.float64) + mid, half * np.asarray(w, dtype=np.float64)

    return mapped_rule


def point_masses(nodes: ArrayLike, weights: ArrayLike) -> QuadratureRule:
    """Discrete component Σ_j w_j δ(t − x_j), independent of the resolution."""
    x = np.array(nodes, dtype=np.float64).ravel()
    w = np.array(weights, dtype=np.float64).ravel()

    def discrete_rule(n: int) -> Rule:
        return x.copy(), w.copy()

    return discrete_rule
