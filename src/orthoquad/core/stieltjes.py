"""
stieltjes.py  –  Recurrence coefficients of a discrete measure (Numba version)
-------------------------------------------------------------------------------
• ``stieltjes(N, measure)`` – discretized Stieltjes procedure.
• ``lanczos(N, measure)``   – RKPW Lanczos variant, same contract.
• Kernels run in nopython mode and report breakdown through an integer
  status; the public wrappers turn that into ``NumericalBreakdown``.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from numba import njit

from orthoquad.core.errors import DegenerateRequest, InvalidComponentInput, NumericalBreakdown
from orthoquad.core.measure import DiscreteMeasure

__all__ = ["stieltjes", "lanczos", "evaluate_monic", "gram_matrix"]

Recurrence = Tuple[NDArray[np.float64], NDArray[np.float64]]


# ────────────────────────────────────────────────────────────────────────
#  1.  Numba cores (no Python objects)
# ────────────────────────────────────────────────────────────────────────
@njit(cache=True)
def _stieltjes_nb(N: int,
                  x: NDArray[np.float64],
                  w: NDArray[np.float64]):
    """
    Parameters
    ----------
    N : int                 – number of coefficients
    x : ndarray (M,)        – nodes of the discrete measure
    w : ndarray (M,)        – weights of the discrete measure

    Returns
    -------
    alpha, beta : ndarray (N,)
    status      : int – −1 on success, else the index k with ⟨p_k,p_k⟩ ≤ 0

    Notes
    -----
    Runs on the orthonormal family q_k = p_k / ‖p_k‖, so the tabulated
    values stay O(1) instead of scaling like β_0 β_1 … β_k:

        α_k     = ⟨t q_k, q_k⟩
        r       = (t − α_k) q_k − √β_k q_{k−1}
        β_{k+1} = ⟨r, r⟩,    q_{k+1} = r / √β_{k+1}
    """
    M = x.size
    alpha = np.zeros(N)
    beta = np.zeros(N)

    s = 0.0
    for j in range(M):
        s += w[j]
    if not s > 0.0:
        return alpha, beta, 0
    beta[0] = s

    # q_{k-1} and q_k tabulated at the nodes
    q_prev = np.zeros(M)
    q_cur = np.full(M, 1.0 / np.sqrt(s))
    sqrt_b = 0.0

    for k in range(N):
        sx = 0.0
        for j in range(M):
            sx += w[j] * x[j] * q_cur[j] * q_cur[j]
        alpha[k] = sx

        if k + 1 < N:
            s = 0.0
            for j in range(M):
                r = (x[j] - alpha[k]) * q_cur[j] - sqrt_b * q_prev[j]
                q_prev[j] = q_cur[j]
                q_cur[j] = r
                s += w[j] * r * r
            if not s > 0.0:
                return alpha, beta, k + 1
            beta[k + 1] = s
            sqrt_b = np.sqrt(s)
            for j in range(M):
                q_cur[j] /= sqrt_b

    return alpha, beta, -1


@njit(cache=True)
def _lanczos_nb(N: int,
                x: NDArray[np.float64],
                w: NDArray[np.float64]):
    """
    Orthogonal similarity reduction of diag(x) bordered by √w to
    tridiagonal form, one node at a time (Rutishauser / Gragg–Harrod).

    Returns the same triple as ``_stieltjes_nb``; status is the first
    index with a non-positive β, or −1.
    """
    M = x.size
    p0 = x.copy()
    p1 = np.zeros(M)
    p1[0] = w[0]

    for n in range(M - 1):
        pn = w[n + 1]
        gam = 1.0
        sig = 0.0
        t = 0.0
        xlam = x[n + 1]
        for k in range(n + 2):
            rho = p1[k] + pn
            tmp = gam * rho
            tsig = sig
            if rho <= 0.0:
                gam = 1.0
                sig = 0.0
            else:
                gam = p1[k] / rho
                sig = pn / rho
            tk = sig * (p0[k] - xlam) - gam * t
            p0[k] = p0[k] - (tk - t)
            t = tk
            if sig <= 0.0:
                pn = tsig * p1[k]
            else:
                pn = (t * t) / sig
            p1[k] = tmp

    alpha = p0[:N].copy()
    beta = p1[:N].copy()
    for k in range(N):
        if not beta[k] > 0.0:
            return alpha, beta, k
    return alpha, beta, -1


# ────────────────────────────────────────────────────────────────────────
#  2.  Public wrappers
# ────────────────────────────────────────────────────────────────────────
def _check_request(N: int, measure: DiscreteMeasure) -> None:
    if N < 1:
        raise DegenerateRequest(f"need N ≥ 1 recurrence coefficients (got N={N})")
    if N > measure.size:
        raise InvalidComponentInput(
            f"components supplied only {measure.size} nodes in total; N={N} coefficients need at least N"
        )


def _finish(alpha, beta, status: int, method: str) -> Recurrence:
    if status >= 0:
        raise NumericalBreakdown(
            f"{method}: non-positive norm at k={status}; the discretized weight is not positive",
            k=status,
        )
    if not (np.all(np.isfinite(alpha)) and np.all(np.isfinite(beta))):
        k = int(np.argmin(np.isfinite(alpha) & np.isfinite(beta)))
        raise NumericalBreakdown(f"{method}: non-finite coefficient at k={k}", k=k)
    return alpha, beta


def stieltjes(N: int, measure: DiscreteMeasure) -> Recurrence:
    """
    Discretized Stieltjes procedure.

    α_k = ⟨t p_k, p_k⟩ / ⟨p_k, p_k⟩,   β_0 = ⟨p_0, p_0⟩,
    β_k = ⟨p_k, p_k⟩ / ⟨p_{k−1}, p_{k−1}⟩,

    with p_k generated on the fly from the coefficients already found.
    The kernel carries p_k normalised to unit norm, so neither the
    tabulated values nor the norms under- or overflow for large N.

    Raises
    ------
    NumericalBreakdown if some ⟨p_k, p_k⟩ ≤ 0.
    """
    _check_request(N, measure)
    alpha, beta, status = _stieltjes_nb(N, measure.nodes, measure.weights)
    return _finish(alpha, beta, int(status), "stieltjes")


def lanczos(N: int, measure: DiscreteMeasure) -> Recurrence:
    """
    Lanczos (RKPW) procedure on the same discrete measure.

    Cost is O(M²) in the number of nodes against O(N·M) for Stieltjes, but
    it only applies orthogonal rotations, so it is less sensitive to
    cancellation in the three-term update.
    """
    # zero-weight nodes would decouple the leading block
    keep = measure.weights != 0.0
    if not np.any(keep):
        raise NumericalBreakdown("lanczos: all weights vanish", k=0)
    if not np.all(keep):
        measure = DiscreteMeasure(np.ascontiguousarray(measure.nodes[keep]),
                                  np.ascontiguousarray(measure.weights[keep]))
    _check_request(N, measure)
    alpha, beta, status = _lanczos_nb(N, measure.nodes, measure.weights)
    return _finish(alpha, beta, int(status), "lanczos")


# ────────────────────────────────────────────────────────────────────────
#  3.  Diagnostics
# ────────────────────────────────────────────────────────────────────────
def evaluate_monic(alpha: ArrayLike, beta: ArrayLike, t: ArrayLike) -> NDArray[np.float64]:
    """Return P with P[k] = p_k(t), k = 0..N−1, from the recurrence."""
    alpha = np.asarray(alpha, dtype=np.float64)
    beta = np.asarray(beta, dtype=np.float64)
    t = np.asarray(t, dtype=np.float64)
    N = alpha.size
    P = np.empty((N,) + t.shape)
    P[0] = 1.0
    if N > 1:
        P[1] = t - alpha[0]
    for k in range(1, N - 1):
        P[k + 1] = (t - alpha[k]) * P[k] - beta[k] * P[k - 1]
    return P


def gram_matrix(measure: DiscreteMeasure, alpha: ArrayLike, beta: ArrayLike) -> NDArray[np.float64]:
    """G[i, j] = ⟨p_i, p_j⟩ under *measure*; diagonal for an orthogonal family."""
    P = evaluate_monic(alpha, beta, measure.nodes)
    N = P.shape[0]
    G = np.empty((N, N))
    for i in range(N):
        for j in range(i, N):
            G[i, j] = G[j, i] = measure.inner(P[i], P[j])
    return G
