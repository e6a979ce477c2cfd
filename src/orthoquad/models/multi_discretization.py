"""multi_discretization.py
================================================
Recurrence coefficients for a weight given as a sum of components,

    w(t) = w_1(t) + … + w_m(t),

each of which comes with its own quadrature-rule provider.  At every
resolution level the component rules are concatenated into one discrete
measure, the Stieltjes (or Lanczos) procedure extracts (α, β), and the
resolution is grown until two successive estimates agree.

Key design choices
------------------
* **Schedule** – start at ``N + 1`` nodes per component (enough for a
  Gauss rule of the component's own weight to be exact on degree 2N − 1),
  then multiply by ``growth`` each round, clamping at ``max_resolution``.
* **Stopping rule** – ``max(‖Δα‖∞, ‖Δβ‖∞) ≤ tolerance``.  Hitting the cap
  first is not an error: the last estimate comes back with
  ``converged=False`` and a ``ConvergenceNotReached`` warning.
* **No hidden state** – the previous iterate is a local of one call.
"""
from __future__ import annotations

import math
import time
import warnings
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Sequence

import numpy as np
from numpy.typing import NDArray

from orthoquad.core.errors import ConvergenceNotReached, DegenerateRequest
from orthoquad.core.measure import DiscreteMeasure
from orthoquad.core.quadrature import QuadratureRule
from orthoquad.core.stieltjes import lanczos, stieltjes

__all__ = [
    "DiscretizationParams",
    "RecurrenceResult",
    "compute_recurrence",
    "compute_recurrence_from_params",
]

_BUILDERS: Dict[str, Callable[[int, DiscreteMeasure], tuple]] = {
    "stieltjes": stieltjes,
    "lanczos": lanczos,
}


# ---------------------------------------------------------------------------
#  Parameter container                                                        ──
# ---------------------------------------------------------------------------
@dataclass
class DiscretizationParams:
    N: int = 8
    max_resolution: int = 2048
    tolerance: float = 1e-12
    method: str = "stieltjes"
    growth: float = 2.0
    verbose: bool = False


@dataclass
class RecurrenceResult:
    """Outcome of :func:`compute_recurrence`.

    Unpacks as ``alpha, beta = result``.
    """

    alpha: NDArray[np.float64]
    beta: NDArray[np.float64]
    converged: bool
    resolution: int
    iterations: int
    error: float

    def __iter__(self) -> Iterator[NDArray[np.float64]]:
        yield self.alpha
        yield self.beta

    @property
    def mass(self) -> float:
        return float(self.beta[0])


# ---------------------------------------------------------------------------
#  Refinement loop                                                            ──
# ---------------------------------------------------------------------------

def _check_request(N: int, components: Sequence[QuadratureRule], max_resolution: int,
                   tolerance: float, method: str, growth: float) -> None:
    if N < 1:
        raise DegenerateRequest(f"need N ≥ 1 recurrence coefficients (got N={N})")
    if len(components) == 0:
        raise DegenerateRequest("at least one weight component is required")
    if max_resolution < N:
        raise DegenerateRequest(f"max_resolution={max_resolution} is below N={N}")
    if not tolerance > 0.0:
        raise DegenerateRequest(f"tolerance must be positive (got {tolerance})")
    if method not in _BUILDERS:
        raise DegenerateRequest(f"unknown method {method!r}; choose from {sorted(_BUILDERS)}")
    if not growth > 1.0:
        raise DegenerateRequest(f"growth factor must exceed 1 (got {growth})")


def compute_recurrence(
    N: int,
    components: Sequence[QuadratureRule],
    max_resolution: int = 2048,
    tolerance: float = 1e-12,
    *,
    method: str = "stieltjes",
    growth: float = 2.0,
    verbose: bool = False,
    stacklevel: int = 2,
) -> RecurrenceResult:
    """Recurrence coefficients of ``Σ_i w_i`` by multiple discretization.

    Parameters
    ----------
    N : int
        Number of coefficients α_0..α_{N−1}, β_0..β_{N−1}.
    components : sequence of callables
        One provider ``n -> (nodes, weights)`` per weight term.
    max_resolution : int
        Largest node count requested from any provider.
    tolerance : float
        Bound on the infinity-norm change between successive estimates.
    method : {"stieltjes", "lanczos"}
        Procedure applied to the combined discrete measure.
    growth : float
        Factor by which the per-component node count grows each round.
    verbose : bool
        Print one progress line per round.
    stacklevel : int
        Passed to ``warnings.warn`` for ``ConvergenceNotReached``; wrappers
        add one per frame so the warning points at their caller.

    Returns
    -------
    RecurrenceResult
        ``beta[0]`` is the total discretized mass.

    Raises
    ------
    DegenerateRequest, InvalidComponentInput, NumericalBreakdown
    """
    _check_request(N, components, max_resolution, tolerance, method, growth)
    builder = _BUILDERS[method]

    M = min(N + 1, max_resolution)
    prev_alpha = prev_beta = None
    err, it = math.inf, 0

    while True:
        t0 = time.perf_counter()
        measure = DiscreteMeasure.from_components(components, M)
        alpha, beta = builder(N, measure)
        it += 1

        if prev_alpha is not None:
            err = max(float(np.max(np.abs(alpha - prev_alpha))),
                      float(np.max(np.abs(beta - prev_beta))))
        if verbose:
            print(f"Iter {it:3d} | M = {M:6d} | err = {err:9.2e} | {time.perf_counter() - t0:5.3f}s")

        if err <= tolerance:
            return RecurrenceResult(alpha, beta, True, M, it, err)
        if M >= max_resolution:
            break

        prev_alpha, prev_beta = alpha, beta
        M = min(int(math.ceil(growth * M)), max_resolution)

    warnings.warn(
        f"no convergence to {tolerance:.1e} within {max_resolution} nodes per component "
        f"(last change {err:.2e})",
        ConvergenceNotReached,
        stacklevel=stacklevel,
    )
    return RecurrenceResult(alpha, beta, False, M, it, err)


def compute_recurrence_from_params(params: DiscretizationParams,
                                   components: Sequence[QuadratureRule]) -> RecurrenceResult:
    return compute_recurrence(
        params.N,
        components,
        params.max_resolution,
        params.tolerance,
        method=params.method,
        growth=params.growth,
        verbose=params.verbose,
        stacklevel=3,
    )
