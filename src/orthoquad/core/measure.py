"""measure.py – discretized measures and their inner products

A :class:`DiscreteMeasure` is the multiset union of the (node, weight)
pairs returned by every component provider at one resolution level.
Integration is additive over a weight decomposition,

    ∫ f w dt = Σ_i ∫ f w_i dt ≈ Σ_i Σ_j f(x_ij) w_ij,

so concatenating the component rules gives a rule for the whole weight.
Inner products are plain weighted sums over the nodes; no power moments
are ever formed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from orthoquad.core.errors import DegenerateRequest, InvalidComponentInput
from orthoquad.core.quadrature import QuadratureRule

__all__ = ["DiscreteMeasure", "validate_rule"]


def validate_rule(nodes: ArrayLike, weights: ArrayLike, label: str = "component") -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Coerce a provider's output to 1‑D float64 arrays or raise.

    Raises
    ------
    InvalidComponentInput
        Empty, multi-dimensional, mismatched-length or non-finite output.
    """
    x = np.asarray(nodes, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if x.ndim != 1 or w.ndim != 1:
        raise InvalidComponentInput(f"{label}: nodes and weights must be 1-D (got shapes {x.shape}, {w.shape})")
    if x.size == 0:
        raise InvalidComponentInput(f"{label}: empty rule")
    if x.size != w.size:
        raise InvalidComponentInput(f"{label}: {x.size} nodes but {w.size} weights")
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(w))):
        raise InvalidComponentInput(f"{label}: non-finite node or weight")
    return x, w


@dataclass(frozen=True, eq=False)
class DiscreteMeasure:
    nodes: NDArray[np.float64]
    weights: NDArray[np.float64]

    @classmethod
    def from_components(cls, components: Sequence[QuadratureRule], n: int) -> "DiscreteMeasure":
        """Query every provider at resolution *n* and concatenate the rules."""
        if len(components) == 0:
            raise DegenerateRequest("at least one weight component is required")
        xs, ws = [], []
        for i, rule in enumerate(components):
            x, w = validate_rule(*rule(n), label=f"component {i}")
            xs.append(x)
            ws.append(w)
        return cls(np.ascontiguousarray(np.concatenate(xs)), np.ascontiguousarray(np.concatenate(ws)))

    @property
    def size(self) -> int:
        return int(self.nodes.size)

    @property
    def mass(self) -> float:
        """Total discretized mass Σ w_j (equals β_0)."""
        return float(np.sum(self.weights))

    def integrate(self, f: Callable[[NDArray[np.float64]], ArrayLike]) -> float:
        """Σ_j f(x_j) w_j for a vectorised *f*."""
        return float(np.dot(self.weights, np.asarray(f(self.nodes), dtype=np.float64)))

    def inner(self, f_vals: ArrayLike, g_vals: ArrayLike) -> float:
        """⟨f, g⟩ = Σ_j f(x_j) g(x_j) w_j from values already tabulated at the nodes."""
        return float(np.sum(self.weights * np.asarray(f_vals) * np.asarray(g_vals)))
