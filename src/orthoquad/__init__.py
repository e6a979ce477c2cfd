"""orthoquad – orthogonal-polynomial recurrences by multiple discretization."""
from __future__ import annotations

from orthoquad.core.errors import (
    ConvergenceNotReached,
    DegenerateRequest,
    InvalidComponentInput,
    NumericalBreakdown,
    OrthoquadError,
)
from orthoquad.core.quadrature import gauss_quadrature
from orthoquad.models.multi_discretization import (
    DiscretizationParams,
    RecurrenceResult,
    compute_recurrence,
    compute_recurrence_from_params,
)

__all__ = [
    "compute_recurrence",
    "compute_recurrence_from_params",
    "DiscretizationParams",
    "RecurrenceResult",
    "gauss_quadrature",
    "OrthoquadError",
    "InvalidComponentInput",
    "DegenerateRequest",
    "NumericalBreakdown",
    "ConvergenceNotReached",
]

__version__ = "0.1.0"
