"""errors.py – exception hierarchy for the discretization engine

Three hard failures and one soft warning category:

* ``InvalidComponentInput`` – a quadrature-rule provider returned garbage.
* ``DegenerateRequest``     – the caller asked for something meaningless.
* ``NumericalBreakdown``    – the discretized measure is not positive.
* ``ConvergenceNotReached`` – a ``RuntimeWarning``; the best estimate is
  still returned.
"""
from __future__ import annotations

__all__ = [
    "OrthoquadError",
    "InvalidComponentInput",
    "DegenerateRequest",
    "NumericalBreakdown",
    "ConvergenceNotReached",
]


class OrthoquadError(Exception):
    """Base class for all hard errors raised by ``orthoquad``."""


class InvalidComponentInput(OrthoquadError, ValueError):
    """A component provider returned empty, mismatched or non-finite arrays."""


class DegenerateRequest(OrthoquadError, ValueError):
    """Request parameters admit no meaningful answer (e.g. ``N < 1``)."""


class NumericalBreakdown(OrthoquadError, ArithmeticError):
    """Non-positive ⟨p_k, p_k⟩ encountered while building coefficients.

    Attributes
    ----------
    k : int
        Recurrence index at which the breakdown was detected.
    """

    def __init__(self, message: str, k: int = -1):
        super().__init__(message)
        self.k = k


class ConvergenceNotReached(RuntimeWarning):
    """Resolution cap reached before successive estimates agreed."""
