"""Exception types raised by olsboot.

Both errors subclass ``ValueError`` so callers that already guard numeric
routines with ``except ValueError`` keep working.
"""

from __future__ import annotations

__all__ = ["DegenerateFitError", "InvalidInputError", "OLSBootError"]


class OLSBootError(ValueError):
    """Base class for olsboot errors."""


class InvalidInputError(OLSBootError):
    """Dataset or configuration cannot be used (empty, ragged, non-finite)."""


class DegenerateFitError(OLSBootError):
    """The predictor has zero variance, so the OLS slope is undefined.

    ``iteration`` is the bootstrap iteration that produced the degenerate
    resample, or ``None`` when the fit was requested outside a bootstrap loop.
    """

    def __init__(self, message: str, *, iteration: int | None = None) -> None:
        super().__init__(message)
        self.iteration = iteration
