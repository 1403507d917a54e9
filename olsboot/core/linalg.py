"""Linear algebra routines for simple regression.

Coefficients come from centred moments (``Sxy / Sxx``), which stay accurate
when the predictor has a large mean and a small spread. Every fit, full
sample or bootstrap resample, goes through ``simple_ols_coef`` so there is a
single definition of a degenerate predictor. Quantile helpers used by
bootstrap intervals live here as well.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from olsboot.exceptions import DegenerateFitError, InvalidInputError

if TYPE_CHECKING:
    from numpy.typing import NDArray
else:
    NDArray = np.ndarray  # type: ignore[misc,assignment]

__all__ = [
    "CONST_NAME",
    "finite_sample_quantile_bplus1",
    "simple_ols_coef",
    "sum_sq_dev",
]

# Constant is always the LAST parameter.
CONST_NAME = "_cons"


def sum_sq_dev(x: NDArray[np.float64]) -> float:
    """Sum of squared deviations from the mean (Sxx)."""
    xd = np.asarray(x, dtype=np.float64).reshape(-1)
    if xd.size == 0:
        return 0.0
    d = xd - xd.mean()
    return float(d @ d)


def simple_ols_coef(
    x: NDArray[np.float64], y: NDArray[np.float64],
) -> tuple[float, float, float]:
    """Return ``(slope, intercept, Sxx)`` for ``y = intercept + slope * x``.

    Raises
    ------
    InvalidInputError
        If there are no observations.
    DegenerateFitError
        If ``Sxx`` is not strictly positive (identical predictor values, a
        single observation, or a spread so small its squares underflow), or
        the slope overflows.
    """
    xd = np.asarray(x, dtype=np.float64).reshape(-1)
    yd = np.asarray(y, dtype=np.float64).reshape(-1)
    if xd.size == 0:
        raise InvalidInputError("Cannot fit a regression to zero observations.")
    xbar = float(xd.mean())
    ybar = float(yd.mean())
    xc = xd - xbar
    sxx = float(xc @ xc)
    if not sxx > 0.0:
        raise DegenerateFitError(
            f"Predictor has zero variance across {xd.size} observation(s); slope is undefined.",
        )
    slope = float(xc @ (yd - ybar)) / sxx
    if not np.isfinite(slope):
        raise DegenerateFitError(
            f"Predictor variance {sxx:.3g} is too small for a finite slope.",
        )
    return slope, ybar - slope * xbar, sxx


def finite_sample_quantile_bplus1(x: NDArray[np.float64], q: float) -> float:
    """Compute (B+1) rule quantile for bootstrap statistics."""
    xa = np.asarray(x, dtype=np.float64)
    xa = xa[np.isfinite(xa)]
    if xa.size == 0:
        return float("nan")
    xa.sort()
    B = xa.size
    k = int(np.ceil((B + 1) * float(q)))
    k = max(1, min(k, B))
    return float(xa[k - 1])
