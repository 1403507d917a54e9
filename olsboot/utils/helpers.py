"""Shared helper utilities.

Input coercion for paired observations and small formatting helpers used by
the output modules.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from olsboot.exceptions import InvalidInputError

if TYPE_CHECKING:  # pragma: no cover - import only for type checking
    from numpy.typing import NDArray

__all__ = [
    "as_xy",
    "format_value",
    "series_name",
]


def series_name(obj: Any, default: str) -> str:
    """Return ``obj.name`` when it is a usable label, else ``default``."""
    name = getattr(obj, "name", None)
    if name is None or (isinstance(name, str) and not name.strip()):
        return default
    return str(name)


def _as_vector(obj: Any, label: str) -> NDArray[np.float64]:
    try:
        arr = np.array(obj, dtype=np.float64, copy=True)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{label} must be numeric: {exc}") from exc
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise InvalidInputError(f"{label} must be 1-D; got shape {arr.shape}.")
    return arr


def as_xy(
    x: Any,
    y: Any = None,
    *,
    data: pd.DataFrame | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Coerce paired observations to two validated float64 vectors.

    Either pass two array-likes ``x`` and ``y``, or pass column names together
    with ``data``. The returned arrays are private copies, so later mutation of
    the caller's data cannot leak into a running bootstrap.

    Raises
    ------
    InvalidInputError
        If the dataset is empty, the vectors differ in length, are not 1-D,
        or contain NaN/Inf.
    """
    if data is not None:
        if not isinstance(data, pd.DataFrame):
            raise InvalidInputError("data must be a pandas DataFrame.")
        missing = [c for c in (x, y) if c not in data.columns]
        if missing:
            raise InvalidInputError(f"Columns not found in data: {missing}")
        x, y = data[x], data[y]
    if y is None:
        raise InvalidInputError("Both x and y are required.")

    xd = _as_vector(x, "x")
    yd = _as_vector(y, "y")
    if xd.shape[0] != yd.shape[0]:
        raise InvalidInputError(
            f"x and y must have the same length; got {xd.shape[0]} and {yd.shape[0]}.",
        )
    if xd.shape[0] == 0:
        raise InvalidInputError("Dataset is empty; at least one observation is required.")
    if not (np.all(np.isfinite(xd)) and np.all(np.isfinite(yd))):
        raise InvalidInputError(
            "Input contains NA/NaN/Inf; please drop/clean rows before fitting.",
        )
    return xd, yd


def format_value(val: Any, digits: int = 4) -> str:
    """Format a scalar for tables; blanks for missing values."""
    if val is None:
        return ""
    if isinstance(val, (int, np.integer)) and not isinstance(val, bool):
        return str(int(val))
    try:
        fv = float(val)
    except (TypeError, ValueError):
        return str(val)
    if not np.isfinite(fv):
        return ""
    return f"{fv:.{digits}f}"
