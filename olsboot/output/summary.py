"""Summary tables.

Side-by-side comparison of analytic and bootstrap standard errors, rendered
with ``tabulate``. Nothing here recomputes estimates: tables are built only
from fitted results.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

import numpy as np
import pandas as pd
from tabulate import tabulate

from olsboot.core.bootstrap import normalize_ci_level
from olsboot.estimators.base import EstimationResult
from olsboot.utils.helpers import format_value as _format_value

__all__ = ["modelsummary", "se_comparison"]


def se_comparison(result: EstimationResult, *, level: float = 0.95) -> pd.DataFrame:
    """Analytic vs bootstrap standard error of the slope.

    Returns a one-row DataFrame indexed by the slope name. Bootstrap columns
    are NaN when the result carries no bootstrap.
    """
    ci = normalize_ci_level(level)
    pct = int(round(ci * 100))
    name = result.params.index[0]
    boot = result.boot
    row = {
        "estimate": result.slope,
        "se_analytic": result.slope_se,
        "se_bootstrap": np.nan,
        "ratio": np.nan,
        f"ci{pct}_lower": np.nan,
        f"ci{pct}_upper": np.nan,
        "B_used": 0,
        "B_skipped": 0,
    }
    if boot is not None:
        lo, hi = boot.interval(ci)
        row.update(
            {
                "se_bootstrap": boot.se,
                "ratio": boot.se / result.slope_se if result.slope_se > 0 else np.nan,
                f"ci{pct}_lower": lo,
                f"ci{pct}_upper": hi,
                "B_used": boot.n_used,
                "B_skipped": boot.n_skipped,
            },
        )
    return pd.DataFrame([row], index=pd.Index([name], name="term"))


def modelsummary(
    results: EstimationResult | Sequence[EstimationResult],
    model_names: Sequence[str] | None = None,
    *,
    digits: int = 4,
    tablefmt: str | None = None,
) -> str:
    """Render coefficients with analytic ``(se)`` and bootstrap ``[se]`` rows.

    Footer rows report N, R-squared, and bootstrap replications used/skipped.
    """
    if isinstance(results, EstimationResult):
        results = [results]
    results = list(results)
    if not results:
        raise ValueError("modelsummary requires at least one result.")
    if model_names is None:
        model_names = [f"({i + 1})" for i in range(len(results))]
    if len(model_names) != len(results):
        raise ValueError("model_names length must match number of results.")

    # Union of terms in first-seen order; constant last.
    terms: list[str] = []
    for res in results:
        for t in res.params.index:
            if t not in terms:
                terms.append(t)
    const = [t for t in terms if t == results[0].params.index[-1]]
    terms = [t for t in terms if t not in const] + const

    table_data: list[list[str]] = []
    for t in terms:
        coef_row, se_row, boot_row = [t], [""], [""]
        for res in results:
            if t not in res.params.index:
                coef_row.append("")
                se_row.append("")
                boot_row.append("")
                continue
            coef_row.append(_format_value(res.params[t], digits))
            se_val = _format_value(res.se[t], digits)
            se_row.append(f"({se_val})" if se_val else "")
            is_slope = t == res.params.index[0]
            if is_slope and res.boot is not None and np.isfinite(res.boot.se):
                boot_row.append(f"[{_format_value(res.boot.se, digits)}]")
            else:
                boot_row.append("")
        table_data.extend([coef_row, se_row])
        if any(cell for cell in boot_row[1:]):
            table_data.append(boot_row)

    footer_rows = [
        ["N", *[_format_value(r.n_obs) for r in results]],
        ["R2", *[_format_value(r.r_squared, 3) for r in results]],
        ["B", *[_format_value(None if r.boot is None else r.boot.n_used) for r in results]],
        [
            "B skipped",
            *[_format_value(None if r.boot is None else r.boot.n_skipped) for r in results],
        ],
    ]
    headers = ["", *list(model_names)]
    sep = ["" for _ in headers]
    table_all = [*table_data, sep, *footer_rows]
    if tablefmt is None:
        return cast("str", tabulate(table_all, headers=headers, stralign="center"))
    return cast(
        "str",
        tabulate(table_all, headers=headers, stralign="center", tablefmt=tablefmt),
    )
