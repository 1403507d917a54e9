"""Plot utilities.

Visualizes the bootstrap distribution of the slope and the fitted regression
line. Plots consume results; they never feed back into computation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import numpy as np
from scipy import stats

if TYPE_CHECKING:
    from olsboot.core.bootstrap import BootstrapResult
    from olsboot.estimators.base import EstimationResult

__all__ = ["bootstrap_hist_plot", "fit_plot"]


def bootstrap_hist_plot(  # noqa: PLR0913
    boot: BootstrapResult | EstimationResult,
    *,
    analytic_se: float | None = None,
    center: float | None = None,
    bins: int | str = "auto",
    level: float | None = 0.95,
    title: str = "Bootstrap distribution of the slope",
    ax: plt.Axes | None = None,
):
    """Histogram of bootstrap slopes with optional normal reference.

    Accepts a ``BootstrapResult`` or an ``EstimationResult`` carrying one; in
    the latter case ``analytic_se`` and ``center`` default to the fitted
    slope's analytic SE and point estimate. The reference density is
    ``N(center, analytic_se^2)``.
    """
    if hasattr(boot, "params"):
        res = boot
        if res.boot is None:
            raise ValueError("EstimationResult has no bootstrap; fit with boot=BootConfig(...).")
        boot = res.boot
        if analytic_se is None:
            analytic_se = res.slope_se
        if center is None:
            center = res.slope
    est = np.asarray(boot.estimates, dtype=float)
    if center is None:
        center = float(np.mean(est))

    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 4))
    else:
        fig = ax.figure

    ax.hist(est, bins=bins, density=True, alpha=0.6, color="C0", label=f"Bootstrap (B={est.size})")
    if analytic_se is not None and np.isfinite(analytic_se) and analytic_se > 0:
        grid = np.linspace(est.min(), est.max(), 200)
        ax.plot(
            grid,
            stats.norm.pdf(grid, loc=center, scale=analytic_se),
            color="C3",
            label=f"Normal, analytic SE={analytic_se:.4f}",
        )
    if level is not None and est.size >= 2:
        lo, hi = boot.interval(level)
        ax.axvline(lo, linestyle=":", linewidth=0.8, color="0.3")
        ax.axvline(hi, linestyle=":", linewidth=0.8, color="0.3")
    ax.axvline(center, linestyle="--", linewidth=0.8, color="0.2")

    ax.set_title(f"{title} (bootstrap SE={boot.se:.4f})")
    ax.set_xlabel("Slope")
    ax.set_ylabel("Density")
    ax.grid(True, linestyle="--", linewidth=0.5)
    ax.legend(frameon=False)
    return fig, ax


def fit_plot(
    x: Any,
    y: Any,
    result: EstimationResult,
    *,
    title: str = "OLS fit",
    ax: plt.Axes | None = None,
):
    """Scatter of the data with the fitted regression line."""
    xd = np.asarray(x, dtype=float).reshape(-1)
    yd = np.asarray(y, dtype=float).reshape(-1)
    if xd.shape != yd.shape:
        raise ValueError("x and y must have the same length.")

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))
    else:
        fig = ax.figure

    ax.scatter(xd, yd, s=12, alpha=0.6, color="C0")
    grid = np.linspace(xd.min(), xd.max(), 50)
    ax.plot(
        grid,
        result.predict(grid),
        color="C3",
        label=f"y = {result.intercept:.3f} + {result.slope:.3f} x",
    )
    ax.set_title(title)
    ax.set_xlabel(str(result.params.index[0]))
    ax.set_ylabel(str(result.model_info.get("Dependent", "y")))
    ax.grid(True, linestyle="--", linewidth=0.5)
    ax.legend(frameon=False)
    return fig, ax
