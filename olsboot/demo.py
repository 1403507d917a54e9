"""Demonstration of the olsboot package.

Fits a simple regression to simulated data (200 points, y = 0.4 x + noise,
x ~ N(10, 2)), bootstraps the slope 1000 times, and compares the bootstrap
standard error to the analytic one. Run with ``python -m olsboot.demo``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import numpy as np

from .estimators import OLS, BootConfig
from .exceptions import DegenerateFitError, InvalidInputError
from .output import bootstrap_hist_plot, fit_plot, modelsummary, se_comparison
from .sim.montecarlo import se_convergence_study, simulate_linear_data

DEMO_FIG_DIR = Path(__file__).resolve().parent / "demo_output"
_LOGGER = logging.getLogger(__name__)
SOFT_FAILURE_EXCEPTIONS: tuple[type[Exception], ...] = (
    RuntimeError,
    ValueError,
    np.linalg.LinAlgError,
    OSError,
)


def _save_demo_figure(fig, filename: str) -> None:
    """Save the figure to the output directory and close the handle."""
    import matplotlib.pyplot as plt

    try:
        DEMO_FIG_DIR.mkdir(parents=True, exist_ok=True)
        path = DEMO_FIG_DIR / filename
        fig.savefig(path, dpi=150, bbox_inches="tight")
    except (OSError, RuntimeError, ValueError) as exc:  # pragma: no cover - best effort log
        _LOGGER.debug("Figure save failed for %s: %s", filename, exc)
        print(f"  [Figure save failed: {exc}]")
        return
    finally:
        plt.close(fig)
    print(f"  [Figure saved to {path}]")


def _run_demo_block(label: str, func: Callable[[], None]) -> None:
    """Execute a demonstration function, logging any soft failures."""
    try:
        func()
    except SOFT_FAILURE_EXCEPTIONS as exc:
        _LOGGER.debug("%s demo failed: %s", label, exc)
        print(f"\n[{label} demo failed: {exc}]")


def demo_bootstrap_se():
    """Bootstrap vs analytic standard error of the slope."""
    print("\n" + "=" * 70)
    print(" 1. PAIRS BOOTSTRAP OF THE OLS SLOPE")
    print("=" * 70)

    df = simulate_linear_data(200, slope=0.4, x_mean=10.0, x_sd=2.0, seed=42)
    model = OLS.from_frame(df, y="y", x="x")
    res = model.fit(boot=BootConfig(n_boot=1000, seed=42))

    print(modelsummary([res], ["OLS"]))
    print()
    print(se_comparison(res).to_string(float_format=lambda v: f"{v:.4f}"))

    fig, _ = fit_plot(df["x"], df["y"], res)
    _save_demo_figure(fig, "fit.png")
    fig, _ = bootstrap_hist_plot(res)
    _save_demo_figure(fig, "bootstrap_slopes.png")


def demo_convergence():
    """Bootstrap SE stabilises as the number of replications grows."""
    print("\n" + "=" * 70)
    print(" 2. BOOTSTRAP SE AS B GROWS")
    print("=" * 70)
    print(se_convergence_study((50, 200, 1000, 5000), seed=7, n_jobs=None).to_string())


def demo_degenerate():
    """Degenerate datasets: explicit skip vs raise policies."""
    print("\n" + "=" * 70)
    print(" 3. DEGENERATE RESAMPLES")
    print("=" * 70)
    x = np.array([1.0, 1.0, 1.0, 1.0, 2.0])
    y = np.array([0.9, 1.1, 1.0, 1.2, 2.1])
    res = OLS(y, x).fit(boot=BootConfig(n_boot=500, seed=3, policy="skip"))
    print(f"(a) skip: used {res.boot.n_used}, skipped {res.boot.n_skipped}, se={res.boot.se:.4f}")
    try:
        OLS(y, x).fit(boot=BootConfig(n_boot=500, seed=3, policy="raise"))
    except DegenerateFitError as exc:
        print(f"(b) raise: {exc} (iteration={exc.iteration})")
    try:
        OLS([], [])
    except InvalidInputError as exc:
        print(f"(c) empty dataset: {exc}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    _run_demo_block("Bootstrap SE", demo_bootstrap_se)
    _run_demo_block("Convergence", demo_convergence)
    _run_demo_block("Degenerate", demo_degenerate)


if __name__ == "__main__":
    main()
