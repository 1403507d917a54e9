"""Monte Carlo data generation and convergence checks.

Simulates the textbook design y = a + b x + e with Gaussian predictor and
errors, and compares bootstrap and analytic slope standard errors.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from olsboot.estimators.base import BootConfig
from olsboot.estimators.ols import OLS

__all__ = ["se_convergence_study", "simulate_linear_data"]


def simulate_linear_data(  # noqa: PLR0913
    n_obs: int = 200,
    *,
    slope: float = 0.4,
    intercept: float = 0.0,
    x_mean: float = 10.0,
    x_sd: float = 2.0,
    noise_sd: float = 1.0,
    seed: int | None = None,
) -> pd.DataFrame:
    """Draw ``x ~ N(x_mean, x_sd)`` and ``y = intercept + slope x + N(0, noise_sd)``."""
    if int(n_obs) < 0:
        raise ValueError("n_obs must be non-negative.")
    rng = np.random.default_rng(seed)
    x = rng.normal(x_mean, x_sd, size=int(n_obs))
    y = intercept + slope * x + rng.normal(0.0, noise_sd, size=int(n_obs))
    return pd.DataFrame({"x": x, "y": y})


def se_convergence_study(
    n_boot_grid: Sequence[int] = (100, 1000),
    *,
    n_obs: int = 200,
    seed: int | None = 0,
    n_jobs: int | None = 1,
) -> pd.DataFrame:
    """Bootstrap SE of the slope for each ``n_boot`` on one simulated sample.

    The same dataset is reused across the grid, so differences between rows
    reflect only Monte Carlo noise in the bootstrap itself.
    """
    df = simulate_linear_data(n_obs, seed=seed)
    model = OLS.from_frame(df, y="y", x="x")
    base = model.fit()
    rows = []
    for b in n_boot_grid:
        res = model.fit(boot=BootConfig(n_boot=int(b), seed=seed, n_jobs=n_jobs))
        rows.append(
            {
                "n_boot": int(b),
                "se_bootstrap": res.bootstrap_se,
                "se_analytic": base.slope_se,
                "ratio": res.bootstrap_se / base.slope_se,
            },
        )
    return pd.DataFrame(rows).set_index("n_boot")
