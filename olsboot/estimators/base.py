"""Base classes and bootstrap configuration.

This module defines the abstract base estimator, the bootstrap configuration
data structure, and the estimation results container.
"""

# olsboot/estimators/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from olsboot.core import bootstrap as bt
from olsboot.core import linalg as la
from olsboot.core.bootstrap import normalize_ci_level
from olsboot.exceptions import InvalidInputError

if TYPE_CHECKING:  # import-only typing
    from numpy.typing import NDArray

    from olsboot.core.bootstrap import BootstrapResult

__all__ = [
    "BaseEstimator",
    "BootConfig",
    "EstimationResult",
    "normalize_ci_level",
]


# ---------------------------------------------------------------------
# Bootstrap configuration (pairs bootstrap only)
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BootConfig:
    """Pairs bootstrap configuration.

    Notes
    -----
    - Replications: default is 1000.
    - Degenerate resamples (zero predictor variance):
        * ``policy="skip"`` (default) drops the iteration, records its index in
          ``BootstrapResult.skipped`` and logs a warning with the count.
        * ``policy="raise"`` aborts with ``DegenerateFitError``.
    - Parallelism: ``n_jobs`` threads fit resamples concurrently; ``None``
      means ``min(cpu_count, 4)``. Indices are always drawn sequentially, so
      results do not depend on ``n_jobs``.

    Reproducibility:
        * Use `seed` to initialize RNG deterministically (np.random.Generator).

    """

    n_boot: int = bt.DEFAULT_BOOTSTRAP_ITERATIONS
    seed: int | None = None
    policy: str = "skip"
    n_jobs: int | None = 1

    def __post_init__(self) -> None:
        if isinstance(self.n_boot, bool) or not isinstance(self.n_boot, (int, np.integer)):
            raise InvalidInputError(f"n_boot must be an integer; got {self.n_boot!r}.")
        if int(self.n_boot) < 1:
            raise InvalidInputError(f"n_boot must be >= 1; got {self.n_boot}.")
        if self.n_jobs is not None and (
            isinstance(self.n_jobs, bool) or not isinstance(self.n_jobs, (int, np.integer))
        ):
            raise InvalidInputError(f"n_jobs must be an integer or None; got {self.n_jobs!r}.")
        if self.n_jobs is not None and int(self.n_jobs) < 1:
            raise InvalidInputError(f"n_jobs must be >= 1 or None; got {self.n_jobs}.")
        object.__setattr__(self, "n_boot", int(self.n_boot))
        object.__setattr__(self, "policy", bt.normalize_policy(self.policy))

    def rng(self) -> np.random.Generator:
        """Fresh generator seeded from ``seed``; each call restarts the stream."""
        return np.random.default_rng(self.seed)

    def replace(self, **changes: Any) -> BootConfig:
        """Return a copy with ``changes`` applied (re-validated)."""
        return replace(self, **changes)


# ---------------------------------------------------------------------
# Results container
# ---------------------------------------------------------------------
@dataclass
class EstimationResult:
    """Container for simple regression results.

    ``params`` and ``se`` share the index ``[<x name>, "_cons"]`` (constant
    last). ``se`` holds the analytic OLS standard errors; the pairs bootstrap,
    when requested, is attached as ``boot``. Analytic SEs are NaN when the
    residual degrees of freedom are zero (``n_obs <= 2``).
    """

    params: pd.Series
    se: pd.Series
    sigma: float = float("nan")
    r_squared: float = float("nan")
    n_obs: int | None = None
    boot: BootstrapResult | None = None
    model_info: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    """Dictionary for estimator-specific diagnostics and intermediate results."""

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        head = ", ".join(f"{k}={v}" for k, v in self.model_info.items())
        return f"EstimationResult(k={len(self.params)}, n={self.n_obs}, {head})"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate the result contract: aligned, finite coefficients."""
        if not isinstance(self.params, pd.Series):
            raise ValueError("params must be a pandas Series.")
        if not isinstance(self.se, pd.Series):
            raise ValueError("se must be a pandas Series aligned to params.")
        if not self.se.index.equals(self.params.index):
            raise ValueError("se index must exactly match params index and order.")
        if self.params.index[-1] != la.CONST_NAME:
            raise ValueError(f"The constant '{la.CONST_NAME}' must be the last parameter.")
        if not np.all(np.isfinite(self.params.to_numpy())):
            raise ValueError("params contains non-finite values.")

    @property
    def slope(self) -> float:
        return float(self.params.iloc[0])

    @property
    def intercept(self) -> float:
        return float(self.params[la.CONST_NAME])

    @property
    def slope_se(self) -> float:
        """Analytic standard error of the slope."""
        return float(self.se.iloc[0])

    @property
    def bootstrap_se(self) -> float | None:
        """Bootstrap standard error of the slope, if a bootstrap was run."""
        return None if self.boot is None else float(self.boot.se)

    def predict(self, x: Any) -> NDArray[np.float64]:
        """Fitted values ``intercept + slope * x``."""
        xd = np.asarray(x, dtype=np.float64)
        return self.intercept + self.slope * xd


class BaseEstimator(ABC):
    """Abstract base class for olsboot estimators.

    Principles
    ----------
    1) All linear algebra goes through `core.linalg`.
    2) Bootstrap goes through `core.bootstrap`.
    3) Estimators are immutable after construction; `fit` may be called
       repeatedly with different bootstrap configurations.
    """

    def __init__(self) -> None:
        self._results: EstimationResult | None = None

    @property
    def results(self) -> EstimationResult:
        """Most recent fit; raises if `fit` has not been called."""
        if self._results is None:
            raise RuntimeError("Model has not been fitted yet; call fit() first.")
        return self._results

    @staticmethod
    def _coerce_bootstrap(boot: BootConfig | int | None) -> BootConfig | None:
        """Accept a BootConfig, a replication count, or None."""
        if boot is None or isinstance(boot, BootConfig):
            return boot
        if isinstance(boot, (int, np.integer)) and not isinstance(boot, bool):
            return BootConfig(n_boot=int(boot))
        raise InvalidInputError(
            f"boot must be a BootConfig, an int, or None; got {type(boot).__name__}.",
        )

    @abstractmethod
    def fit(self, *, boot: BootConfig | int | None = None) -> EstimationResult:
        """Estimate the model; attach a bootstrap when ``boot`` is given."""
