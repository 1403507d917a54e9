"""Pairs bootstrap for the slope of a simple linear regression.

Each iteration draws ``n`` row indices uniformly with replacement, refits the
regression on the resampled ``(x, y)`` pairs and records the slope. The sample
standard deviation of the recorded slopes is the bootstrap standard error.

Computation is kept free of presentation: everything here returns arrays or a
``BootstrapResult`` and never plots or prints.
"""

from __future__ import annotations

import logging
import multiprocessing
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from olsboot.exceptions import DegenerateFitError, InvalidInputError
from olsboot.utils.helpers import as_xy

from . import linalg as la

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import NDArray

    from olsboot.estimators.base import BootConfig

LOGGER = logging.getLogger(__name__)

# Default bootstrap replications
DEFAULT_BOOTSTRAP_ITERATIONS: int = 1000

# Degenerate-resample policies: "skip" records and continues, "raise" aborts.
VALID_POLICIES = frozenset({"skip", "raise"})

Statistic = Callable[["NDArray[np.float64]", "NDArray[np.float64]"], float]

__all__ = [
    "DEFAULT_BOOTSTRAP_ITERATIONS",
    "VALID_POLICIES",
    "BootstrapResult",
    "bootstrap_estimates",
    "bootstrap_se",
    "bootstrap_slope",
    "iter_bootstrap_estimates",
    "normalize_ci_level",
    "normalize_policy",
    "ols_slope",
    "percentile_interval",
    "resample_indices",
]


def normalize_ci_level(level: float | None, *, default: float = 0.95) -> float:
    """Normalize confidence level to a probability (0, 1)."""
    if not (0.0 < float(default) < 1.0):
        raise ValueError("default confidence level must lie in (0, 1)")
    if level is None:
        coerced = float(default)
    else:
        coerced = float(level)
        # Accept percentage-style inputs (e.g., 90 for 90%)
        if coerced > 1.0:
            coerced /= 100.0
    if not (0.0 < coerced < 1.0):
        raise ValueError("ci_level must be in (0, 1); supply e.g. 0.95 or 95")
    return coerced


def normalize_policy(policy: str) -> str:
    """Validate a degenerate-resample policy name (case-insensitive)."""
    pol = str(policy).strip().lower()
    if pol not in VALID_POLICIES:
        raise InvalidInputError(
            f"policy must be one of {sorted(VALID_POLICIES)}; got {policy!r}.",
        )
    return pol


def ols_slope(x: NDArray[np.float64], y: NDArray[np.float64]) -> float:
    """OLS slope of ``y`` on ``x`` with intercept, ``Sxy / Sxx``.

    Raises
    ------
    DegenerateFitError
        If ``Sxx`` is not strictly positive (identical ``x`` values, a
        single point, or a spread whose squares underflow).
    """
    return la.simple_ols_coef(x, y)[0]


def resample_indices(n: int, rng: np.random.Generator) -> NDArray[np.int64]:
    """Draw ``n`` indices uniformly with replacement from ``range(n)``."""
    n = int(n)
    if n < 1:
        raise InvalidInputError("Cannot resample an empty dataset.")
    return rng.integers(0, n, size=n)


def bootstrap_se(estimates: NDArray[np.float64]) -> float:
    """Sample standard deviation (ddof=1) of bootstrap draws.

    A single draw has no spread to measure: the result is ``nan`` and a
    ``RuntimeWarning`` is emitted. Non-finite draws are rejected.
    """
    arr = np.asarray(estimates, dtype=np.float64).reshape(-1)
    B = int(arr.size)
    if B == 0:
        raise ValueError("bootstrap_se requires at least one draw.")
    if not np.isfinite(arr).all():
        bad = np.flatnonzero(~np.isfinite(arr))
        raise ValueError(
            "Non-finite bootstrap draws detected (showing up to 10 indices): "
            f"{bad[:10].tolist()}.",
        )
    if B == 1:
        warnings.warn(
            "Bootstrap standard error is undefined for a single draw; returning nan.",
            RuntimeWarning,
            stacklevel=2,
        )
        return float("nan")
    return float(np.std(arr, ddof=1))


def percentile_interval(
    estimates: NDArray[np.float64], level: float | None = 0.95,
) -> tuple[float, float]:
    """Percentile bootstrap interval using the (B+1) quantile rule."""
    alpha = 1.0 - normalize_ci_level(level)
    arr = np.asarray(estimates, dtype=np.float64).reshape(-1)
    lo = la.finite_sample_quantile_bplus1(arr, alpha / 2.0)
    hi = la.finite_sample_quantile_bplus1(arr, 1.0 - alpha / 2.0)
    return lo, hi


# ---------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class BootstrapResult:
    """Estimate Collection produced by the pairs bootstrap.

    ``estimates`` holds one slope per non-skipped iteration, in iteration
    order; ``skipped`` lists the iterations whose resample was degenerate.
    """

    estimates: NDArray[np.float64]
    n_requested: int
    skipped: tuple[int, ...] = ()
    se: float = float("nan")
    seed: int | None = None
    policy: str = "skip"
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        est = np.asarray(self.estimates, dtype=np.float64).reshape(-1)
        est.setflags(write=False)
        object.__setattr__(self, "estimates", est)
        if est.size + len(self.skipped) != int(self.n_requested):
            raise ValueError(
                f"{est.size} estimates + {len(self.skipped)} skipped "
                f"!= {self.n_requested} requested iterations.",
            )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return (
            f"BootstrapResult(B={self.n_used}/{self.n_requested}, "
            f"se={self.se:.6g}, skipped={self.n_skipped}, seed={self.seed})"
        )

    @property
    def n_used(self) -> int:
        return int(self.estimates.size)

    @property
    def n_skipped(self) -> int:
        return len(self.skipped)

    @property
    def mean(self) -> float:
        return float(np.mean(self.estimates))

    def interval(self, level: float | None = 0.95) -> tuple[float, float]:
        """Percentile interval of the collected estimates."""
        return percentile_interval(self.estimates, level)


# ---------------------------------------------------------------------
# Resample-and-fit loop
# ---------------------------------------------------------------------


def _resolve_rng(
    rng: np.random.Generator | None, seed: int | None,
) -> np.random.Generator:
    if rng is not None:
        if seed is not None:
            raise InvalidInputError("Pass either rng or seed, not both.")
        return rng
    return np.random.default_rng(seed)


def _check_n_boot(n_boot: int) -> int:
    if isinstance(n_boot, bool) or int(n_boot) != n_boot or int(n_boot) < 1:
        raise InvalidInputError(f"n_boot must be a positive integer; got {n_boot!r}.")
    return int(n_boot)


def _index_stream(
    n: int, n_boot: int, rng: np.random.Generator,
) -> Iterator[NDArray[np.int64]]:
    for _ in range(n_boot):
        yield resample_indices(n, rng)


def _evaluate(  # noqa: PLR0913
    statistic: Statistic,
    xd: NDArray[np.float64],
    yd: NDArray[np.float64],
    b: int,
    idx: NDArray[np.int64],
    policy: str,
) -> float | None:
    try:
        return float(statistic(xd[idx], yd[idx]))
    except DegenerateFitError as exc:
        if policy == "raise":
            raise DegenerateFitError(
                f"Bootstrap iteration {b}: {exc}", iteration=b,
            ) from exc
        LOGGER.debug("Skipping degenerate bootstrap iteration %d: %s", b, exc)
        return None


def _report_skips(n_skipped: int, n_boot: int) -> None:
    if n_skipped >= n_boot:
        raise DegenerateFitError(
            f"All {n_boot} bootstrap resamples had zero predictor variance; "
            "the dataset needs at least two distinct predictor values.",
        )
    if n_skipped:
        LOGGER.warning(
            "%d of %d bootstrap resamples had zero predictor variance and were skipped",
            n_skipped, n_boot,
        )


def iter_bootstrap_estimates(  # noqa: PLR0913
    x: Any,
    y: Any,
    n_boot: int = DEFAULT_BOOTSTRAP_ITERATIONS,
    *,
    statistic: Statistic = ols_slope,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    policy: str = "skip",
) -> Iterator[tuple[int, float]]:
    """Yield ``(iteration, estimate)`` pairs lazily.

    Inputs are validated before the generator is returned, so an empty
    dataset fails here rather than on the first ``next()``. Breaking out of
    the loop early leaves a valid, if noisier, partial collection.

    Under ``policy="skip"`` degenerate iterations are absent from the yielded
    sequence (gaps in the iteration numbers). When the generator runs to
    completion it logs the skip count, and raises ``DegenerateFitError`` if
    every iteration was skipped.
    """
    xd, yd = as_xy(x, y)
    B = _check_n_boot(n_boot)
    pol = normalize_policy(policy)
    gen = _resolve_rng(rng, seed)

    def _run() -> Iterator[tuple[int, float]]:
        n_skipped = 0
        for b, idx in enumerate(_index_stream(xd.size, B, gen)):
            est = _evaluate(statistic, xd, yd, b, idx, pol)
            if est is None:
                n_skipped += 1
                continue
            yield b, est
        _report_skips(n_skipped, B)

    return _run()


def _resolve_jobs(n_jobs: int | None) -> int:
    if n_jobs is None:
        return min(multiprocessing.cpu_count(), 4)
    return max(int(n_jobs), 1)


def bootstrap_estimates(
    x: Any,
    y: Any,
    *,
    config: BootConfig | None = None,
    statistic: Statistic = ols_slope,
) -> BootstrapResult:
    """Run the pairs bootstrap and collect one estimate per iteration.

    Parameters
    ----------
    x, y : array-like, shape (n,)
        Predictor and response. ``n`` must be at least 1.
    config : BootConfig, optional
        Replications, seed, degenerate policy and worker count. Defaults to
        ``BootConfig()``.
    statistic : callable, default ``ols_slope``
        Maps a resampled ``(x, y)`` pair to a scalar; must raise
        ``DegenerateFitError`` when the resample cannot be fitted.

    Returns
    -------
    BootstrapResult

    Raises
    ------
    InvalidInputError
        Empty or malformed dataset.
    DegenerateFitError
        Under policy ``"raise"`` on the first degenerate resample; under
        ``"skip"`` only when every resample is degenerate.

    Notes
    -----
    With ``n_jobs > 1`` fits run on a thread pool, but indices are still drawn
    sequentially from one generator, so the collection is identical to the
    serial one for a given seed.
    """
    if config is None:
        from olsboot.estimators.base import BootConfig

        config = BootConfig()

    xd, yd = as_xy(x, y)
    B = _check_n_boot(config.n_boot)
    pol = normalize_policy(config.policy)
    n_jobs = _resolve_jobs(config.n_jobs)
    gen = config.rng()
    LOGGER.debug(
        "Pairs bootstrap: n=%d, B=%d, seed=%s, policy=%s, n_jobs=%d",
        xd.size, B, config.seed, pol, n_jobs,
    )

    if n_jobs == 1:
        values = [
            _evaluate(statistic, xd, yd, b, idx, pol)
            for b, idx in enumerate(_index_stream(xd.size, B, gen))
        ]
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            values = list(
                executor.map(
                    lambda b, idx: _evaluate(statistic, xd, yd, b, idx, pol),
                    range(B),
                    _index_stream(xd.size, B, gen),
                ),
            )

    skipped = tuple(b for b, v in enumerate(values) if v is None)
    kept = np.array([v for v in values if v is not None], dtype=np.float64)
    _report_skips(len(skipped), B)

    return BootstrapResult(
        estimates=kept,
        n_requested=B,
        skipped=skipped,
        se=bootstrap_se(kept),
        seed=config.seed,
        policy=pol,
        extra={"n_obs": int(xd.size), "n_jobs": n_jobs},
    )


def bootstrap_slope(  # noqa: PLR0913
    x: Any,
    y: Any,
    *,
    n_boot: int = DEFAULT_BOOTSTRAP_ITERATIONS,
    seed: int | None = None,
    policy: str = "skip",
    n_jobs: int | None = 1,
) -> BootstrapResult:
    """Bootstrap the OLS slope of ``y`` on ``x``; see ``bootstrap_estimates``."""
    from olsboot.estimators.base import BootConfig

    cfg = BootConfig(n_boot=n_boot, seed=seed, policy=policy, n_jobs=n_jobs)
    return bootstrap_estimates(x, y, config=cfg)
