import logging

import numpy as np
import pytest

from olsboot.core import bootstrap as bs
from olsboot.estimators.base import BootConfig
from olsboot.exceptions import DegenerateFitError, InvalidInputError

# ---------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------

@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def linear_data():
    # Lecture design: x ~ N(10, 2), y = 0.4 x + N(0, 1), n = 200
    rng = np.random.default_rng(2024)
    x = rng.normal(10.0, 2.0, 200)
    y = 0.4 * x + rng.standard_normal(200)
    return x, y

# ---------------------------------------------------------------------
# Unit Tests: building blocks
# ---------------------------------------------------------------------

def test_resample_indices_shape_and_range(rng):
    idx = bs.resample_indices(50, rng)
    assert idx.shape == (50,)
    assert idx.min() >= 0
    assert idx.max() < 50
    # With replacement: duplicates are essentially certain at n=50
    assert np.unique(idx).size < 50


def test_resample_indices_empty(rng):
    with pytest.raises(InvalidInputError):
        bs.resample_indices(0, rng)


def test_ols_slope_matches_polyfit(linear_data):
    x, y = linear_data
    slope, _ = np.polyfit(x, y, 1)
    assert np.isclose(bs.ols_slope(x, y), slope)


def test_ols_slope_degenerate():
    with pytest.raises(DegenerateFitError, match="zero variance"):
        bs.ols_slope(np.array([3.0, 3.0, 3.0]), np.array([1.0, 2.0, 3.0]))
    with pytest.raises(DegenerateFitError):
        bs.ols_slope(np.array([1.0]), np.array([1.0]))

# ---------------------------------------------------------------------
# Unit Tests: Bootstrap SE / interval
# ---------------------------------------------------------------------

def test_bootstrap_se_is_ddof1():
    rng = np.random.default_rng(42)
    draws = rng.standard_normal(10000)
    se = bs.bootstrap_se(draws)
    assert np.isclose(se, np.std(draws, ddof=1))
    assert np.isclose(se, 1.0, atol=0.05)


def test_bootstrap_se_single_draw_is_nan():
    with pytest.warns(RuntimeWarning, match="single draw"):
        se = bs.bootstrap_se(np.array([0.4]))
    assert np.isnan(se)


def test_bootstrap_se_input_validation():
    with pytest.raises(ValueError, match="at least one draw"):
        bs.bootstrap_se(np.array([]))
    with pytest.raises(ValueError, match="Non-finite bootstrap draws detected"):
        bs.bootstrap_se(np.array([1.0, np.nan, 2.0]))


def test_percentile_interval_orders_and_accepts_percent():
    draws = np.arange(1, 1000, dtype=float)
    lo, hi = bs.percentile_interval(draws, 0.90)
    assert lo < hi
    assert (lo, hi) == bs.percentile_interval(draws, 90)
    assert 49.0 <= lo <= 51.0
    assert 949.0 <= hi <= 951.0
    with pytest.raises(ValueError):
        bs.percentile_interval(draws, 0.0)

# ---------------------------------------------------------------------
# Bootstrap estimator
# ---------------------------------------------------------------------

def test_collection_length_and_nonnegative_se(linear_data):
    x, y = linear_data
    res = bs.bootstrap_estimates(x, y, config=BootConfig(n_boot=250, seed=1))
    assert res.estimates.shape == (250,)
    assert res.n_requested == 250
    assert res.n_skipped == 0
    assert res.se >= 0
    assert res.policy == "skip"


def test_matches_manual_resample_and_fit(linear_data):
    x, y = linear_data
    res = bs.bootstrap_estimates(x, y, config=BootConfig(n_boot=20, seed=99))
    gen = np.random.default_rng(99)
    expected = []
    for _ in range(20):
        idx = gen.integers(0, x.size, size=x.size)
        expected.append(np.polyfit(x[idx], y[idx], 1)[0])
    assert np.allclose(res.estimates, expected)
    assert np.isclose(res.se, np.std(expected, ddof=1))


def test_determinism_with_seed(linear_data):
    x, y = linear_data
    a = bs.bootstrap_slope(x, y, n_boot=100, seed=7)
    b = bs.bootstrap_slope(x, y, n_boot=100, seed=7)
    c = bs.bootstrap_slope(x, y, n_boot=100, seed=8)
    assert np.array_equal(a.estimates, b.estimates)
    assert not np.array_equal(a.estimates, c.estimates)


def test_parallel_equals_serial(linear_data):
    x, y = linear_data
    serial = bs.bootstrap_slope(x, y, n_boot=200, seed=3, n_jobs=1)
    threaded = bs.bootstrap_slope(x, y, n_boot=200, seed=3, n_jobs=4)
    assert np.array_equal(serial.estimates, threaded.estimates)
    assert threaded.extra["n_jobs"] == 4


def test_input_is_copied(linear_data):
    x, y = linear_data
    x_mut = x.copy()
    it = bs.iter_bootstrap_estimates(x_mut, y, 5, seed=0)
    x_mut[:] = 1.0  # would make every resample degenerate if shared
    assert len(list(it)) == 5


def test_scenario_close_to_analytic_se(linear_data):
    x, y = linear_data
    res = bs.bootstrap_slope(x, y, n_boot=1000, seed=11)
    n = x.size
    slope = bs.ols_slope(x, y)
    intercept = y.mean() - slope * x.mean()
    resid = y - intercept - slope * x
    sigma2 = resid @ resid / (n - 2)
    se_analytic = np.sqrt(sigma2 / np.sum((x - x.mean()) ** 2))
    assert 0.5 * se_analytic < res.se < 1.5 * se_analytic


def test_custom_statistic_mean(linear_data):
    _, y = linear_data

    def mean_y(xs, ys):
        return float(np.mean(ys))

    res = bs.bootstrap_estimates(y, y, config=BootConfig(n_boot=2000, seed=5), statistic=mean_y)
    assert np.isclose(res.se, np.std(y, ddof=1) / np.sqrt(y.size), rtol=0.15)

# ---------------------------------------------------------------------
# Early termination
# ---------------------------------------------------------------------

def test_early_termination_is_prefix(linear_data):
    x, y = linear_data
    full = bs.bootstrap_estimates(x, y, config=BootConfig(n_boot=50, seed=21))
    partial = []
    for b, est in bs.iter_bootstrap_estimates(x, y, 50, seed=21):
        partial.append(est)
        if b == 9:
            break
    assert len(partial) == 10
    assert np.allclose(partial, full.estimates[:10])


def test_iter_validates_eagerly():
    with pytest.raises(InvalidInputError, match="empty"):
        bs.iter_bootstrap_estimates([], [], 10)
    with pytest.raises(InvalidInputError):
        bs.iter_bootstrap_estimates([1.0, 2.0], [1.0, 2.0], 0)
    with pytest.raises(InvalidInputError, match="policy"):
        bs.iter_bootstrap_estimates([1.0, 2.0], [1.0, 2.0], 5, policy="retry")


def test_iter_rejects_rng_and_seed(rng):
    with pytest.raises(InvalidInputError, match="either rng or seed"):
        bs.iter_bootstrap_estimates([1.0, 2.0], [1.0, 2.0], 5, rng=rng, seed=1)

# ---------------------------------------------------------------------
# Degenerate resamples and boundaries
# ---------------------------------------------------------------------

def test_skip_policy_records_skips(caplog):
    # P(all resampled x equal 1) = 0.8**5, so some skips are certain at B=300
    x = np.array([1.0, 1.0, 1.0, 1.0, 2.0])
    y = np.array([0.9, 1.1, 1.0, 1.2, 2.1])
    with caplog.at_level(logging.WARNING, logger="olsboot.core.bootstrap"):
        res = bs.bootstrap_slope(x, y, n_boot=300, seed=4, policy="skip")
    assert res.n_skipped > 0
    assert res.n_used + res.n_skipped == 300
    assert all(0 <= b < 300 for b in res.skipped)
    assert list(res.skipped) == sorted(res.skipped)
    assert np.all(np.isfinite(res.estimates))
    assert "were skipped" in caplog.text


def test_skipped_iterations_absent_from_iterator():
    x = np.array([1.0, 1.0, 1.0, 1.0, 2.0])
    y = np.array([0.9, 1.1, 1.0, 1.2, 2.1])
    res = bs.bootstrap_slope(x, y, n_boot=100, seed=4)
    yielded = [b for b, _ in bs.iter_bootstrap_estimates(x, y, 100, seed=4)]
    assert sorted(set(yielded) | set(res.skipped)) == list(range(100))
    assert not set(yielded) & set(res.skipped)


def test_raise_policy_aborts_with_iteration():
    x = np.array([1.0, 1.0, 1.0, 1.0, 2.0])
    y = np.array([0.9, 1.1, 1.0, 1.2, 2.1])
    with pytest.raises(DegenerateFitError) as excinfo:
        bs.bootstrap_slope(x, y, n_boot=300, seed=4, policy="raise")
    assert excinfo.value.iteration is not None
    assert 0 <= excinfo.value.iteration < 300


def test_single_observation_always_degenerate():
    with pytest.raises(DegenerateFitError) as excinfo:
        bs.bootstrap_slope([1.0], [2.0], n_boot=10, seed=0, policy="raise")
    assert excinfo.value.iteration == 0
    with pytest.raises(DegenerateFitError, match="All 10 bootstrap resamples"):
        bs.bootstrap_slope([1.0], [2.0], n_boot=10, seed=0, policy="skip")


def test_underflowing_spread_is_degenerate():
    x = [0.0, 1e-200, 0.0, 1e-200]
    y = [1.0, 2.0, 1.0, 2.0]
    with pytest.raises(DegenerateFitError):
        bs.ols_slope(np.asarray(x), np.asarray(y))
    # every resample underflows, so the run fails as a degenerate fit
    with pytest.raises(DegenerateFitError, match="All 50 bootstrap resamples"):
        bs.bootstrap_slope(x, y, n_boot=50, seed=0)


def test_iterator_all_degenerate_raises():
    with pytest.raises(DegenerateFitError, match="All 10 bootstrap resamples"):
        list(bs.iter_bootstrap_estimates([1.0], [2.0], 10, seed=0))


def test_iterator_logs_skip_count(caplog):
    x = np.array([1.0, 1.0, 1.0, 1.0, 2.0])
    y = np.array([0.9, 1.1, 1.0, 1.2, 2.1])
    with caplog.at_level(logging.WARNING, logger="olsboot.core.bootstrap"):
        pairs = list(bs.iter_bootstrap_estimates(x, y, 300, seed=4))
    assert len(pairs) < 300
    assert "were skipped" in caplog.text


def test_single_iteration_convention(linear_data):
    x, y = linear_data
    with pytest.warns(RuntimeWarning):
        res = bs.bootstrap_slope(x, y, n_boot=1, seed=0)
    assert res.estimates.shape == (1,)
    assert np.isnan(res.se)


def test_empty_dataset_is_fatal():
    with pytest.raises(InvalidInputError, match="empty"):
        bs.bootstrap_slope([], [], n_boot=10)


def test_result_is_read_only(linear_data):
    x, y = linear_data
    res = bs.bootstrap_slope(x, y, n_boot=10, seed=0)
    with pytest.raises(ValueError):
        res.estimates[0] = 0.0


def test_result_count_invariant():
    with pytest.raises(ValueError, match="requested iterations"):
        bs.BootstrapResult(estimates=np.array([1.0, 2.0]), n_requested=5, skipped=(1,))
