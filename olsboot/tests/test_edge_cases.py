import numpy as np
import pandas as pd
import pytest

from olsboot.estimators.base import BootConfig
from olsboot.estimators.ols import OLS
from olsboot.exceptions import DegenerateFitError, InvalidInputError, OLSBootError
from olsboot.utils.helpers import as_xy


def test_errors_are_value_errors():
    assert issubclass(InvalidInputError, ValueError)
    assert issubclass(DegenerateFitError, OLSBootError)
    assert DegenerateFitError("x").iteration is None


def test_empty_dataset():
    with pytest.raises(InvalidInputError, match="empty"):
        OLS([], [])


def test_length_mismatch():
    with pytest.raises(InvalidInputError, match="same length"):
        OLS([1.0, 2.0, 3.0], [1.0, 2.0])


def test_nan_and_inf_rejected():
    with pytest.raises(InvalidInputError, match="NaN"):
        OLS([1.0, np.nan, 3.0], [1.0, 2.0, 3.0])
    with pytest.raises(InvalidInputError, match="NaN"):
        OLS([1.0, 2.0, 3.0], [1.0, np.inf, 3.0])


def test_non_numeric_rejected():
    with pytest.raises(InvalidInputError, match="numeric"):
        as_xy(["a", "b"], [1.0, 2.0])


def test_two_dimensional_rejected():
    with pytest.raises(InvalidInputError, match="1-D"):
        as_xy(np.ones((3, 2)), np.ones(3))


def test_column_vector_accepted():
    x, y = as_xy(np.arange(4.0).reshape(-1, 1), np.arange(4.0))
    assert x.shape == (4,)


def test_as_xy_from_frame():
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "b": [2.0, 4.0, 6.0]})
    x, y = as_xy("a", "b", data=df)
    assert np.array_equal(x, [1.0, 2.0, 3.0])
    with pytest.raises(InvalidInputError, match="not found"):
        as_xy("a", "c", data=df)


def test_constant_predictor_fit():
    with pytest.raises(DegenerateFitError, match="zero variance"):
        OLS([1.0, 2.0, 3.0], [5.0, 5.0, 5.0]).fit()


def test_single_observation():
    model = OLS([1.0], [2.0])
    with pytest.raises(DegenerateFitError):
        model.fit()


def test_two_observations_have_no_residual_dof():
    res = OLS([1.0, 3.0], [0.0, 1.0]).fit()
    assert np.isclose(res.slope, 2.0)
    assert np.isclose(res.intercept, 1.0)
    assert np.isnan(res.slope_se)
    assert res.extra["dof_resid"] == 0


def test_perfect_fit_has_zero_se():
    x = np.arange(10.0)
    res = OLS(2.0 * x + 1.0, x).fit()
    assert np.isclose(res.slope, 2.0)
    assert np.isclose(res.slope_se, 0.0, atol=1e-10)
    assert np.isclose(res.r_squared, 1.0)


def test_two_distinct_points_bootstrap_skip():
    # n=2: half the resamples duplicate one point and are degenerate
    res = OLS([1.0, 3.0], [0.0, 1.0]).fit(boot=BootConfig(n_boot=200, seed=0))
    assert res.boot.n_skipped > 0
    # Every non-degenerate resample is the original pair, so the slope never varies
    assert np.allclose(res.boot.estimates, 2.0)
    assert np.isclose(res.boot.se, 0.0)


def test_caller_mutation_does_not_leak():
    x = np.array([1.0, 2.0, 3.0, 4.0])
    y = np.array([1.0, 2.0, 2.5, 4.5])
    model = OLS(y, x)
    x[:] = 0.0
    res = model.fit()
    assert res.slope > 0
