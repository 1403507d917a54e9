"""Ordinary Least Squares (OLS) estimator for one predictor.

Fits y = a + b x + u from centred moments, reports analytic standard errors and,
on request, the pairs bootstrap distribution of the slope.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

import numpy as np
import pandas as pd

from olsboot.core import bootstrap as bt
from olsboot.core import linalg as la
from olsboot.exceptions import DegenerateFitError
from olsboot.utils.helpers import as_xy, series_name

from .base import BaseEstimator, BootConfig, EstimationResult

if TYPE_CHECKING:
    from numpy.typing import NDArray


ArrayLike = Union[pd.Series, np.ndarray, list]

LOGGER = logging.getLogger(__name__)


class OLS(BaseEstimator):
    """Simple linear regression of ``y`` on ``x`` with intercept.

    Parameters
    ----------
    y : array-like, shape (n,)
        Response.
    x : array-like, shape (n,)
        Predictor.
    var_name : str, optional
        Label for the slope. Defaults to ``x.name`` for a Series, else ``"x"``.

    Examples
    --------
    >>> import numpy as np
    >>> from olsboot.estimators.ols import OLS
    >>> from olsboot.estimators.base import BootConfig
    >>> rng = np.random.default_rng(42)
    >>> x = rng.normal(10, 2, 200)
    >>> y = 0.4 * x + rng.standard_normal(200)
    >>> res = OLS(y, x).fit(boot=BootConfig(n_boot=1000, seed=1))
    >>> res.slope_se, res.bootstrap_se  # doctest: +SKIP

    Notes
    -----
    - The constant is always the LAST parameter (``_cons``).
    - Analytic SEs use ``sigma^2 = RSS / (n - 2)``:
      ``se(b) = sqrt(sigma^2 / Sxx)``,
      ``se(a) = sqrt(sigma^2 * (1/n + xbar^2 / Sxx))``.

    """

    def __init__(
        self,
        y: ArrayLike,
        x: ArrayLike,
        *,
        var_name: str | None = None,
    ) -> None:
        super().__init__()
        xd, yd = as_xy(x, y)
        self._var_name = var_name if var_name is not None else series_name(x, "x")
        self._y_name = series_name(y, "y")
        self.x_orig: NDArray[np.float64] = xd
        self.y_orig: NDArray[np.float64] = yd
        self._n_obs = int(xd.size)

    @classmethod
    def from_frame(
        cls, data: pd.DataFrame, *, y: str = "y", x: str = "x",
    ) -> OLS:
        """Build OLS model from two DataFrame columns."""
        xd, yd = as_xy(x, y, data=data)
        model = cls(yd, xd, var_name=x)
        model._y_name = y
        return model

    @property
    def param_names(self) -> list[str]:
        return [self._var_name, la.CONST_NAME]

    def fit(self, *, boot: BootConfig | int | None = None) -> EstimationResult:
        """Fit OLS; attach a pairs bootstrap of the slope when ``boot`` is given.

        Raises
        ------
        DegenerateFitError
            If the predictor has zero variance in the full sample.
        """
        boot_cfg = self._coerce_bootstrap(boot)
        x, y = self.x_orig, self.y_orig
        n = self._n_obs
        try:
            slope, intercept, sxx = la.simple_ols_coef(x, y)
        except DegenerateFitError as exc:
            raise DegenerateFitError(
                f"Predictor '{self._var_name}' has zero variance; slope is undefined.",
            ) from exc

        coef = np.array([slope, intercept], dtype=np.float64)
        resid = y - (intercept + slope * x)
        rss = float(resid @ resid)
        dof = n - 2
        sigma2 = rss / dof if dof > 0 else float("nan")
        xbar = float(np.mean(x))
        se_slope = np.sqrt(sigma2 / sxx)
        se_cons = np.sqrt(sigma2 * (1.0 / n + xbar * xbar / sxx))
        tss = la.sum_sq_dev(y)
        r2 = 1.0 - rss / tss if tss > 0.0 else float("nan")

        boot_res = None
        if boot_cfg is not None:
            boot_res = bt.bootstrap_estimates(x, y, config=boot_cfg)

        names = self.param_names
        result = EstimationResult(
            params=pd.Series(coef, index=names, name="coef"),
            se=pd.Series([se_slope, se_cons], index=names, name="se"),
            sigma=float(np.sqrt(sigma2)),
            r_squared=float(r2),
            n_obs=n,
            boot=boot_res,
            model_info={
                "Estimator": "OLS",
                "Dependent": self._y_name,
                "B": None if boot_res is None else boot_res.n_requested,
            },
            extra={"dof_resid": dof, "rss": rss, "sxx": sxx},
        )
        LOGGER.debug(
            "OLS fit: n=%d slope=%.6g se=%.6g boot_se=%s",
            n, result.slope, result.slope_se, result.bootstrap_se,
        )
        self._results = result
        return result
