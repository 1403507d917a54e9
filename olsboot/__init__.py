"""olsboot: pairs bootstrap standard errors for a simple OLS slope.

This package fits y = a + b x by ordinary least squares and estimates the
sampling variability of the slope by resampling (x, y) pairs with replacement.
"""
from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    "OLS",
    "BootConfig",
    "BootstrapResult",
    "DegenerateFitError",
    "EstimationResult",
    "InvalidInputError",
    "bootstrap_estimates",
    "bootstrap_hist_plot",
    "bootstrap_se",
    "bootstrap_slope",
    "fit_plot",
    "iter_bootstrap_estimates",
    "modelsummary",
    "se_comparison",
    "simulate_linear_data",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "BootConfig": ("olsboot.estimators.base", "BootConfig"),
    "EstimationResult": ("olsboot.estimators.base", "EstimationResult"),
    "OLS": ("olsboot.estimators.ols", "OLS"),
    "BootstrapResult": ("olsboot.core.bootstrap", "BootstrapResult"),
    "bootstrap_estimates": ("olsboot.core.bootstrap", "bootstrap_estimates"),
    "bootstrap_se": ("olsboot.core.bootstrap", "bootstrap_se"),
    "bootstrap_slope": ("olsboot.core.bootstrap", "bootstrap_slope"),
    "iter_bootstrap_estimates": ("olsboot.core.bootstrap", "iter_bootstrap_estimates"),
    "DegenerateFitError": ("olsboot.exceptions", "DegenerateFitError"),
    "InvalidInputError": ("olsboot.exceptions", "InvalidInputError"),
    "modelsummary": ("olsboot.output.summary", "modelsummary"),
    "se_comparison": ("olsboot.output.summary", "se_comparison"),
    "bootstrap_hist_plot": ("olsboot.output.plots", "bootstrap_hist_plot"),
    "fit_plot": ("olsboot.output.plots", "fit_plot"),
    "simulate_linear_data": ("olsboot.sim.montecarlo", "simulate_linear_data"),
}


def __getattr__(name: str) -> Any:
    """Lazily import public estimators and utilities on first access."""
    if name in _LAZY_IMPORTS:
        module_name, attr_name = _LAZY_IMPORTS[name]
        module = import_module(module_name)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module 'olsboot' has no attribute '{name}'")


def __dir__() -> list[str]:
    """Ensure dir() exposes lazily imported names."""
    return sorted(set(globals()) | set(__all__))
