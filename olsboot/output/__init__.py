# olsboot/output/__init__.py
"""Output and visualization module for bootstrap results."""
from .plots import bootstrap_hist_plot, fit_plot
from .summary import modelsummary, se_comparison

__all__ = [
    "bootstrap_hist_plot",
    "fit_plot",
    "modelsummary",
    "se_comparison",
]
