"""Simulation helpers."""
from .montecarlo import se_convergence_study, simulate_linear_data

__all__ = ["se_convergence_study", "simulate_linear_data"]
