# gpclass_jax/inference/__init__.py
"""
Sampler layer.

The library defines model densities and simulators (gpclass_jax.models) and
consumes draws; the MCMC transition kernels themselves are blackjax's.
"""
from .base import SamplingCFG, Draws, ALGORITHMS
from .sampler import sample
from .diagnostics import rhat, ess, convergence_table, check_draws
from .init import initial_positions, uniform_positions, map_refine

__all__ = [
    "SamplingCFG",
    "Draws",
    "ALGORITHMS",
    "sample",
    "rhat",
    "ess",
    "convergence_table",
    "check_draws",
    "initial_positions",
    "uniform_positions",
    "map_refine",
]
