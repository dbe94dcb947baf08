# gpclass_jax/core/__init__.py
from .data import InputGrid, Dataset, make_grid, subsample
from .errors import (
    GPClassError,
    ConfigurationError,
    NumericalInstabilityError,
    SamplingFailure,
)

__all__ = [
    "InputGrid",
    "Dataset",
    "make_grid",
    "subsample",
    "GPClassError",
    "ConfigurationError",
    "NumericalInstabilityError",
    "SamplingFailure",
]
