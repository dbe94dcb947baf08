# gpclass_jax/core/data.py
"""
Data containers.

Plain frozen views over the arrays that flow between workflow stages. They
make no probabilistic assumptions; the grid and the dataset are created once
and never mutated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp

from .errors import ConfigurationError


@dataclass(frozen=True)
class InputGrid:
    """
    Evenly spaced, strictly increasing 1-D inputs.

    - x: (n_init,)
    """
    x: jnp.ndarray

    def __len__(self) -> int:
        return self.x.shape[0]


def make_grid(lower: float = -1.0, upper: float = 1.0, n_init: int = 1000) -> InputGrid:
    """
    Build an evenly spaced grid on [lower, upper].

    Args:
        lower: Left end point
        upper: Right end point (must exceed `lower` when n_init > 1)
        n_init: Number of grid points (0 gives an empty grid)

    Returns:
        InputGrid with n_init points
    """
    n_init = int(n_init)
    if n_init < 0:
        raise ConfigurationError(f"n_init must be non-negative, got {n_init}")
    if n_init > 1 and not upper > lower:
        raise ConfigurationError(f"upper ({upper}) must exceed lower ({lower})")
    return InputGrid(jnp.linspace(lower, upper, n_init))


@dataclass(frozen=True)
class Dataset:
    """
    Training subset D = (x, y) of a grid and its observations.

    - x: (n,) inputs, ascending
    - y: (n,) binary outcomes
    - idx: (n,) sorted, unique grid indices the subset was taken from
    """
    x: jnp.ndarray
    y: jnp.ndarray
    idx: jnp.ndarray

    def as_payload(self) -> dict:
        """Named arrays for the posterior model."""
        return {"n": len(self), "x": self.x, "y": self.y}

    def __len__(self) -> int:
        return self.x.shape[0]


def subsample(key, grid: InputGrid, y: jnp.ndarray, n: int) -> Dataset:
    """
    Draw n grid points uniformly without replacement.

    Indices are sorted ascending before subsetting, so the returned inputs
    stay ordered.

    Args:
        key: PRNG key
        grid: Full input grid
        y: Observations on the full grid, shape (n_init,)
        n: Subset size, 0 <= n <= n_init

    Returns:
        Dataset of size n
    """
    n_init = len(grid)
    n = int(n)
    if y.shape[0] != n_init:
        raise ConfigurationError(
            f"y has {y.shape[0]} entries but the grid has {n_init} points"
        )
    if n < 0 or n > n_init:
        raise ConfigurationError(f"subset size n={n} must satisfy 0 <= n <= n_init={n_init}")

    idx = jax.random.choice(key, n_init, shape=(n,), replace=False)
    idx = jnp.sort(idx)
    return Dataset(grid.x[idx], y[idx], idx)


__all__ = [
    "InputGrid",
    "make_grid",
    "Dataset",
    "subsample",
]
