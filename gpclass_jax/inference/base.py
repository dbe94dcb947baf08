# gpclass_jax/inference/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal

import jax.numpy as jnp

from ..core.errors import ConfigurationError

ALGORITHMS = ("nuts", "hmc", "fixed_param")


@dataclass(frozen=True)
class SamplingCFG:
    """
    Configuration for one sampler invocation.

    `iterations` counts kept draws per chain; `warmup` iterations are run
    first and discarded. `warmup + iterations` may not exceed
    `max_iterations`.
    """
    iterations: int = 1000
    warmup: int = 1000
    chains: int = 4
    seed: int = 0
    algorithm: Literal["nuts", "hmc", "fixed_param"] = "nuts"
    # Step-size adaptation / kernel
    target_accept: float = 0.8
    max_tree_depth: int = 10  # nuts
    num_integration_steps: int = 16  # hmc
    step_size: float = 0.1  # only used when warmup == 0
    # Initialisation
    init: Literal["uniform", "map"] = "uniform"
    init_radius: float = 2.0  # uniform(-r, r) on the unconstrained scale
    map_steps: int = 200
    map_lr: float = 1e-2
    # Execution
    chain_method: Literal["vectorized", "sequential"] = "vectorized"
    jit: bool = True
    max_iterations: int = 100_000
    # Failure thresholds
    max_divergence_fraction: float = 0.1
    rhat_warn: float = 1.05

    def validate(self) -> SamplingCFG:
        if self.algorithm not in ALGORITHMS:
            raise ConfigurationError(
                f"Unknown algorithm '{self.algorithm}'. Available: {list(ALGORITHMS)}"
            )
        for name in ("iterations", "chains"):
            if int(getattr(self, name)) < 1:
                raise ConfigurationError(f"{name} must be at least 1, got {getattr(self, name)}")
        if self.warmup < 0:
            raise ConfigurationError(f"warmup must be non-negative, got {self.warmup}")
        if self.warmup + self.iterations > self.max_iterations:
            raise ConfigurationError(
                f"warmup + iterations = {self.warmup + self.iterations} exceeds "
                f"max_iterations = {self.max_iterations}"
            )
        if not 0.0 < self.target_accept < 1.0:
            raise ConfigurationError(f"target_accept must lie in (0, 1), got {self.target_accept}")
        if self.max_tree_depth < 1 or self.num_integration_steps < 1:
            raise ConfigurationError("max_tree_depth and num_integration_steps must be positive")
        if not self.step_size > 0.0:
            raise ConfigurationError(f"step_size must be positive, got {self.step_size}")
        if self.init not in ("uniform", "map"):
            raise ConfigurationError(f"Unknown init strategy '{self.init}'")
        if not self.init_radius > 0.0:
            raise ConfigurationError(f"init_radius must be positive, got {self.init_radius}")
        if self.chain_method not in ("vectorized", "sequential"):
            raise ConfigurationError(f"Unknown chain_method '{self.chain_method}'")
        if not 0.0 <= self.max_divergence_fraction <= 1.0:
            raise ConfigurationError(
                f"max_divergence_fraction must lie in [0, 1], got {self.max_divergence_fraction}"
            )
        return self


@dataclass
class Draws:
    """
    Named draws returned by the sampler.

    samples: output name -> array with leading axes (chains, iterations)
    stats: per-transition sampler statistics, (chains, iterations), plus the
        adapted "step_size" per chain; empty for fixed_param runs
    positions: raw unconstrained positions (MCMC only)
    """
    model: str
    algorithm: str
    samples: Dict[str, jnp.ndarray]
    stats: Dict[str, jnp.ndarray] = field(default_factory=dict)
    positions: Any = None

    def __getitem__(self, name: str) -> jnp.ndarray:
        try:
            return self.samples[name]
        except KeyError:
            raise KeyError(
                f"Model '{self.model}' has no output '{name}'. "
                f"Available: {list(self.samples.keys())}"
            )

    def __contains__(self, name: str) -> bool:
        return name in self.samples

    @property
    def names(self) -> list[str]:
        return list(self.samples.keys())

    @property
    def num_chains(self) -> int:
        return next(iter(self.samples.values())).shape[0]

    @property
    def num_iterations(self) -> int:
        return next(iter(self.samples.values())).shape[1]

    def flat(self, name: str) -> jnp.ndarray:
        """Draws of `name` with chains merged: (chains * iterations, ...)."""
        arr = self[name]
        return arr.reshape((-1,) + arr.shape[2:])

    @property
    def num_divergent(self) -> int:
        if "is_divergent" not in self.stats:
            return 0
        return int(jnp.sum(self.stats["is_divergent"]))

    @property
    def divergent_fraction(self) -> float:
        if "is_divergent" not in self.stats:
            return 0.0
        return float(jnp.mean(self.stats["is_divergent"]))
