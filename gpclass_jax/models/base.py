# gpclass_jax/models/base.py
"""
Model specifications.

A model specification is an opaque, named contract consumed by the sampler:
it declares which named inputs it reads and which named outputs it
produces. The sampler never looks further inside.

Two kinds exist:

  * SimulationModel: forward simulation only, run by the sampler in
    ``fixed_param`` mode. ``simulate(key, payload)`` returns one draw of
    every output.
  * DensityModel: an unnormalised log density over an unconstrained
    position pytree, run by the sampler with NUTS/HMC.
    ``constrain(position, payload)`` maps a position to the named outputs.

Both validate their payload eagerly (``validate``) and may precompute
anything that does not depend on the random state (``prepare``), which is
where deterministic covariance factorisations are checked.
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

import jax.numpy as jnp

from ..core.errors import ConfigurationError
from ..core.typing import Payload

# Python float resolves to float64 once x64 is enabled, float32 otherwise.
FLOAT = float

_MODEL_REGISTRY = {}


def register(name: str, factory):
    """
    Register a model factory (class or callable returning a ModelSpec).
    """
    if name in _MODEL_REGISTRY:
        raise KeyError(f"Model '{name}' already registered.")
    _MODEL_REGISTRY[name] = factory


def make(name: str, **kwargs):
    """Build a model by name, forwarding configuration to its factory."""
    try:
        factory = _MODEL_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown model '{name}'. "
            f"Available: {list(_MODEL_REGISTRY.keys())}"
        )
    return factory(**kwargs)


def get(name: str):
    """Default-configured model by name."""
    return make(name)


def available() -> list[str]:
    return list(_MODEL_REGISTRY.keys())


class ModelSpec:
    """Common payload handling for all model specifications."""

    name: str = ""
    data_fields: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()

    def validate(self, data: Payload) -> Dict[str, Any]:
        """
        Check the payload carries every declared field and normalise arrays.

        Subclasses extend this with shape and value checks.
        """
        missing = [k for k in self.data_fields if k not in data]
        if missing:
            raise ConfigurationError(f"{self.name}: missing data fields {missing}")
        return {k: data[k] for k in self.data_fields}

    def prepare(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SimulationModel(ModelSpec):
    """Forward simulation, run in fixed_param mode."""

    def simulate(self, key, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        raise NotImplementedError


class DensityModel(ModelSpec):
    """Unnormalised log density over an unconstrained position pytree."""

    def init_template(self, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        """Zero-valued position pytree fixing leaf shapes and dtypes."""
        raise NotImplementedError

    def logdensity(self, position, payload: Dict[str, Any]) -> jnp.ndarray:
        raise NotImplementedError

    def constrain(self, position, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        raise NotImplementedError


# --------------------------------------------------
# Payload checks shared by the concrete models
# --------------------------------------------------

def as_size(name: str, value) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if n != value or n < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
    return n


def as_vector(name: str, value, size: int, dtype=None) -> jnp.ndarray:
    arr = jnp.asarray(value, dtype=dtype)
    if arr.ndim != 1:
        raise ConfigurationError(f"{name} must be 1-D, got shape {arr.shape}")
    if arr.shape[0] != size:
        raise ConfigurationError(f"{name} has length {arr.shape[0]}, expected {size}")
    if jnp.issubdtype(arr.dtype, jnp.floating) and not bool(jnp.all(jnp.isfinite(arr))):
        raise ConfigurationError(f"{name} contains non-finite values")
    return arr


def as_positive(name: str, value) -> jnp.ndarray:
    arr = jnp.asarray(value, dtype=FLOAT)
    if arr.ndim != 0:
        raise ConfigurationError(f"{name} must be a scalar, got shape {arr.shape}")
    if not bool(jnp.isfinite(arr)) or float(arr) <= 0.0:
        raise ConfigurationError(f"{name} must be positive and finite, got {float(arr)}")
    return arr
