# gpclass_jax/gp/kernels/params.py
from __future__ import annotations
from dataclasses import dataclass, field
import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ...core.errors import ConfigurationError

@register_pytree_node_class
@dataclass(frozen=True)
class KernelParams:
    """
    Squared-exponential hyperparameters as a pytree.

    alpha: marginal standard deviation (amplitude), K[i, i] = alpha^2
    rho: length scale
    """

    alpha: jnp.ndarray = field(default_factory=lambda: jnp.array(1.0))
    rho: jnp.ndarray = field(default_factory=lambda: jnp.array(1.0))

    @property
    def variance(self):
        return self.alpha ** 2

    def validate(self) -> KernelParams:
        """Raise ConfigurationError unless both values are finite and positive."""
        for name in ("alpha", "rho"):
            val = jnp.asarray(getattr(self, name))
            if val.ndim != 0:
                raise ConfigurationError(f"{name} must be a scalar, got shape {val.shape}")
            if not bool(jnp.isfinite(val)) or float(val) <= 0.0:
                raise ConfigurationError(f"{name} must be positive and finite, got {float(val)}")
        return self

    # ---- pytree protocol ----
    def tree_flatten(self):
        return (self.alpha, self.rho), None

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        return cls(alpha=children[0], rho=children[1])
