# gpclass_jax/models/priors.py
"""
Hyperpriors on the kernel amplitude and length scale.

Both parameters are positive; the posterior model samples them on the log
scale and adds the log-Jacobian itself, so each prior only needs a
log-density on the constrained value.

Defaults are weakly informative for inputs on [-1, 1]:
  - alpha ~ HalfNormal(5.0)
  - rho   ~ InverseGamma(5.0, 1.0)   (mode 1/6, light left tail away from 0)
"""
from __future__ import annotations

from dataclasses import dataclass, field

import jax.numpy as jnp
from jax.scipy.special import gammaln
from jax.scipy.stats import norm

from ..core.errors import ConfigurationError


@dataclass(frozen=True)
class HalfNormal:
    scale: float = 1.0

    def log_prob(self, x):
        return jnp.log(2.0) + norm.logpdf(x, 0.0, self.scale)

    def validate(self):
        if not self.scale > 0:
            raise ConfigurationError(f"HalfNormal scale must be positive, got {self.scale}")


@dataclass(frozen=True)
class InverseGamma:
    concentration: float = 5.0
    scale: float = 1.0

    def log_prob(self, x):
        a, b = self.concentration, self.scale
        return a * jnp.log(b) - gammaln(a) - (a + 1.0) * jnp.log(x) - b / x

    def validate(self):
        if not (self.concentration > 0 and self.scale > 0):
            raise ConfigurationError(
                f"InverseGamma parameters must be positive, got "
                f"({self.concentration}, {self.scale})"
            )


@dataclass(frozen=True)
class LogNormal:
    loc: float = 0.0
    scale: float = 1.0

    def log_prob(self, x):
        log_x = jnp.log(x)
        return norm.logpdf(log_x, self.loc, self.scale) - log_x

    def validate(self):
        if not self.scale > 0:
            raise ConfigurationError(f"LogNormal scale must be positive, got {self.scale}")


@dataclass(frozen=True)
class PriorCFG:
    """Priors for the posterior model."""
    alpha: object = field(default_factory=lambda: HalfNormal(5.0))
    rho: object = field(default_factory=lambda: InverseGamma(5.0, 1.0))

    def validate(self) -> PriorCFG:
        for name in ("alpha", "rho"):
            prior = getattr(self, name)
            if not hasattr(prior, "log_prob"):
                raise ConfigurationError(f"prior for {name} must define log_prob, got {prior!r}")
            if hasattr(prior, "validate"):
                prior.validate()
        return self

    def log_prob(self, alpha, rho):
        return self.alpha.log_prob(alpha) + self.rho.log_prob(rho)
