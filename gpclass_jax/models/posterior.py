# gpclass_jax/models/posterior.py
"""
Posterior model: GP prior x hyperpriors x Bernoulli likelihood.

    p(f, alpha, rho | y) ∝ N(f | 0, K(x, x)) p(alpha) p(rho) Π Bernoulli(y_i | logistic(f_i))

Sampled in a non-centred parameterisation:

    eta ~ N(0, I),   f = L(alpha, rho) eta,   L L^T = K(x, x) + jitter * alpha^2 * I

so the sampler sees a position {log_alpha, log_rho, eta} on an unconstrained
scale. The log-Jacobians of the exp transforms are included in the density.

data:    n, x, y
outputs: f, alpha, rho
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import jax.numpy as jnp
from jax.scipy.stats import norm

from .base import FLOAT, DensityModel, as_size, as_vector
from .priors import PriorCFG
from ..core.errors import ConfigurationError
from ..gp.kernels import KernelParams, squared_exponential, gram
from ..gp.likelihoods import bernoulli
from ..gp.utils import cholesky_factor


class PosteriorModel(DensityModel):
    name = "gp_classify_posterior"
    data_fields = ("n", "x", "y")
    outputs = ("f", "alpha", "rho")

    def __init__(
        self,
        priors: Optional[PriorCFG] = None,
        jitter: float = 1e-9,
        kernel_fn: Callable = squared_exponential,
    ):
        self.priors = (priors or PriorCFG()).validate()
        self.jitter = jitter
        self.kernel_fn = kernel_fn

    def validate(self, data) -> Dict[str, Any]:
        payload = super().validate(data)
        n = as_size("n", payload["n"])
        payload["n"] = n
        payload["x"] = as_vector("x", payload["x"], n, dtype=FLOAT)
        y = as_vector("y", payload["y"], n)
        if not bool(jnp.all((y == 0) | (y == 1))):
            raise ConfigurationError("y must contain only 0/1 outcomes")
        payload["y"] = y.astype(payload["x"].dtype)
        return payload

    def init_template(self, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        x = payload["x"]
        return {
            "log_alpha": jnp.zeros((), dtype=x.dtype),
            "log_rho": jnp.zeros((), dtype=x.dtype),
            "eta": jnp.zeros_like(x),
        }

    def _latent(self, position, payload):
        alpha = jnp.exp(position["log_alpha"])
        rho = jnp.exp(position["log_rho"])
        params = KernelParams(alpha=alpha, rho=rho)
        L = cholesky_factor(gram(self.kernel_fn, payload["x"], params, self.jitter))
        return params, L @ position["eta"]

    def logdensity(self, position, payload: Dict[str, Any]) -> jnp.ndarray:
        params, f = self._latent(position, payload)
        lp = self.priors.log_prob(params.alpha, params.rho)
        # log|d alpha / d log_alpha| + log|d rho / d log_rho|
        lp = lp + position["log_alpha"] + position["log_rho"]
        lp = lp + jnp.sum(norm.logpdf(position["eta"]))
        lp = lp + bernoulli.log_prob(payload["y"], f)
        return lp

    def constrain(self, position, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        params, f = self._latent(position, payload)
        return {"f": f, "alpha": params.alpha, "rho": params.rho}
