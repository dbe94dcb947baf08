# gpclass_jax/models/generate.py
"""
Generation model: latent GP draw, logistic link, Bernoulli outcomes.

    f ~ N(0, K(x, x) + jitter * alpha^2 * I)
    y_i ~ Bernoulli(logistic(f_i))

data:    n, x, alpha, rho
outputs: f, y
"""
from __future__ import annotations

from typing import Any, Callable, Dict

import jax.numpy as jnp
from jax import random

from .base import FLOAT, SimulationModel, as_size, as_vector, as_positive
from ..gp.kernels import KernelParams, squared_exponential, gram
from ..gp.likelihoods import bernoulli
from ..gp.predict import sample_mvn
from ..gp.utils import checked_cholesky


class GenerateModel(SimulationModel):
    name = "gp_classify_generate"
    data_fields = ("n", "x", "alpha", "rho")
    outputs = ("f", "y")

    def __init__(self, jitter: float = 1e-9, kernel_fn: Callable = squared_exponential):
        self.jitter = jitter
        self.kernel_fn = kernel_fn

    def validate(self, data) -> Dict[str, Any]:
        payload = super().validate(data)
        n = as_size("n", payload["n"])
        payload["n"] = n
        payload["x"] = as_vector("x", payload["x"], n, dtype=FLOAT)
        payload["alpha"] = as_positive("alpha", payload["alpha"])
        payload["rho"] = as_positive("rho", payload["rho"])
        return payload

    def prepare(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        # The covariance does not depend on the random state: factor it once.
        params = KernelParams(alpha=payload["alpha"], rho=payload["rho"])
        K = gram(self.kernel_fn, payload["x"], params)
        jitter = self.jitter * float(params.variance)
        L = checked_cholesky(K, jitter, matrix="K(x, x)", stage="generate")
        return {**payload, "L": L}

    def simulate(self, key, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        k_f, k_y = random.split(key)
        x = payload["x"]
        f = sample_mvn(k_f, jnp.zeros_like(x), payload["L"])
        y = bernoulli.sample(k_y, f)
        return {"f": f, "y": y}
