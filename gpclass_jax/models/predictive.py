# gpclass_jax/models/predictive.py
"""
Predictive model: latent GP at new inputs, conditioned on latent values at
the training inputs.

    f_star | f ~ N(mu_star, Sigma_star)

with mu_star / Sigma_star from `gp.predict.conditional`. The hyperparameters
and f are fixed inputs here, so the whole conditional is computed and
factorised once in `prepare`; each draw only applies the factor to fresh
standard-normal noise.

data:    n, x, n_star, x_star, f, alpha, rho
outputs: f_star
"""
from __future__ import annotations

from typing import Any, Callable, Dict

import jax.numpy as jnp

from .base import FLOAT, SimulationModel, as_size, as_vector, as_positive
from ..core.errors import NumericalInstabilityError
from ..gp.kernels import KernelParams, squared_exponential, gram
from ..gp.predict import conditional, sample_mvn
from ..gp.utils import checked_cholesky


class PredictiveModel(SimulationModel):
    name = "gp_classify_predict"
    data_fields = ("n", "x", "n_star", "x_star", "f", "alpha", "rho")
    outputs = ("f_star",)

    def __init__(
        self,
        jitter: float = 1e-9,
        jitter_star: float = 1e-8,
        kernel_fn: Callable = squared_exponential,
    ):
        self.jitter = jitter
        self.jitter_star = jitter_star
        self.kernel_fn = kernel_fn

    def validate(self, data) -> Dict[str, Any]:
        payload = super().validate(data)
        n = as_size("n", payload["n"])
        n_star = as_size("n_star", payload["n_star"])
        payload["n"] = n
        payload["n_star"] = n_star
        payload["x"] = as_vector("x", payload["x"], n, dtype=FLOAT)
        payload["x_star"] = as_vector("x_star", payload["x_star"], n_star, dtype=FLOAT)
        payload["f"] = as_vector("f", payload["f"], n, dtype=FLOAT)
        payload["alpha"] = as_positive("alpha", payload["alpha"])
        payload["rho"] = as_positive("rho", payload["rho"])
        return payload

    def prepare(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        params = KernelParams(alpha=payload["alpha"], rho=payload["rho"])
        scale = float(params.variance)

        # Check K(x, x) separately so a failure names the right matrix.
        checked_cholesky(
            gram(self.kernel_fn, payload["x"], params),
            self.jitter * scale,
            matrix="K(x, x)",
            stage="predict",
        )
        mu_star, Sigma_star = conditional(
            payload["x_star"],
            payload["x"],
            payload["f"],
            params,
            kernel_fn=self.kernel_fn,
            jitter=self.jitter,
            jitter_star=self.jitter_star,
        )
        if not bool(jnp.all(jnp.isfinite(mu_star))):
            raise NumericalInstabilityError(
                matrix="K(x, x)", stage="predict", jitter=self.jitter * scale,
                detail="conditional mean is not finite",
            )
        L_star = checked_cholesky(
            Sigma_star,
            matrix="Sigma_star",
            stage="predict",
            included_jitter=self.jitter_star * scale,
        )
        return {**payload, "mu_star": mu_star, "L_star": L_star}

    def simulate(self, key, payload: Dict[str, Any]) -> Dict[str, jnp.ndarray]:
        return {"f_star": sample_mvn(key, payload["mu_star"], payload["L_star"])}
