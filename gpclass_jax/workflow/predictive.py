# gpclass_jax/workflow/predictive.py
"""
PredictiveExtender: latent GP draws at new inputs.

Two strategies:

  - "point" (default): condition on the posterior means
    (alpha_hat, rho_hat, f_hat) and draw from the resulting Gaussian. This
    ignores posterior uncertainty in the hyperparameters and in f, so the
    predictive bands are narrower than the full predictive posterior. It is
    a deliberate approximation: one posterior fit yields a single Gaussian
    that is factorised once and can be reused for any number of draws, and
    the predictive model is invoked through the sampler exactly like the
    other two models.
  - "marginal": one conditional draw per (thinned) posterior draw of
    (alpha, rho, f), i.e. a Monte-Carlo estimate of the full predictive
    posterior. Costs one Cholesky of K(x, x) and one of Sigma_star per
    posterior draw.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import jax
import jax.numpy as jnp
from jax import lax, random

from ..core.errors import ConfigurationError, NumericalInstabilityError
from ..gp.kernels import KernelParams, gram, get as get_kernel
from ..gp.likelihoods import logistic
from ..gp.predict import condition_on_factor, sample_mvn
from ..gp.utils import cholesky_factor
from ..inference import SamplingCFG, sample
from ..models import make
from .posterior import PosteriorSampleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictCFG:
    """Configuration for predictive sampling."""
    strategy: Literal["point", "marginal"] = "point"
    draws: int = 1000  # point: number of f_star draws
    num_posterior_draws: int = 200  # marginal: posterior draws used (evenly thinned)
    seed: int = 0
    jitter: float = 1e-9  # relative, on K(x, x)
    jitter_star: float = 1e-8  # relative, on Sigma_star

    def validate(self) -> PredictCFG:
        if self.strategy not in ("point", "marginal"):
            raise ConfigurationError(f"Unknown prediction strategy '{self.strategy}'")
        if self.draws < 1 or self.num_posterior_draws < 1:
            raise ConfigurationError("draws and num_posterior_draws must be at least 1")
        if self.jitter < 0 or self.jitter_star < 0:
            raise ConfigurationError("jitter must be non-negative")
        return self


@dataclass
class PredictiveSampleSet:
    """Draws of f_star over x_star, shape (draws, n_star)."""
    x_star: jnp.ndarray
    f_star: jnp.ndarray
    strategy: str

    @property
    def mu(self) -> jnp.ndarray:
        """Link-transformed draws, logistic(f_star)."""
        return logistic(self.f_star)

    def mean_probability(self) -> jnp.ndarray:
        return jnp.mean(self.mu, axis=0)

    def __len__(self) -> int:
        return self.f_star.shape[0]


def predict(
    posterior: PosteriorSampleSet,
    x_star: jnp.ndarray,
    cfg: PredictCFG = PredictCFG(),
) -> PredictiveSampleSet:
    """
    Predictive draws of the latent function at x_star.

    Raises:
        ConfigurationError: bad configuration or inputs
        NumericalInstabilityError: K(x, x) or Sigma_star could not be factorised
    """
    cfg.validate()
    x_star = jnp.asarray(x_star, dtype=posterior.x.dtype)
    if x_star.ndim != 1:
        raise ConfigurationError(f"x_star must be 1-D, got shape {x_star.shape}")
    if not bool(jnp.all(jnp.isfinite(x_star))):
        raise ConfigurationError("x_star contains non-finite values")

    if cfg.strategy == "point":
        f_star = _predict_point(posterior, x_star, cfg)
    else:
        f_star = _predict_marginal(posterior, x_star, cfg)

    logger.info(
        "predicted %d draws at %d inputs (strategy=%s)", f_star.shape[0], x_star.shape[0], cfg.strategy
    )
    return PredictiveSampleSet(x_star=x_star, f_star=f_star, strategy=cfg.strategy)


def _predict_point(posterior: PosteriorSampleSet, x_star, cfg: PredictCFG) -> jnp.ndarray:
    params, f_hat = posterior.point_estimate()
    data = {
        "n": posterior.x.shape[0],
        "x": posterior.x,
        "n_star": x_star.shape[0],
        "x_star": x_star,
        "f": f_hat,
        "alpha": params.alpha,
        "rho": params.rho,
    }
    model = make(
        "gp_classify_predict",
        jitter=cfg.jitter,
        jitter_star=cfg.jitter_star,
        kernel_fn=get_kernel(posterior.kernel),
    )
    sampling = SamplingCFG(
        iterations=cfg.draws,
        warmup=0,
        chains=1,
        seed=cfg.seed,
        algorithm="fixed_param",
        max_iterations=max(cfg.draws, SamplingCFG.max_iterations),
    )
    draws = sample(model, data, sampling)
    return draws.flat("f_star")


def _predict_marginal(posterior: PosteriorSampleSet, x_star, cfg: PredictCFG) -> jnp.ndarray:
    total = len(posterior)
    m = min(cfg.num_posterior_draws, total)
    idx = jnp.linspace(0, total - 1, m).astype(jnp.int32)
    alpha = posterior.alpha[idx]
    rho = posterior.rho[idx]
    f = posterior.f[idx]
    keys = random.split(random.PRNGKey(cfg.seed), m)
    x = posterior.x
    kernel_fn = get_kernel(posterior.kernel)

    def one(args):
        key, a, r, f_s = args
        params = KernelParams(alpha=a, rho=r)
        L = cholesky_factor(gram(kernel_fn, x, params, cfg.jitter))
        mu_star, Sigma_star = condition_on_factor(
            x_star, x, f_s, params, L, kernel_fn=kernel_fn, jitter_star=cfg.jitter_star
        )
        L_star = cholesky_factor(Sigma_star)
        f_star = sample_mvn(key, mu_star, L_star)
        return f_star, jnp.all(jnp.isfinite(L)), jnp.all(jnp.isfinite(L_star))

    # lax.map keeps one pair of factorisations in memory at a time.
    f_star, k_ok, star_ok = jax.jit(lambda args: lax.map(one, args))((keys, alpha, rho, f))

    scale = float(jnp.max(alpha)) ** 2
    if not bool(jnp.all(k_ok)):
        raise NumericalInstabilityError(
            matrix="K(x, x)",
            stage="predict",
            jitter=cfg.jitter * scale,
            detail=f"{int(jnp.sum(~k_ok))} of {m} posterior draws failed",
        )
    bad = ~(star_ok & jnp.all(jnp.isfinite(f_star), axis=1))
    if bool(jnp.any(bad)):
        raise NumericalInstabilityError(
            matrix="Sigma_star",
            stage="predict",
            jitter=cfg.jitter_star * scale,
            detail=f"{int(jnp.sum(bad))} of {m} posterior draws failed",
        )
    return f_star
