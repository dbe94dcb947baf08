# gpclass_jax/workflow/posterior.py
"""
PosteriorSampler: MCMC over (alpha, rho, f) given a training subset.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import jax.numpy as jnp

from ..core.data import Dataset
from ..gp.kernels import KernelParams, get as get_kernel
from ..inference import Draws, SamplingCFG, sample, convergence_table
from ..models import PriorCFG, make

logger = logging.getLogger(__name__)


@dataclass
class PosteriorSampleSet:
    """
    Posterior draws of (alpha, rho, f), f indexed over the training inputs.

    `draws` keeps the raw (chains, iterations, ...) arrays for external
    diagnostics. `kernel` names the registered kernel the fit used;
    prediction reuses it.
    """
    x: jnp.ndarray
    draws: Draws
    kernel: str = "se"

    @property
    def alpha(self) -> jnp.ndarray:
        return self.draws.flat("alpha")

    @property
    def rho(self) -> jnp.ndarray:
        return self.draws.flat("rho")

    @property
    def f(self) -> jnp.ndarray:
        return self.draws.flat("f")

    def point_estimate(self) -> Tuple[KernelParams, jnp.ndarray]:
        """Posterior means: (KernelParams(alpha_hat, rho_hat), f_hat)."""
        params = KernelParams(alpha=jnp.mean(self.alpha), rho=jnp.mean(self.rho))
        return params, jnp.mean(self.f, axis=0)

    def convergence(self) -> Dict[str, dict]:
        return convergence_table(self.draws, ("alpha", "rho", "f"))

    def __len__(self) -> int:
        return self.draws.num_chains * self.draws.num_iterations


def fit_posterior(
    data: Dataset,
    cfg: SamplingCFG = SamplingCFG(),
    priors: Optional[PriorCFG] = None,
    jitter: float = 1e-9,
    kernel: str = "se",
) -> PosteriorSampleSet:
    """
    Sample the GP-classification posterior on `data`.

    Convergence is not enforced here; inspect `PosteriorSampleSet.convergence()`
    (R-hat, ESS) or the raw per-chain draws.

    Raises:
        ConfigurationError: malformed dataset or sampling configuration
        SamplingFailure: non-finite draws, stuck chains or too many divergences
    """
    model = make(
        "gp_classify_posterior", priors=priors, jitter=jitter, kernel_fn=get_kernel(kernel)
    )
    draws = sample(model, data.as_payload(), cfg)
    posterior = PosteriorSampleSet(x=data.x, draws=draws, kernel=kernel)

    params, _ = posterior.point_estimate()
    logger.info(
        "posterior means: alpha=%.3g rho=%.3g (%d draws, %d divergent)",
        float(params.alpha), float(params.rho), len(posterior), draws.num_divergent,
    )
    return posterior
