# gpclass_jax/workflow/synthesize.py
"""
DataSynthesizer: synthetic binary data from a latent GP.

One joint draw of f ~ N(0, K(x, x) + jitter) over the grid, pushed through
the logistic link, one Bernoulli outcome per grid point. The draw is a
single fixed_param pass of the generation model, so the same seed always
gives the same (f, y).
"""
from __future__ import annotations

import logging
from typing import Tuple

import jax.numpy as jnp

from ..core.data import InputGrid
from ..gp.kernels import KernelParams, get as get_kernel
from ..inference import SamplingCFG, sample
from ..models import make

logger = logging.getLogger(__name__)


def synthesize(
    grid: InputGrid,
    params: KernelParams,
    *,
    seed: int = 0,
    jitter: float = 1e-9,
    kernel: str = "se",
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Draw (f, y) on the grid for fixed hyperparameters.

    Args:
        grid: Input grid, (n_init,)
        params: True (alpha, rho)
        seed: Sampler seed
        jitter: Diagonal jitter relative to alpha^2
        kernel: Registered kernel name

    Returns:
        f: (n_init,) latent values
        y: (n_init,) int32 outcomes in {0, 1}

    Raises:
        ConfigurationError: non-positive alpha / rho
        NumericalInstabilityError: K(x, x) + jitter is not positive definite
    """
    params.validate()
    n_init = len(grid)
    if n_init == 0:
        return jnp.zeros((0,), dtype=grid.x.dtype), jnp.zeros((0,), dtype=jnp.int32)

    data = {"n": n_init, "x": grid.x, "alpha": params.alpha, "rho": params.rho}
    cfg = SamplingCFG(iterations=1, warmup=0, chains=1, seed=seed, algorithm="fixed_param")
    model = make("gp_classify_generate", jitter=jitter, kernel_fn=get_kernel(kernel))
    draws = sample(model, data, cfg)

    f = draws["f"][0, 0]
    y = draws["y"][0, 0]
    logger.info(
        "synthesized %d points (alpha=%.3g, rho=%.3g): %d positive outcomes",
        n_init, float(params.alpha), float(params.rho), int(jnp.sum(y)),
    )
    return f, y
