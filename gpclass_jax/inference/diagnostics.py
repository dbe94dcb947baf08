# gpclass_jax/inference/diagnostics.py
"""
Convergence diagnostics and failure checks on sampler output.

R-hat and ESS come from `blackjax.diagnostics` and are computed from the raw
(chains, iterations, ...) draws. Both need at least two chains; with one
chain they are reported as NaN.

Convergence is reported, not enforced: a large R-hat is logged as a warning
and left to the caller. Only draws that cannot be used at all (non-finite
values, every proposal rejected, too many divergences) raise SamplingFailure.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

import jax.numpy as jnp
from blackjax.diagnostics import effective_sample_size, potential_scale_reduction

from ..core.errors import SamplingFailure
from .base import Draws, SamplingCFG

logger = logging.getLogger(__name__)


def rhat(draws: Draws, name: str) -> jnp.ndarray:
    """Potential scale reduction of output `name`, one value per element."""
    arr = draws[name]
    if draws.num_chains < 2:
        return jnp.full(arr.shape[2:], jnp.nan)
    return potential_scale_reduction(arr, chain_axis=0, sample_axis=1)


def ess(draws: Draws, name: str) -> jnp.ndarray:
    """Effective sample size of output `name` across all chains."""
    arr = draws[name]
    if draws.num_chains < 2:
        return jnp.full(arr.shape[2:], jnp.nan)
    return effective_sample_size(arr, chain_axis=0, sample_axis=1)


def convergence_table(draws: Draws, names: Optional[Iterable[str]] = None) -> Dict[str, dict]:
    """
    R-hat / ESS per output. Vector outputs report the worst element
    (max R-hat, min ESS).
    """
    if names is None:
        names = draws.names
    table = {}
    for name in names:
        r = rhat(draws, name)
        e = ess(draws, name)
        table[name] = {
            "rhat": float(jnp.max(r)) if r.size else float("nan"),
            "ess": float(jnp.min(e)) if e.size else float("nan"),
        }
    return table


def check_draws(draws: Draws, cfg: SamplingCFG) -> Draws:
    """
    Raise SamplingFailure for unusable draws; log warnings otherwise.

    Raises:
        SamplingFailure: non-finite draws, a chain that rejected every
            proposal, or a divergent fraction above cfg.max_divergence_fraction
    """
    for name, arr in draws.samples.items():
        if jnp.issubdtype(arr.dtype, jnp.floating) and not bool(jnp.all(jnp.isfinite(arr))):
            raise SamplingFailure(
                f"{draws.model}: non-finite draws of '{name}'", draws=draws
            )

    if draws.algorithm == "fixed_param":
        return draws

    accept = draws.stats["acceptance_rate"]
    per_chain = jnp.mean(accept, axis=1)
    stuck = [int(c) for c in jnp.nonzero(per_chain <= 0.0)[0]]
    if stuck:
        raise SamplingFailure(
            f"{draws.model}: chains {stuck} rejected every proposal",
            draws=draws,
            diagnostics={"acceptance_rate": per_chain},
        )

    n_div = draws.num_divergent
    frac = draws.divergent_fraction
    if frac > cfg.max_divergence_fraction:
        raise SamplingFailure(
            f"{draws.model}: {n_div} divergent transitions ({frac:.1%}) exceed "
            f"max_divergence_fraction={cfg.max_divergence_fraction:.1%}",
            draws=draws,
            diagnostics={"num_divergent": n_div, "divergent_fraction": frac},
        )
    if n_div:
        logger.warning(
            "%s: %d divergent transitions after warmup (%.2f%%)",
            draws.model, n_div, 100.0 * frac,
        )

    if draws.num_chains > 1:
        for name, row in convergence_table(draws).items():
            if row["rhat"] > cfg.rhat_warn:
                logger.warning(
                    "%s: R-hat for '%s' is %.3f (> %.2f); chains may not have mixed",
                    draws.model, name, row["rhat"], cfg.rhat_warn,
                )
    return draws
