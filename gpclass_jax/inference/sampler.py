# gpclass_jax/inference/sampler.py
"""
Sampler invocation interface.

    sample(model, data, cfg) -> Draws

`model` names a registered model specification (or is one), `data` is the
payload of named scalars and arrays it reads, and `cfg` selects the
algorithm:

  - "nuts" / "hmc": blackjax kernels with Stan-style window adaptation of
    the step size and a diagonal mass matrix during `warmup`, then
    `iterations` kept transitions per chain.
  - "fixed_param": no parameters are sampled; the model's forward
    simulation is run `iterations` times per chain.

Chains are independent: each gets its own PRNG key and initial position and
they share no state. With chain_method="vectorized" they run as one
`jax.vmap`-ed program, with "sequential" one after another; draws are only
collected at the end.
"""
from __future__ import annotations

import logging
import time
from typing import Union

import blackjax
import jax
import jax.numpy as jnp
from jax import lax, random
from jax.flatten_util import ravel_pytree
from jax.tree_util import tree_map

from .. import models
from ..core.errors import ConfigurationError
from ..core.typing import Payload
from ..models.base import DensityModel, ModelSpec, SimulationModel
from .base import Draws, SamplingCFG
from .diagnostics import check_draws
from .init import initial_positions

logger = logging.getLogger(__name__)


def sample(
    model: Union[str, ModelSpec],
    data: Payload,
    cfg: SamplingCFG = SamplingCFG(),
) -> Draws:
    """
    Run a model through the sampler.

    Args:
        model: Registered model name or ModelSpec instance
        data: Named scalars/arrays the model reads (n, x, y, alpha, ...)
        cfg: Sampling configuration

    Returns:
        Draws with every model output, leading axes (chains, iterations)

    Raises:
        ConfigurationError: bad payload or configuration (before sampling)
        NumericalInstabilityError: a fixed covariance could not be factorised
        SamplingFailure: unusable draws
    """
    spec = models.get(model) if isinstance(model, str) else model
    cfg.validate()
    payload = spec.validate(data)
    payload = spec.prepare(payload)

    key = random.PRNGKey(cfg.seed)
    start = time.perf_counter()
    if cfg.algorithm == "fixed_param":
        if not isinstance(spec, SimulationModel):
            raise ConfigurationError(
                f"{spec.name} defines a log density; fixed_param needs a simulation model"
            )
        draws = _run_fixed_param(spec, payload, cfg, key)
    else:
        if not isinstance(spec, DensityModel):
            raise ConfigurationError(
                f"{spec.name} has no parameters to sample; use algorithm='fixed_param'"
            )
        draws = _run_mcmc(spec, payload, cfg, key)
    logger.info(
        "%s: %d chain(s) x %d iteration(s) with %s in %.2fs",
        spec.name, cfg.chains, cfg.iterations, cfg.algorithm, time.perf_counter() - start,
    )
    return check_draws(draws, cfg)


# --------------------------------------------------
# fixed_param
# --------------------------------------------------

def _run_fixed_param(spec: SimulationModel, payload, cfg: SamplingCFG, key) -> Draws:
    keys = random.split(key, cfg.chains * cfg.iterations)
    keys = keys.reshape((cfg.chains, cfg.iterations) + keys.shape[1:])

    simulate = jax.vmap(jax.vmap(lambda k: spec.simulate(k, payload)))
    if cfg.jit:
        simulate = jax.jit(simulate)
    samples = simulate(keys)
    return Draws(model=spec.name, algorithm=cfg.algorithm, samples=dict(samples))


# --------------------------------------------------
# nuts / hmc
# --------------------------------------------------

def _algorithm(cfg: SamplingCFG):
    if cfg.algorithm == "nuts":
        return blackjax.nuts, {"max_num_doublings": cfg.max_tree_depth}
    return blackjax.hmc, {"num_integration_steps": cfg.num_integration_steps}


def _run_mcmc(spec: DensityModel, payload, cfg: SamplingCFG, key) -> Draws:
    def logdensity_fn(position):
        return spec.logdensity(position, payload)

    algorithm, extra = _algorithm(cfg)
    k_init, k_chains = random.split(key)
    positions0 = initial_positions(k_init, spec, payload, cfg)
    chain_keys = random.split(k_chains, cfg.chains)

    def run_chain(chain_key, position):
        k_warm, k_sample = random.split(chain_key)
        if cfg.warmup > 0:
            adaptation = blackjax.window_adaptation(
                algorithm,
                logdensity_fn,
                target_acceptance_rate=cfg.target_accept,
                **extra,
            )
            (state, parameters), _ = adaptation.run(k_warm, position, num_steps=cfg.warmup)
            kernel = algorithm(logdensity_fn, **{**extra, **parameters})
        else:
            flat, _ = ravel_pytree(position)
            parameters = {"step_size": cfg.step_size, "inverse_mass_matrix": jnp.ones_like(flat)}
            kernel = algorithm(logdensity_fn, **{**extra, **parameters})
            state = kernel.init(position)

        def one_step(state, step_key):
            state, info = kernel.step(step_key, state)
            return state, (
                state.position,
                info.acceptance_rate,
                info.is_divergent,
                info.num_integration_steps,
            )

        _, (trace, accept, divergent, n_steps) = lax.scan(
            one_step, state, random.split(k_sample, cfg.iterations)
        )
        stats = {
            "acceptance_rate": accept,
            "is_divergent": divergent,
            "num_integration_steps": n_steps,
            "step_size": jnp.asarray(parameters["step_size"]),
        }
        return trace, stats

    runner = jax.jit(run_chain) if cfg.jit else run_chain
    if cfg.chain_method == "vectorized":
        trace, stats = jax.vmap(runner)(chain_keys, positions0)
    else:
        outs = []
        for c in range(cfg.chains):
            outs.append(runner(chain_keys[c], tree_map(lambda p: p[c], positions0)))
            logger.debug("%s: chain %d/%d done", spec.name, c + 1, cfg.chains)
        trace, stats = tree_map(lambda *xs: jnp.stack(xs), *outs)

    constrain = jax.vmap(jax.vmap(lambda p: spec.constrain(p, payload)))
    samples = constrain(trace)
    return Draws(
        model=spec.name,
        algorithm=cfg.algorithm,
        samples=dict(samples),
        stats=stats,
        positions=trace,
    )
