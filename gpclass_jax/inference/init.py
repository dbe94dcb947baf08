# gpclass_jax/inference/init.py
"""
Initial chain positions.

  - "uniform": every coordinate of the unconstrained position drawn from
    Uniform(-r, r), independently per chain.
  - "map": the uniform draw refined by a short optax run on the negative
    log density (one independent optimisation per chain), as a warm start
    for the warmup phase.
"""
from __future__ import annotations

import jax
import jax.numpy as jnp
import optax
from jax import lax, random
from jax.tree_util import tree_flatten, tree_unflatten, tree_map

from .base import SamplingCFG


def uniform_positions(key, template, num_chains: int, radius: float = 2.0):
    """Batched pytree of positions, leaves with leading axis num_chains."""
    leaves, treedef = tree_flatten(template)
    keys = random.split(key, max(len(leaves), 1))
    leaves = [
        random.uniform(
            k, (num_chains,) + leaf.shape, dtype=leaf.dtype, minval=-radius, maxval=radius
        )
        for k, leaf in zip(keys, leaves)
    ]
    return tree_unflatten(treedef, leaves)


def map_refine(logdensity_fn, positions, *, steps: int = 200, lr: float = 1e-2):
    """
    Move each chain's position uphill on `logdensity_fn` with Adam.

    Non-finite gradients are zeroed so a chain starting in a numerically
    bad region stays where it is instead of propagating NaNs.
    """
    optimizer = optax.adam(lr)
    value_and_grad_fn = jax.value_and_grad(lambda p: -logdensity_fn(p))

    def optimise(p0):
        def step(carry, _):
            p, opt_state = carry
            val, grad = value_and_grad_fn(p)
            grad = tree_map(lambda g: jnp.where(jnp.isfinite(g), g, 0.0), grad)
            updates, opt_state = optimizer.update(grad, opt_state, params=p)
            p = optax.apply_updates(p, updates)
            return (p, opt_state), val

        (p, _), _ = lax.scan(step, (p0, optimizer.init(p0)), None, length=steps)
        return p

    return jax.vmap(optimise)(positions)


def initial_positions(key, spec, payload, cfg: SamplingCFG):
    """Initial positions for `cfg.chains` chains of a DensityModel."""
    template = spec.init_template(payload)
    positions = uniform_positions(key, template, cfg.chains, cfg.init_radius)
    if cfg.init == "map":
        positions = map_refine(
            lambda p: spec.logdensity(p, payload),
            positions,
            steps=cfg.map_steps,
            lr=cfg.map_lr,
        )
    return positions
