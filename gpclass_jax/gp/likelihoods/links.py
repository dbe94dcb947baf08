# gpclass_jax/gp/likelihoods/links.py
import jax.nn as jnn
import jax.numpy as jnp


def logistic(f):
    """Inverse logit, mu = 1 / (1 + exp(-f)), elementwise."""
    return jnn.sigmoid(f)


def logit(mu):
    """Inverse of `logistic` on (0, 1)."""
    return jnp.log(mu) - jnp.log1p(-mu)
