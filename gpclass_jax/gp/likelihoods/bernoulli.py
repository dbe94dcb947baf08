# gpclass_jax/gp/likelihoods/bernoulli.py
import jax.numpy as jnp
import jax.nn as jnn
from jax import random

from .links import logistic


class BernoulliLikelihood:
    """
    Bernoulli likelihood with logistic link:
        p(y | f) = Bernoulli(logistic(f))
    """

    @staticmethod
    def neg_loglik_1d(y, f):
        """
        y in {0,1}
        """
        # Stable binary cross entropy
        return jnn.softplus(f) - y * f

    @classmethod
    def log_prob(cls, y, f):
        """Summed log p(y | f) over all observations."""
        return -jnp.sum(cls.neg_loglik_1d(y, f))

    @staticmethod
    def sample(key, f):
        """One Bernoulli draw per latent value, as int32 0/1."""
        return random.bernoulli(key, logistic(f)).astype(jnp.int32)


bernoulli = BernoulliLikelihood()
