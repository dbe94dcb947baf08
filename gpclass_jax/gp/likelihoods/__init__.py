# gpclass_jax/gp/likelihoods/__init__.py

from .bernoulli import bernoulli, BernoulliLikelihood
from .links import logistic, logit

__all__ = ["bernoulli", "BernoulliLikelihood", "logistic", "logit"]
