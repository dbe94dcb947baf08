# gpclass_jax/gp/__init__.py
"""
Gaussian Process components.

This package provides:
  - kernels: squared-exponential covariance and its parameters
  - likelihoods: Bernoulli observation model and the logistic link
  - predict: Cholesky-based GP conditioning at new inputs
  - utils: jittered / checked Cholesky factorisation
"""
from .kernels import get as get_kernel, KernelParams, squared_exponential, gram
from .likelihoods import logistic, bernoulli
from .predict import conditional, condition_on_factor, sample_conditional, sample_mvn
from .utils import cholesky_factor, checked_cholesky

__all__ = [
    "get_kernel",
    "KernelParams",
    "squared_exponential",
    "gram",
    "logistic",
    "bernoulli",
    "conditional",
    "condition_on_factor",
    "sample_conditional",
    "sample_mvn",
    "cholesky_factor",
    "checked_cholesky",
]
