# gpclass_jax/gp/predict.py
"""
GP conditioning at new inputs.

Given latent values f at training inputs x, the latent values at x_star are
jointly Gaussian with

    mu_star    = K(x_star, x) K(x, x)^-1 f
    Sigma_star = K(x_star, x_star) - K(x_star, x) K(x, x)^-1 K(x, x_star)

Every solve goes through the Cholesky factor of K(x, x) (triangular solves,
cho_solve); K(x, x)^-1 is never formed. Square blocks get a diagonal jitter
relative to alpha^2, cross covariances never do.
"""
from __future__ import annotations

from typing import Callable

import jax
import jax.numpy as jnp
from jax.scipy.linalg import cho_solve, solve_triangular

from .kernels import KernelParams, squared_exponential, gram
from .utils import cholesky_factor


def conditional(
    x_star: jnp.ndarray,
    x: jnp.ndarray,
    f: jnp.ndarray,
    params: KernelParams,
    kernel_fn: Callable = squared_exponential,
    jitter: float = 1e-9,
    jitter_star: float = 1e-8,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Conditional mean and covariance of f(x_star) given f(x) = f.

    JIT-compatible. A failed factorisation of K(x, x) shows up as NaNs.

    Parameters
    ----------
    x_star : (N_star,) or (N_star, D)
        Prediction inputs
    x : (N,) or (N, D)
        Training inputs
    f : (N,)
        Latent values at x
    params : KernelParams
        Kernel hyperparameters
    kernel_fn : callable
        kernel_fn(X1, X2, params) -> (N1, N2)
    jitter : float
        Relative jitter on K(x, x)
    jitter_star : float
        Relative jitter on Sigma_star

    Returns
    -------
    mu_star : (N_star,)
    Sigma_star : (N_star, N_star)
    """
    L = cholesky_factor(gram(kernel_fn, x, params, jitter))
    return condition_on_factor(x_star, x, f, params, L, kernel_fn, jitter_star)


def condition_on_factor(
    x_star: jnp.ndarray,
    x: jnp.ndarray,
    f: jnp.ndarray,
    params: KernelParams,
    L: jnp.ndarray,
    kernel_fn: Callable = squared_exponential,
    jitter_star: float = 1e-8,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    `conditional` given L, the lower Cholesky factor of K(x, x) + jitter.

    Lets callers inspect L themselves; a non-finite L gives non-finite
    outputs.
    """
    K_x_star = kernel_fn(x, x_star, params)  # (N, N_star)

    mu_star = K_x_star.T @ cho_solve((L, True), f)

    V = solve_triangular(L, K_x_star, lower=True)  # (N, N_star)
    K_star = gram(kernel_fn, x_star, params, jitter_star)
    Sigma_star = K_star - V.T @ V
    Sigma_star = 0.5 * (Sigma_star + Sigma_star.T)
    return mu_star, Sigma_star


def sample_mvn(key, mu: jnp.ndarray, L: jnp.ndarray, shape: tuple = ()) -> jnp.ndarray:
    """Draws mu + L z, z ~ N(0, I), with leading batch `shape`."""
    z = jax.random.normal(key, shape + mu.shape, dtype=mu.dtype)
    return mu + z @ L.T


def sample_conditional(
    key,
    x_star: jnp.ndarray,
    x: jnp.ndarray,
    f: jnp.ndarray,
    params: KernelParams,
    kernel_fn: Callable = squared_exponential,
    jitter: float = 1e-9,
    jitter_star: float = 1e-8,
) -> jnp.ndarray:
    """One draw of f(x_star) | f(x) = f. JIT- and vmap-compatible."""
    mu_star, Sigma_star = conditional(
        x_star, x, f, params, kernel_fn=kernel_fn, jitter=jitter, jitter_star=jitter_star
    )
    L_star = cholesky_factor(Sigma_star)
    return sample_mvn(key, mu_star, L_star)
