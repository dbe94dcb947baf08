# gpclass_jax/gp/utils.py
"""
Numerical stability utilities for GP computations.
"""
from __future__ import annotations

import jax.numpy as jnp

from ..core.errors import NumericalInstabilityError


def cholesky_factor(K: jnp.ndarray, jitter: float = 0.0) -> jnp.ndarray:
    """
    Lower Cholesky factor of K + jitter * I. JIT-compatible.

    On failure the factor contains NaNs; callers outside a trace should use
    `checked_cholesky` to turn that into an exception.

    Args:
        K: Symmetric matrix to decompose (M, M)
        jitter: Absolute diagonal jitter

    Returns:
        L: Lower triangular Cholesky factor (M, M)
    """
    # Ensure symmetry
    K = 0.5 * (K + K.T)
    if jitter:
        K = K + jitter * jnp.eye(K.shape[0], dtype=K.dtype)
    return jnp.linalg.cholesky(K)


def checked_cholesky(
    K: jnp.ndarray,
    jitter: float = 0.0,
    *,
    matrix: str,
    stage: str,
    included_jitter: float = 0.0,
) -> jnp.ndarray:
    """
    Cholesky factor of K + jitter * I, raising if it does not exist.

    No jitter escalation is attempted: a failure here means the model or its
    jitter needs attention, and the caller decides how to retry.

    `included_jitter` is diagonal jitter already folded into K; it is only
    added to the jitter reported on failure.

    Raises:
        NumericalInstabilityError: factor is not finite (K not positive definite)
    """
    if K.shape[0] == 0:
        return jnp.zeros_like(K)
    L = cholesky_factor(K, jitter)
    if not bool(jnp.all(jnp.isfinite(L))):
        raise NumericalInstabilityError(
            matrix=matrix,
            stage=stage,
            jitter=jitter + included_jitter,
            detail=f"matrix of size {K.shape[0]} is not positive definite",
        )
    return L
