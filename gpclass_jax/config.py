# gpclass_jax/config.py
"""
Process-level JAX settings.

The squared-exponential covariance on a dense grid is numerically low-rank;
its Cholesky factor with a ~1e-9 relative jitter only exists in 64-bit
arithmetic. Call `enable_x64()` before building any arrays.
"""
import jax
import jax.numpy as jnp


def enable_x64(enabled: bool = True) -> None:
    jax.config.update("jax_enable_x64", enabled)


def x64_enabled() -> bool:
    return jnp.zeros(()).dtype == jnp.float64
