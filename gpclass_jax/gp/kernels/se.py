# gpclass_jax/gp/kernels/se.py
import jax.numpy as jnp
from .params import KernelParams
from .utils import scaled_sqdist

def squared_exponential(X, Z, params: KernelParams):
    """
    Squared-exponential (exponentiated quadratic) covariance:
        k(x, z) = alpha^2 exp(-0.5 ||x - z||^2 / rho^2)

    Returns the (N, M) cross covariance. No jitter is added here; see
    `gram` for square blocks.
    """
    r2 = scaled_sqdist(X, Z, params.rho)
    return params.alpha ** 2 * jnp.exp(-0.5 * r2)


def gram(kernel_fn, X, params: KernelParams, jitter: float = 0.0):
    """
    Square covariance K(X, X) + jitter * alpha^2 * I.

    `jitter` is relative to the kernel scale alpha^2.
    """
    K = kernel_fn(X, X, params)
    return K + jitter * params.alpha ** 2 * jnp.eye(K.shape[0], dtype=K.dtype)
