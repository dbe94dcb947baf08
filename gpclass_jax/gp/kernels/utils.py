# gpclass_jax/gp/kernels/utils.py
import jax.numpy as jnp

def as_column(X):
    """(N,) -> (N, 1); (N, D) unchanged."""
    X = jnp.asarray(X)
    return X[:, None] if X.ndim == 1 else X


def scaled_sqdist(X, Z, lengthscale):
    """
    Squared distances ||(x - z) / ell||^2 between rows of X and Z.

    Computed from explicit differences rather than the x^2 + z^2 - 2xz
    expansion, so coincident inputs give exactly zero.

    Args:
        X: (N,) or (N, D) input array
        Z: (M,) or (M, D) input array
        lengthscale: scalar length scale

    Returns:
        (N, M) squared distances
    """
    Xs = as_column(X) / lengthscale
    Zs = as_column(Z) / lengthscale
    diff = Xs[:, None, :] - Zs[None, :, :]
    return jnp.sum(diff * diff, axis=-1)
