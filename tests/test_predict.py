import jax
import jax.numpy as jnp

from gpclass_jax.gp import (
    KernelParams,
    conditional,
    sample_conditional,
    sample_mvn,
    checked_cholesky,
)


def _setup():
    x = jnp.linspace(-1, 1, 10)
    params = KernelParams(alpha=jnp.array(1.5), rho=jnp.array(0.3))
    f = jnp.sin(3 * x)
    return x, params, f


def test_conditioning_at_training_inputs():
    x, params, f = _setup()
    mu, Sigma = conditional(x, x, f, params)

    assert jnp.allclose(mu, f, atol=1e-4)
    assert jnp.max(jnp.abs(Sigma)) < 1e-6
    assert jnp.allclose(Sigma, Sigma.T)


def test_far_from_data_reverts_to_prior():
    x, params, f = _setup()
    x_star = jnp.array([10.0, 12.0])
    mu, Sigma = conditional(x_star, x, f, params, jitter_star=0.0)

    assert jnp.allclose(mu, 0.0)
    assert jnp.allclose(jnp.diag(Sigma), params.variance)


def test_conditional_jit():
    x, params, f = _setup()
    x_star = jnp.linspace(-1, 1, 25)
    mu, Sigma = jax.jit(lambda p: conditional(x_star, x, f, p))(params)
    assert mu.shape == (25,)
    assert Sigma.shape == (25, 25)
    assert jnp.all(jnp.isfinite(Sigma))


def test_sample_conditional():
    x, params, f = _setup()
    x_star = jnp.linspace(-1, 1, 50)
    keys = jax.random.split(jax.random.PRNGKey(0), 8)
    draws = jax.vmap(lambda k: sample_conditional(k, x_star, x, f, params))(keys)

    assert draws.shape == (8, 50)
    assert jnp.all(jnp.isfinite(draws))
    # The grid contains the training inputs at both ends.
    assert jnp.allclose(draws[:, 0], f[0], atol=1e-2)
    assert jnp.allclose(draws[:, -1], f[-1], atol=1e-2)


def test_sample_mvn_moments():
    cov = jnp.array([[2.0, 0.6], [0.6, 1.0]])
    mu = jnp.array([1.0, -1.0])
    L = checked_cholesky(cov, matrix="cov", stage="test")
    z = sample_mvn(jax.random.PRNGKey(1), mu, L, shape=(20000,))

    assert z.shape == (20000, 2)
    assert jnp.allclose(jnp.mean(z, axis=0), mu, atol=0.05)
    assert jnp.allclose(jnp.cov(z.T), cov, atol=0.08)
