import jax
import jax.numpy as jnp

from gpclass_jax.gp.likelihoods import logistic, logit, bernoulli


def test_logistic_range_and_midpoint():
    f = jnp.linspace(-10, 10, 201)
    mu = logistic(f)
    assert jnp.all((mu > 0) & (mu < 1))
    assert jnp.all(jnp.diff(mu) > 0)
    assert float(logistic(0.0)) == 0.5


def test_logit_inverts_logistic():
    f = jnp.linspace(-5, 5, 21)
    assert jnp.allclose(logit(logistic(f)), f)


def test_bernoulli_log_prob():
    f = jnp.array([-2.0, 0.0, 1.5, 3.0])
    y = jnp.array([0.0, 1.0, 1.0, 0.0])
    p = logistic(f)
    expected = jnp.sum(y * jnp.log(p) + (1 - y) * jnp.log1p(-p))
    assert jnp.allclose(bernoulli.log_prob(y, f), expected)


def test_bernoulli_log_prob_stable_for_large_f():
    f = jnp.array([800.0, -800.0])
    y = jnp.array([1.0, 0.0])
    lp = bernoulli.log_prob(y, f)
    assert jnp.isfinite(lp)
    assert jnp.allclose(lp, 0.0)


def test_bernoulli_sample():
    key = jax.random.PRNGKey(0)
    y = bernoulli.sample(key, jnp.zeros(500))
    assert y.dtype == jnp.int32
    assert jnp.all((y == 0) | (y == 1))
    assert 150 < int(jnp.sum(y)) < 350

    assert jnp.all(bernoulli.sample(key, jnp.full(50, 40.0)) == 1)
    assert jnp.all(bernoulli.sample(key, jnp.full(50, -40.0)) == 0)
