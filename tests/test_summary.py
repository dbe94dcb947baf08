import jax
import jax.numpy as jnp
import pytest

from gpclass_jax.core import ConfigurationError
from gpclass_jax.inference import Draws
from gpclass_jax.workflow import PosteriorSampleSet, format_table, summarize, summarize_params


def test_summarize_quantiles():
    draws = jnp.arange(1001.0)[:, None] * jnp.ones((1, 3))
    s = summarize(draws, prob=0.9)

    assert s.mean.shape == (3,)
    assert jnp.allclose(s.mean, 500.0)
    assert jnp.allclose(s.lower, 50.0)
    assert jnp.allclose(s.upper, 950.0)
    assert s.prob == 0.9


def test_summarize_scalar_draws():
    s = summarize(jnp.linspace(0, 1, 101), prob=0.5)
    assert s.mean.shape == ()
    assert jnp.allclose(s.lower, 0.25)
    assert jnp.allclose(s.upper, 0.75)


@pytest.mark.parametrize("prob", [0.0, 1.0, -0.1, 1.5])
def test_summarize_bad_prob(prob):
    with pytest.raises(ConfigurationError):
        summarize(jnp.ones((10, 2)), prob=prob)


def test_summarize_params():
    k1, k2, k3 = jax.random.split(jax.random.PRNGKey(0), 3)
    samples = {
        "alpha": jnp.exp(0.1 * jax.random.normal(k1, (2, 200))),
        "rho": 0.2 + 0.01 * jax.random.normal(k2, (2, 200)),
        "f": jax.random.normal(k3, (2, 200, 5)),
    }
    posterior = PosteriorSampleSet(
        x=jnp.linspace(-1, 1, 5),
        draws=Draws(model="gp_classify_posterior", algorithm="nuts", samples=samples),
    )
    table = summarize_params(posterior)

    assert set(table) == {"alpha", "rho"}
    row = table["rho"]
    assert set(row) == {"mean", "sd", "lower", "upper", "rhat", "ess"}
    assert row["lower"] < row["mean"] < row["upper"]
    assert abs(row["mean"] - 0.2) < 0.01
    assert abs(row["sd"] - 0.01) < 0.003

    text = format_table(table)
    assert "alpha" in text and "rhat" in text
    assert len(posterior) == 400
