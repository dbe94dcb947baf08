import jax
import jax.numpy as jnp
import pytest

from gpclass_jax.core import ConfigurationError, SamplingFailure
from gpclass_jax.inference import (
    Draws,
    SamplingCFG,
    check_draws,
    convergence_table,
    ess,
    rhat,
    sample,
)


def _data(n=20, seed=0):
    x = jnp.linspace(-1, 1, n)
    gen = sample(
        "gp_classify_generate",
        {"n": n, "x": x, "alpha": 2.0, "rho": 0.4},
        SamplingCFG(iterations=1, warmup=0, chains=1, seed=seed, algorithm="fixed_param"),
    )
    return {"n": n, "x": x, "y": gen["y"][0, 0]}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"iterations": 0},
        {"chains": 0},
        {"warmup": -1},
        {"algorithm": "mh"},
        {"warmup": 60_000, "iterations": 60_000},
        {"target_accept": 1.0},
        {"init": "prior"},
        {"chain_method": "parallel"},
    ],
)
def test_config_errors(kwargs):
    with pytest.raises(ConfigurationError):
        sample("gp_classify_posterior", _data(), SamplingCFG(**kwargs))


def test_algorithm_model_mismatch():
    with pytest.raises(ConfigurationError):
        sample("gp_classify_posterior", _data(), SamplingCFG(algorithm="fixed_param"))
    gen = {"n": 3, "x": jnp.zeros(3) + jnp.arange(3), "alpha": 1.0, "rho": 1.0}
    with pytest.raises(ConfigurationError):
        sample("gp_classify_generate", gen, SamplingCFG(algorithm="nuts"))


def test_fixed_param_shapes():
    draws = sample(
        "gp_classify_generate",
        {"n": 10, "x": jnp.linspace(-1, 1, 10), "alpha": 1.0, "rho": 0.3},
        SamplingCFG(iterations=5, warmup=0, chains=3, algorithm="fixed_param"),
    )
    assert draws["f"].shape == (3, 5, 10)
    assert draws.num_chains == 3
    assert draws.num_iterations == 5
    assert draws.flat("y").shape == (15, 10)
    assert draws.stats == {}
    assert draws.num_divergent == 0
    assert "f" in draws
    with pytest.raises(KeyError):
        draws["f_star"]


def test_nuts_small():
    cfg = SamplingCFG(iterations=100, warmup=100, chains=2, seed=1, max_divergence_fraction=0.5)
    draws = sample("gp_classify_posterior", _data(), cfg)

    assert draws.algorithm == "nuts"
    assert draws["f"].shape == (2, 100, 20)
    assert draws["alpha"].shape == (2, 100)
    assert jnp.all(draws["alpha"] > 0)
    assert jnp.all(draws["rho"] > 0)
    assert draws.stats["acceptance_rate"].shape == (2, 100)
    assert draws.stats["is_divergent"].shape == (2, 100)
    assert draws.stats["step_size"].shape == (2,)
    assert jnp.all(draws.stats["step_size"] > 0)
    assert set(draws.positions) == {"log_alpha", "log_rho", "eta"}

    # chains start from different points and use different keys
    assert not jnp.allclose(draws["alpha"][0], draws["alpha"][1])


def test_nuts_reproducible():
    cfg = SamplingCFG(iterations=20, warmup=20, chains=2, seed=7, max_divergence_fraction=1.0)
    a = sample("gp_classify_posterior", _data(n=10), cfg)
    b = sample("gp_classify_posterior", _data(n=10), cfg)
    assert jnp.array_equal(a["rho"], b["rho"])


def test_hmc_sequential_map_init():
    cfg = SamplingCFG(
        iterations=30,
        warmup=0,
        chains=2,
        algorithm="hmc",
        step_size=0.02,
        num_integration_steps=10,
        init="map",
        map_steps=20,
        chain_method="sequential",
        max_divergence_fraction=1.0,
    )
    draws = sample("gp_classify_posterior", _data(n=10), cfg)
    assert draws["f"].shape == (2, 30, 10)
    assert jnp.allclose(draws.stats["step_size"], 0.02)
    assert jnp.all(draws.stats["num_integration_steps"] == 10)


def _fake(samples, accept=None, divergent=None):
    shape = next(iter(samples.values())).shape[:2]
    stats = {
        "acceptance_rate": jnp.full(shape, 0.8) if accept is None else accept,
        "is_divergent": jnp.zeros(shape, dtype=bool) if divergent is None else divergent,
    }
    return Draws(model="fake", algorithm="nuts", samples=samples, stats=stats)


def test_check_draws_non_finite():
    x = jnp.zeros((2, 10)).at[1, 3].set(jnp.nan)
    with pytest.raises(SamplingFailure) as exc:
        check_draws(_fake({"alpha": x}), SamplingCFG())
    assert exc.value.draws is not None


def test_check_draws_stuck_chain():
    accept = jnp.full((2, 10), 0.7).at[0].set(0.0)
    with pytest.raises(SamplingFailure) as exc:
        check_draws(_fake({"alpha": jnp.ones((2, 10))}, accept=accept), SamplingCFG())
    assert "acceptance_rate" in exc.value.diagnostics


def test_check_draws_divergences(caplog):
    samples = {"alpha": jax.random.normal(jax.random.PRNGKey(0), (2, 100))}
    many = jnp.zeros((2, 100), dtype=bool).at[:, :30].set(True)
    with pytest.raises(SamplingFailure):
        check_draws(_fake(samples, divergent=many), SamplingCFG())

    few = jnp.zeros((2, 100), dtype=bool).at[0, 0].set(True)
    draws = check_draws(_fake(samples, divergent=few), SamplingCFG())
    assert draws.num_divergent == 1
    assert "divergent" in caplog.text


def test_rhat_ess():
    iid = jax.random.normal(jax.random.PRNGKey(0), (4, 500))
    draws = _fake({"theta": iid})
    assert abs(float(rhat(draws, "theta")) - 1.0) < 0.05
    assert float(ess(draws, "theta")) > 500

    shifted = _fake({"theta": iid + jnp.arange(4.0)[:, None]})
    assert float(rhat(shifted, "theta")) > 1.5

    single = _fake({"theta": iid[:1]})
    assert jnp.isnan(rhat(single, "theta"))

    table = convergence_table(_fake({"theta": iid, "v": jnp.stack([iid] * 3, axis=-1)}))
    assert set(table) == {"theta", "v"}
