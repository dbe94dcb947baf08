from dataclasses import replace

import jax
import jax.numpy as jnp
import pytest

from gpclass_jax.core import ConfigurationError, NumericalInstabilityError
from gpclass_jax.inference import SamplingCFG, sample
from gpclass_jax.models import (
    available,
    get,
    make,
    register,
    GenerateModel,
    PosteriorModel,
    PriorCFG,
    HalfNormal,
    InverseGamma,
    LogNormal,
)

FIXED = SamplingCFG(iterations=1, warmup=0, chains=1, algorithm="fixed_param")


def test_registry():
    assert {"gp_classify_generate", "gp_classify_posterior", "gp_classify_predict"} <= set(available())
    assert isinstance(get("gp_classify_generate"), GenerateModel)
    assert make("gp_classify_posterior", jitter=1e-6).jitter == 1e-6
    with pytest.raises(KeyError):
        register("gp_classify_generate", GenerateModel)


def test_generate_validation():
    model = GenerateModel()
    x = jnp.linspace(-1, 1, 5)
    with pytest.raises(ConfigurationError):
        model.validate({"n": 5, "x": x, "alpha": 1.0})
    with pytest.raises(ConfigurationError):
        model.validate({"n": 6, "x": x, "alpha": 1.0, "rho": 0.1})
    with pytest.raises(ConfigurationError):
        model.validate({"n": 5, "x": x, "alpha": 0.0, "rho": 0.1})
    with pytest.raises(ConfigurationError):
        model.validate({"n": 5, "x": x, "alpha": 1.0, "rho": -1.0})
    with pytest.raises(ConfigurationError):
        model.validate({"n": 2.5, "x": x, "alpha": 1.0, "rho": 0.1})


def test_generate_reproducible():
    data = {"n": 50, "x": jnp.linspace(-1, 1, 50), "alpha": 5.0, "rho": 0.1}
    a = sample("gp_classify_generate", data, FIXED)
    b = sample("gp_classify_generate", data, FIXED)
    c = sample("gp_classify_generate", data, replace(FIXED, seed=1))

    assert a["f"].shape == (1, 1, 50)
    assert a["y"].shape == (1, 1, 50)
    assert jnp.array_equal(a["f"], b["f"])
    assert jnp.array_equal(a["y"], b["y"])
    assert not jnp.array_equal(a["f"], c["f"])
    assert jnp.all((a["y"] == 0) | (a["y"] == 1))


def test_generate_cholesky_failure():
    data = {"n": 5, "x": jnp.zeros(5), "alpha": 1.0, "rho": 0.1}
    with pytest.raises(NumericalInstabilityError) as exc:
        sample(make("gp_classify_generate", jitter=0.0), data, FIXED)
    assert exc.value.matrix == "K(x, x)"
    assert exc.value.stage == "generate"
    assert isinstance(exc.value, RuntimeError)


def test_posterior_validation():
    model = PosteriorModel()
    x = jnp.linspace(-1, 1, 4)
    with pytest.raises(ConfigurationError):
        model.validate({"n": 4, "x": x, "y": jnp.array([0, 1, 2, 0])})
    with pytest.raises(ConfigurationError):
        model.validate({"n": 4, "x": x, "y": jnp.array([0, 1, 1])})
    payload = model.validate({"n": 4, "x": x, "y": jnp.array([0, 1, 1, 0])})
    assert payload["y"].dtype == x.dtype


def test_posterior_logdensity_finite():
    model = PosteriorModel()
    x = jnp.linspace(-1, 1, 20)
    payload = model.validate({"n": 20, "x": x, "y": (x > 0).astype(jnp.int32)})
    position = model.init_template(payload)

    lp, grad = jax.value_and_grad(model.logdensity)(position, payload)
    assert jnp.isfinite(lp)
    assert all(jnp.all(jnp.isfinite(g)) for g in jax.tree_util.tree_leaves(grad))

    out = model.constrain(position, payload)
    assert set(out) == {"f", "alpha", "rho"}
    assert jnp.allclose(out["f"], 0.0)
    assert float(out["alpha"]) == 1.0


def test_posterior_prefers_data_consistent_f():
    model = PosteriorModel()
    x = jnp.linspace(-1, 1, 20)
    payload = model.validate({"n": 20, "x": x, "y": jnp.ones(20, dtype=jnp.int32)})
    position = model.init_template(payload)
    up = {**position, "eta": position["eta"].at[0].set(1.0)}
    down = {**position, "eta": position["eta"].at[0].set(-1.0)}
    assert model.logdensity(up, payload) > model.logdensity(down, payload)


def test_predict_model_at_training_inputs():
    x = jnp.linspace(-1, 1, 10)
    f = jnp.sin(3 * x)
    data = {"n": 10, "x": x, "n_star": 10, "x_star": x, "f": f, "alpha": 1.5, "rho": 0.3}
    draws = sample("gp_classify_predict", data, replace(FIXED, iterations=5))
    assert draws["f_star"].shape == (1, 5, 10)
    assert jnp.allclose(draws["f_star"], f, atol=1e-3)


@pytest.mark.parametrize(
    "prior,upper",
    [(HalfNormal(5.0), 60.0), (InverseGamma(5.0, 1.0), 20.0), (LogNormal(0.0, 1.0), 400.0)],
)
def test_priors_normalised(prior, upper):
    x = jnp.linspace(1e-4, upper, 400_000)
    mass = jnp.sum(jnp.exp(prior.log_prob(x))) * (x[1] - x[0])
    assert jnp.allclose(mass, 1.0, atol=2e-3)


def test_prior_validation():
    with pytest.raises(ConfigurationError):
        PriorCFG(alpha=HalfNormal(-1.0)).validate()
    with pytest.raises(ConfigurationError):
        PriorCFG(rho="gamma").validate()
    with pytest.raises(ConfigurationError):
        PosteriorModel(priors=PriorCFG(rho=InverseGamma(0.0, 1.0)))
