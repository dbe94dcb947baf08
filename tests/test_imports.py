import pytest


def test_imports():
    import gpclass_jax

    from gpclass_jax.core import Dataset, InputGrid
    from gpclass_jax.gp.kernels.params import KernelParams
    from gpclass_jax.inference import SamplingCFG, Draws
    from gpclass_jax.workflow import WorkflowCFG, PredictCFG

    # kernels
    from gpclass_jax.gp.kernels import get as get_kernel
    get_kernel("se")
    get_kernel("rbf")

    # models
    from gpclass_jax.models import get as get_model
    get_model("gp_classify_generate")
    get_model("gp_classify_posterior")
    get_model("gp_classify_predict")


def test_unknown_names():
    from gpclass_jax.gp.kernels import get as get_kernel
    from gpclass_jax.models import get as get_model

    with pytest.raises(KeyError):
        get_kernel("matern")
    with pytest.raises(KeyError):
        get_model("gp_regress")


def test_x64_enabled():
    from gpclass_jax.config import x64_enabled
    assert x64_enabled()
