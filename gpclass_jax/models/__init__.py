# gpclass_jax/models/__init__.py
"""
Model specifications, selected by name.

    gp_classify_generate   n, x, alpha, rho                   -> f, y
    gp_classify_posterior  n, x, y                            -> f, alpha, rho
    gp_classify_predict    n, x, n_star, x_star, f, alpha, rho -> f_star

`get(name)` returns a default-configured model; `make(name, **kwargs)`
forwards configuration (priors, jitter) to the model's constructor.
"""
from .base import (
    register,
    get,
    make,
    available,
    ModelSpec,
    SimulationModel,
    DensityModel,
)
from .priors import PriorCFG, HalfNormal, InverseGamma, LogNormal
from .generate import GenerateModel
from .posterior import PosteriorModel
from .predictive import PredictiveModel

# --------------------------------------------------
# Registry
# --------------------------------------------------
register(GenerateModel.name, GenerateModel)
register(PosteriorModel.name, PosteriorModel)
register(PredictiveModel.name, PredictiveModel)

__all__ = [
    "get",
    "make",
    "register",
    "available",
    "ModelSpec",
    "SimulationModel",
    "DensityModel",
    "PriorCFG",
    "HalfNormal",
    "InverseGamma",
    "LogNormal",
    "GenerateModel",
    "PosteriorModel",
    "PredictiveModel",
]
