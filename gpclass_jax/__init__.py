"""
gpclass_jax: Gaussian-process binary classification with MCMC in JAX.

    core        data containers and errors
    gp          squared-exponential kernel, logistic link, GP conditioning
    models      named model specifications (generate / posterior / predict)
    inference   sampler invocation, diagnostics
    workflow    synthesize -> fit_posterior -> predict -> summarize
"""
from .config import enable_x64
from .workflow import (
    synthesize,
    fit_posterior,
    predict,
    summarize,
    summarize_params,
    PredictCFG,
    WorkflowCFG,
    run,
)
from .inference import SamplingCFG, sample

__version__ = "0.1.0"

__all__ = [
    "enable_x64",
    "synthesize",
    "fit_posterior",
    "predict",
    "summarize",
    "summarize_params",
    "PredictCFG",
    "WorkflowCFG",
    "run",
    "SamplingCFG",
    "sample",
]
