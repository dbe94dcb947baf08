"""
The four pipeline stages and an end-to-end runner.

    synthesize     DataSynthesizer
    fit_posterior  PosteriorSampler
    predict        PredictiveExtender
    summarize      SummaryReporter
"""
from .synthesize import synthesize
from .posterior import PosteriorSampleSet, fit_posterior
from .predictive import PredictCFG, PredictiveSampleSet, predict
from .summary import Summary, summarize, summarize_params, format_table
from .runner import WorkflowCFG, WorkflowOut, run

__all__ = [
    "synthesize",
    "PosteriorSampleSet",
    "fit_posterior",
    "PredictCFG",
    "PredictiveSampleSet",
    "predict",
    "Summary",
    "summarize",
    "summarize_params",
    "format_table",
    "WorkflowCFG",
    "WorkflowOut",
    "run",
]
