# gpclass_jax/core/errors.py
"""
Error types.

Every error here indicates a modelling or numerical problem that needs a
human decision, so nothing in the library catches and retries them:

  - ConfigurationError: malformed or inconsistent inputs, raised before any
    sampler is invoked.
  - NumericalInstabilityError: a covariance factorisation failed. Carries the
    matrix and stage so the caller can retry with a larger jitter.
  - SamplingFailure: the sampler returned unusable draws (non-finite values,
    every proposal rejected, too many divergent transitions).
"""
from __future__ import annotations

from typing import Any, Optional


class GPClassError(Exception):
    """Base class for all gpclass_jax errors."""


class ConfigurationError(GPClassError, ValueError):
    """Malformed data payload or sampler configuration."""


class NumericalInstabilityError(GPClassError, RuntimeError):
    """
    Cholesky factorisation of a covariance matrix failed.

    Attributes
    ----------
    matrix : str
        Which matrix failed, e.g. ``"K(x, x)"`` or ``"Sigma_star"``.
    stage : str
        Workflow stage, e.g. ``"generate"`` or ``"predict"``.
    jitter : float
        Absolute diagonal jitter that was applied.
    """

    def __init__(self, matrix: str, stage: str, jitter: float, detail: str = ""):
        self.matrix = matrix
        self.stage = stage
        self.jitter = float(jitter)
        msg = (
            f"Cholesky factorisation of {matrix} failed in stage '{stage}' "
            f"with jitter={self.jitter:.3g}"
        )
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class SamplingFailure(GPClassError, RuntimeError):
    """
    The sampler produced draws that cannot be used.

    The offending draws and diagnostics are attached for manual inspection.
    """

    def __init__(self, message: str, draws: Any = None, diagnostics: Optional[dict] = None):
        super().__init__(message)
        self.draws = draws
        self.diagnostics = diagnostics or {}


__all__ = [
    "GPClassError",
    "ConfigurationError",
    "NumericalInstabilityError",
    "SamplingFailure",
]
