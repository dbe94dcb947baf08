# gpclass_jax/workflow/summary.py
"""
SummaryReporter: pointwise reductions of sample sets.

Rows are draws, columns are locations.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import jax.numpy as jnp
import numpy as np

from ..core.errors import ConfigurationError
from ..inference import rhat, ess
from .posterior import PosteriorSampleSet


@dataclass(frozen=True)
class Summary:
    mean: jnp.ndarray
    lower: jnp.ndarray
    upper: jnp.ndarray
    prob: float


def summarize(draws, prob: float = 0.9) -> Summary:
    """
    Pointwise mean and central `prob` interval.

    Args:
        draws: (num_draws,) or (num_draws, num_locations)
        prob: Interval mass in (0, 1); quantiles at (1 - prob)/2 and (1 + prob)/2

    Returns:
        Summary with arrays of shape draws.shape[1:]
    """
    if not 0.0 < prob < 1.0:
        raise ConfigurationError(f"prob must lie in (0, 1), got {prob}")
    draws = jnp.asarray(draws)
    if draws.ndim == 0 or draws.shape[0] == 0:
        raise ConfigurationError("summarize needs at least one draw")
    q = jnp.array([(1.0 - prob) / 2.0, (1.0 + prob) / 2.0])
    lower, upper = jnp.quantile(draws, q, axis=0)
    return Summary(mean=jnp.mean(draws, axis=0), lower=lower, upper=upper, prob=prob)


def summarize_params(
    posterior: PosteriorSampleSet,
    names: Iterable[str] = ("alpha", "rho"),
    prob: float = 0.9,
) -> Dict[str, Dict[str, float]]:
    """
    Fit summary for scalar posterior outputs: mean, sd, interval, R-hat, ESS.
    """
    table = {}
    draws = posterior.draws
    for name in names:
        flat = draws.flat(name)
        s = summarize(flat, prob)
        table[name] = {
            "mean": float(s.mean),
            "sd": float(jnp.std(flat, ddof=1)) if flat.shape[0] > 1 else float("nan"),
            "lower": float(s.lower),
            "upper": float(s.upper),
            "rhat": float(rhat(draws, name)),
            "ess": float(ess(draws, name)),
        }
    return table


def format_table(table: Dict[str, Dict[str, float]]) -> str:
    """Plain-text rendering of `summarize_params` output."""
    cols = ["mean", "sd", "lower", "upper", "rhat", "ess"]
    lines = ["{:>8}".format("") + "".join(f"{c:>10}" for c in cols)]
    for name, row in table.items():
        vals = "".join(f"{np.float64(row[c]):>10.3f}" for c in cols)
        lines.append(f"{name:>8}{vals}")
    return "\n".join(lines)
