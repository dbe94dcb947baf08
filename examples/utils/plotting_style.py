"""
Plotting style for the classification examples.
"""
import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from typing import Dict, Literal, Optional, Tuple


# Color scheme
COLORS: Dict[str, str] = {
    'truth': '#2ca02c',       # Green
    'data': '#1f77b4',        # Blue
    'posterior': '#d62728',   # Red
    'predictive': '#9467bd',  # Purple
}


def setup_plot_style():
    """Setup matplotlib defaults."""
    plt.style.use('default')
    matplotlib.rcParams['figure.dpi'] = 100
    matplotlib.rcParams['savefig.dpi'] = 100
    matplotlib.rcParams['font.size'] = 10
    matplotlib.rcParams['axes.labelsize'] = 10
    matplotlib.rcParams['axes.titlesize'] = 11
    matplotlib.rcParams['xtick.labelsize'] = 9
    matplotlib.rcParams['ytick.labelsize'] = 9
    matplotlib.rcParams['legend.fontsize'] = 9
    matplotlib.rcParams['figure.titlesize'] = 12


def plot_band(
    ax,
    x,
    summary,
    color: str = 'C0',
    alpha_fill: float = 0.2,
    label_mean: Optional[str] = None,
    **kwargs
):
    """
    Plot a Summary: mean line with its central interval shaded.

    Args:
        ax: Matplotlib axis
        x: X values, one per summary location
        summary: gpclass_jax.workflow.Summary
        color: Line color
        alpha_fill: Fill alpha
        label_mean: Label for mean line
        **kwargs: Additional arguments for plot
    """
    x = np.asarray(x).ravel()
    ax.plot(x, np.asarray(summary.mean), color=color, label=label_mean, **kwargs)
    ax.fill_between(
        x,
        np.asarray(summary.lower),
        np.asarray(summary.upper),
        color=color,
        alpha=alpha_fill,
    )


def get_figure_size(
    style: Literal['wide', 'square', 'tall'] = 'wide',
    scale: float = 1.0
) -> Tuple[float, float]:
    """(width, height) for a named figure shape."""
    base_sizes = {
        'wide': (12, 4),
        'square': (6, 6),
        'tall': (6, 8),
    }
    w, h = base_sizes.get(style, base_sizes['wide'])
    return (w * scale, h * scale)


def format_axes(
    ax,
    title: Optional[str] = None,
    xlabel: Optional[str] = None,
    ylabel: Optional[str] = None,
    legend: bool = True,
    grid: bool = False,
):
    if title:
        ax.set_title(title)
    if xlabel:
        ax.set_xlabel(xlabel)
    if ylabel:
        ax.set_ylabel(ylabel)
    if legend:
        ax.legend()
    if grid:
        ax.grid(True, alpha=0.3)
