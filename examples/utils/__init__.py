"""Utility modules for examples."""
from .plotting_style import (
    COLORS,
    setup_plot_style,
    plot_band,
    get_figure_size,
    format_axes,
)

__all__ = [
    "COLORS",
    "setup_plot_style",
    "plot_band",
    "get_figure_size",
    "format_axes",
]
