"""
GP classification on synthetic data.

Draws a latent function f ~ GP(0, SE(alpha=5, rho=0.1)) on 1000 points in
[-1, 1], labels every point with a Bernoulli(logistic(f)) outcome, fits the
posterior over (alpha, rho, f) on a random subset of 100 points with NUTS
(4 chains, 1000 warmup + 1000 kept draws) and predicts back onto the grid.

    python examples/gp_classification.py [--marginal] [--out fig.png]
"""
import argparse
import logging

import matplotlib.pyplot as plt
import numpy as np

from gpclass_jax import enable_x64
from gpclass_jax.gp import logistic
from gpclass_jax.inference import SamplingCFG
from gpclass_jax.workflow import PredictCFG, WorkflowCFG, format_table, run, summarize

from utils import COLORS, setup_plot_style, plot_band, get_figure_size, format_axes

enable_x64()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--marginal", action="store_true",
                        help="marginalise prediction over posterior draws")
    parser.add_argument("--out", default=None, help="save the figure instead of showing it")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")

    cfg = WorkflowCFG(
        seed=args.seed,
        sampling=SamplingCFG(seed=args.seed),
        predict=PredictCFG(strategy="marginal" if args.marginal else "point", seed=args.seed),
    )
    out = run(cfg)

    print(format_table(out.params))
    print(f"divergent transitions: {out.diagnostics['num_divergent']}")

    # ============================================================
    # Plots
    # ============================================================
    setup_plot_style()
    fig, (ax_f, ax_mu) = plt.subplots(1, 2, figsize=get_figure_size('wide'))
    grid = np.asarray(out.grid.x)
    x = np.asarray(out.data.x)

    ax_f.plot(grid, np.asarray(out.f), color=COLORS['truth'], label='true f')
    plot_band(ax_f, x, out.f_summary, color=COLORS['posterior'],
              label_mean=f'posterior f ({int(100 * cfg.prob)}%)')
    ax_f.scatter(x, np.asarray(out.data.y), s=8, color=COLORS['data'], label='y (train)')
    format_axes(ax_f, title='Latent function', xlabel='x', ylabel='f')

    ax_mu.plot(grid, np.asarray(logistic(out.f)), color=COLORS['truth'], label='true p')
    plot_band(ax_mu, grid, out.mu_summary, color=COLORS['predictive'],
              label_mean=f'predictive p ({out.predictive.strategy})')
    plot_band(ax_mu, x, summarize(logistic(out.posterior.f), cfg.prob),
              color=COLORS['posterior'], alpha_fill=0.1, linestyle='--',
              label_mean='posterior p (train)')
    ax_mu.scatter(x, np.asarray(out.data.y), s=8, color=COLORS['data'])
    format_axes(ax_mu, title='Success probability', xlabel='x', ylabel='p', grid=True)

    fig.tight_layout()
    if args.out:
        fig.savefig(args.out)
    else:
        plt.show()


if __name__ == "__main__":
    main()
