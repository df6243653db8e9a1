"""
===========================================================
plotting.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================
Figures for the course: SIR trajectories, scenario
comparisons, parameter-sweep heatmaps, daily incidence and
Rt estimates with their credible intervals.

Every function draws on a supplied Axes (or makes one),
returns it, and only calls plt.show() when show=True.
"""
from typing import Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..experiments import pivot_for_plot

COMPARTMENT_COLORS = {"S": "tab:blue", "I": "tab:red", "R": "tab:green"}
COMPARTMENT_LABELS = {"S": "Susceptible", "I": "Infected", "R": "Recovered"}


def plot_trajectory(trajectory: pd.DataFrame,
                    ax: Optional[Axes] = None,
                    show: bool = True,
                    title: Optional[str] = None) -> Axes:
    """
    Plot S, I and R of one simulated trajectory.

    Parameters
    ----------
    trajectory : pd.DataFrame
        Output of run_sir_model (columns time, S, I, R)
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, creates new figure
    show : bool
        Whether to display the plot immediately
    title : str, optional
        Plot title

    Returns
    -------
    ax : matplotlib.axes.Axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))

    for comp in ("S", "I", "R"):
        ax.plot(trajectory["time"], trajectory[comp], linewidth=2,
                color=COMPARTMENT_COLORS[comp], label=COMPARTMENT_LABELS[comp])

    ax.set_xlabel('Time (days)', fontsize=12)
    ax.set_ylabel('Number of individuals', fontsize=12)
    ax.set_title(title if title else 'SIR Model Dynamics', fontsize=14)
    ax.legend(fontsize=11)
    ax.grid(True, alpha=0.3)

    if show:
        plt.tight_layout()
        plt.show()
    return ax


def plot_infected_comparison(long_df: pd.DataFrame,
                             compartment: str = "I",
                             ax: Optional[Axes] = None,
                             show: bool = True,
                             title: str = "Infected Dynamics Comparison") -> Axes:
    """One line per scenario from the long output of compare_scenarios"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 7))

    sns.lineplot(data=long_df, x="time", y=compartment, hue="scenario",
                 linewidth=2, ax=ax)
    ax.set_xlabel('Time (days)', fontsize=12)
    ax.set_ylabel(COMPARTMENT_LABELS.get(compartment, compartment), fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.grid(True, alpha=0.3)

    if show:
        plt.tight_layout()
        plt.show()
    return ax


def plot_sweep_heatmap(sweep: pd.DataFrame,
                       value: str = "final_size",
                       x: str = "beta",
                       y: str = "gamma",
                       ax: Optional[Axes] = None,
                       show: bool = True) -> Axes:
    """Heatmap of a summary metric from grid_sweep"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))
    X, Y, Z = pivot_for_plot(sweep, x=x, y=y, value=value)
    mesh = ax.pcolormesh(X, Y, Z, shading="auto", cmap="viridis")
    cbar = ax.figure.colorbar(mesh, ax=ax)
    cbar.set_label(value.replace("_", " ").title())
    ax.set_xlabel(x)
    ax.set_ylabel(y)

    if show:
        plt.tight_layout()
        plt.show()
    return ax


def plot_incidence(incidence: pd.Series,
                   ax: Optional[Axes] = None,
                   show: bool = True,
                   title: str = "Daily incidence") -> Axes:
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))
    x = incidence.index if isinstance(incidence, pd.Series) else np.arange(len(incidence))
    ax.bar(x, np.asarray(incidence), width=1.0, color="tab:gray", alpha=0.8)
    ax.set_ylabel("Cases per day", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.grid(True, alpha=0.3)

    if show:
        plt.tight_layout()
        plt.show()
    return ax


def plot_rt(rt_table: pd.DataFrame,
            ax: Optional[Axes] = None,
            show: bool = True,
            label: Optional[str] = None,
            color: str = "tab:blue") -> Axes:
    """
    Posterior mean Rt (at each window's end) with the credible band.

    Degenerate windows are left out of the line; their count is added
    to the legend label so they are not hidden.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    ok = rt_table[~rt_table["degenerate"]]
    n_bad = int(rt_table["degenerate"].sum())
    text = label if label else "Rt"
    if n_bad:
        text = f"{text} ({n_bad} undefined window(s))"

    ax.fill_between(ok["window_end"], ok["lower_r"], ok["upper_r"],
                    color=color, alpha=0.25, linewidth=0)
    ax.plot(ok["window_end"], ok["mean_r"], color=color, linewidth=2, label=text)
    ax.axhline(y=1, color='gray', linestyle='--', linewidth=1.5, alpha=0.7)
    ax.set_ylabel("$R_t$", fontsize=12)
    ax.set_title("Estimated $R_t$ (sliding windows)", fontsize=14)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    if show:
        plt.tight_layout()
        plt.show()
    return ax


def plot_incidence_and_rt(incidence: pd.Series,
                          rt_table: pd.DataFrame,
                          figsize: Tuple[float, float] = (11, 8),
                          title: Optional[str] = None,
                          show: bool = True) -> Figure:
    """Incidence on top, Rt below, sharing the time axis"""
    with sns.axes_style("whitegrid"):
        fig, (ax_inc, ax_rt) = plt.subplots(2, 1, figsize=figsize, sharex=True)
        plot_incidence(incidence, ax=ax_inc, show=False,
                       title=title if title else "Daily incidence")
        plot_rt(rt_table, ax=ax_rt, show=False)

    if show:
        plt.tight_layout()
        plt.show()
    return fig
