"""
===========================================================
experiments.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Parameter sweeps for the SIR model: run a grid of
    (beta, gamma) values and tidy the summary statistics into
    a DataFrame, or run a few named scenarios and stack their
    trajectories for side-by-side plots.

Example Usage:
    from epicourse.experiments import grid_sweep, compare_scenarios
    df = grid_sweep(betas, gammas, initial=(500000, 1, 10000), horizon=365)
    long = compare_scenarios({"R0=20": (1.0, 0.05), "R0=1": (0.2, 0.2)},
                             initial=(500000, 1, 10000), horizon=365)
-----------------------------------------------------------
License: MIT
===========================================================
"""

from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .sir import SIRModel, SIRParams, SIRState


def _summarize_one(beta, gamma, initial, horizon, freq_dependent):
    """Simulate one (beta, gamma) pair and flatten its summary into a record"""
    model = SIRModel(SIRParams(beta=beta, gamma=gamma, frequency_dependent=freq_dependent))
    trajectory = model.simulate(initial, horizon)
    stats = model.summary(trajectory)
    return {
        "beta": float(beta),
        "gamma": float(gamma),
        "R0": model.basic_reproduction_number(SIRState.coerce(initial).total),
        **stats,
    }


def grid_sweep(
    betas,
    gammas,
    initial,
    horizon: int,
    freq_dependent: bool = True) -> pd.DataFrame:
    """
    Simulate every (beta, gamma) pair from the same initial state for
    `horizon` days. One row per pair: the rates, R0 for the initial
    population and the SIRModel.summary statistics, sorted by beta then gamma.
    """
    records = []
    for b in betas:
        for g in gammas:
            records.append(_summarize_one(float(b), float(g), initial, horizon, freq_dependent))
    df = pd.DataFrame.from_records(records)
    return df.sort_values(["beta", "gamma"]).reset_index(drop=True)


def compare_scenarios(
    scenarios: Dict[str, Tuple[float, float]],
    initial,
    horizon: int,
    freq_dependent: bool = True) -> pd.DataFrame:
    """Stack the trajectories of named (beta, gamma) scenarios in long format"""
    frames = []
    for label, (beta, gamma) in scenarios.items():
        model = SIRModel(SIRParams(beta=beta, gamma=gamma, frequency_dependent=freq_dependent))
        traj = model.simulate(initial, horizon)
        traj.insert(0, "scenario", label)
        frames.append(traj)
    if not frames:
        raise ValueError("no scenarios given")
    return pd.concat(frames, ignore_index=True)


def pivot_for_plot(df: pd.DataFrame, x: str, y: str, value: str):
    """Lay one sweep column on the (x, y) mesh: returns X, Y and Z, rows following y"""
    table = df.pivot_table(index=y, columns=x, values=value, aggfunc="first").sort_index()
    table = table.reindex(sorted(table.columns), axis=1)
    X, Y = np.meshgrid(table.columns.to_numpy(dtype=float), table.index.to_numpy(dtype=float))
    return X, Y, table.to_numpy(dtype=float)
