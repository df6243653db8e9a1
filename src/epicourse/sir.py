"""
===========================================================
sir.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Deterministic SIR (Susceptible-Infectious-Recovered)
    model integrated with scipy's solve_ivp. This is the
    model built step by step in the course: define the
    right-hand side, hand it to an ODE solver, look at the
    trajectory.

    Defines:
        - SIRState: named (S, I, R) record
        - SIRParams: beta, gamma and the transmission mode
        - sir_rhs(): the ODE right-hand side
        - run_sir_model(): integrate over integer days 0..horizon
        - conservation_error(): S+I+R drift of a trajectory
        - SIRModel: class wrapper with R0 and summary stats

Example Usage:
    from epicourse.sir import run_sir_model, SIRState
    traj = run_sir_model(beta=1.0, gamma=0.05,
                         initial=SIRState(S=500000, I=1, R=10000),
                         horizon=365, freq_dependent=True)

Notes:
    - Frequency-dependent transmission divides beta*S*I by the
      total population at t=0; density-dependent does not.
    - LSODA (the solver behind R's deSolve::ode) is the default
      method; any solve_ivp method name is accepted.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import warnings
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Union

import numpy as np
import pandas as pd
from scipy.integrate import solve_ivp

COMPARTMENTS = ("S", "I", "R")


@dataclass(frozen=True)
class SIRState:
    """
    Compartment sizes at one point in time.

    Attributes:
    -----------
    S: float
        Susceptible individuals
    I: float
        Infectious individuals
    R: float
        Recovered (removed) individuals
    """
    S: float
    I: float
    R: float

    def __post_init__(self):
        for name in COMPARTMENTS:
            value = getattr(self, name)
            if not np.isfinite(value):
                raise ValueError(f"compartment {name} must be finite, got {value}")
            if value < 0:
                raise ValueError(f"compartment {name} must be non-negative, got {value}")

    @property
    def total(self) -> float:
        return float(self.S + self.I + self.R)

    def as_array(self) -> np.ndarray:
        return np.array([self.S, self.I, self.R], dtype=float)

    @classmethod
    def coerce(cls, initial: Union["SIRState", Mapping[str, float], Sequence[float]]) -> "SIRState":
        """Build a state from an SIRState, a {'S','I','R'} mapping or an (S, I, R) sequence"""
        if isinstance(initial, cls):
            return initial
        if isinstance(initial, Mapping):
            missing = [c for c in COMPARTMENTS if c not in initial]
            if missing:
                raise ValueError(f"initial state is missing compartments: {missing}")
            return cls(*(float(initial[c]) for c in COMPARTMENTS))
        values = list(initial)
        if len(values) != 3:
            raise ValueError(f"initial state needs exactly 3 values (S, I, R), got {len(values)}")
        return cls(*(float(v) for v in values))


@dataclass(frozen=True)
class SIRParams:
    beta: float                         # transmission rate
    gamma: float                        # recovery rate (1/gamma = mean infectious period)
    frequency_dependent: bool = True    # scale beta by the total population

    def __post_init__(self):
        if not np.isfinite(self.beta) or self.beta < 0:
            raise ValueError(f"transmission rate beta must be non-negative, got {self.beta}")
        if not np.isfinite(self.gamma) or self.gamma < 0:
            raise ValueError(f"recovery rate gamma must be non-negative, got {self.gamma}")

    @property
    def R0(self) -> float:
        """
        Basic reproduction number beta/gamma. Under density-dependent
        transmission this still has to be multiplied by N, see
        SIRModel.basic_reproduction_number.
        """
        return self.beta / self.gamma if self.gamma > 0 else np.inf


def sir_rhs(t: float, y: np.ndarray, beta: float, gamma: float, D: float) -> np.ndarray:
    """Right-hand side of the SIR equations, D is the transmission denominator"""
    S, I, R = y
    infection = beta * S * I / D
    dS = -infection
    dI = infection - gamma * I
    dR = gamma * I
    return np.array([dS, dI, dR])


def _check_horizon(horizon) -> int:
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer, float)):
        raise ValueError(f"horizon must be a positive integer, got {horizon!r}")
    if not np.isfinite(horizon) or horizon != int(horizon) or horizon <= 0:
        raise ValueError(f"horizon must be a positive integer, got {horizon!r}")
    return int(horizon)


def conservation_error(trajectory: pd.DataFrame) -> float:
    """Largest relative deviation of S+I+R from its value at t=0"""
    total = trajectory[list(COMPARTMENTS)].sum(axis=1).to_numpy()
    N0 = total[0]
    if N0 == 0:
        return float(np.max(np.abs(total)))
    return float(np.max(np.abs(total - N0)) / N0)


def run_sir_model(
        beta: float,
        gamma: float,
        initial: Union[SIRState, Mapping[str, float], Sequence[float]],
        horizon: int,
        freq_dependent: bool = True,
        method: str = "LSODA",
        rtol: float = 1e-8,
        atol: float = 1e-8,
        conservation_rtol: float = 1e-6,
) -> pd.DataFrame:
    """
    Integrate the SIR model over the integer time grid 0, 1, ..., horizon.

    Parameters
    ----------
    beta, gamma : float
        Transmission and recovery rates (both >= 0)
    initial : SIRState, mapping or sequence
        Initial compartment sizes (S0, I0, R0), all >= 0
    horizon : int
        Number of time units to simulate
    freq_dependent : bool
        If True, the force of infection is beta*I/N with N = S0+I0+R0,
        otherwise beta*I
    method : str
        solve_ivp method name ('LSODA', 'BDF', 'Radau', 'RK45', ...)
    rtol, atol : float
        Solver tolerances
    conservation_rtol : float
        Relative S+I+R drift above which a RuntimeWarning is issued

    Returns
    -------
    trajectory : pd.DataFrame
        Columns time, S, I, R with horizon+1 rows; row 0 is the initial state

    Raises
    ------
    ValueError
        Negative rates or compartments, non-integer horizon, or a
        frequency-dependent model with an empty population
    RuntimeError
        The solver did not reach the horizon
    """
    params = SIRParams(beta=beta, gamma=gamma, frequency_dependent=freq_dependent)
    state = SIRState.coerce(initial)
    horizon = _check_horizon(horizon)

    if params.frequency_dependent:
        D = state.total
        if D <= 0:
            raise ValueError("frequency-dependent transmission needs a positive total population")
    else:
        D = 1.0

    t_eval = np.arange(horizon + 1, dtype=float)
    solution = solve_ivp(
        fun=sir_rhs,
        t_span=(0.0, float(horizon)),
        y0=state.as_array(),
        method=method,
        t_eval=t_eval,
        args=(params.beta, params.gamma, D),
        rtol=rtol,
        atol=atol,
    )

    if not solution.success:
        reached = float(solution.t[-1]) if solution.t.size else 0.0
        raise RuntimeError(f"integration failed at t={reached:g}: {solution.message}")
    if solution.y.shape[1] != t_eval.size or not np.all(np.isfinite(solution.y)):
        bad = np.where(~np.all(np.isfinite(solution.y), axis=0))[0]
        step = int(bad[0]) if bad.size else int(solution.y.shape[1])
        raise RuntimeError(f"integration failed at step {step}: non-finite or missing state")

    S, I, R = solution.y
    trajectory = pd.DataFrame({"time": t_eval, "S": S, "I": I, "R": R})

    drift = conservation_error(trajectory)
    if drift > conservation_rtol:
        warnings.warn(
            f"S+I+R drifted by {drift:.2e} (relative), above {conservation_rtol:.0e}; "
            f"consider tighter tolerances than rtol={rtol}, atol={atol}",
            RuntimeWarning,
            stacklevel=2,
        )
    return trajectory


class SIRModel:
    """
    SIR compartmental model for infectious disease dynamics

    Parameters:
    -----------
    params: SIRParams
        Transmission rate, recovery rate and transmission mode
    """
    def __init__(self, params: SIRParams):
        self.params = params

    @property
    def R0(self) -> float:
        return self.params.R0

    def basic_reproduction_number(self, N: float) -> float:
        """R0 in a fully susceptible population of size N"""
        if self.params.frequency_dependent:
            return self.R0
        return self.R0 * N

    def simulate(self,
                 initial: Union[SIRState, Mapping[str, float], Sequence[float]],
                 horizon: int,
                 **solver_kwargs) -> pd.DataFrame:
        return run_sir_model(
            self.params.beta,
            self.params.gamma,
            initial,
            horizon,
            freq_dependent=self.params.frequency_dependent,
            **solver_kwargs,
        )

    @staticmethod
    def summary(trajectory: pd.DataFrame) -> Dict[str, float]:
        t = trajectory["time"].to_numpy()
        S = trajectory["S"].to_numpy()
        I = trajectory["I"].to_numpy()
        R = trajectory["R"].to_numpy()
        N0 = S[0] + I[0] + R[0]
        peak_idx = int(np.argmax(I))
        return {
            "peak_day": float(t[peak_idx]),
            "peak_infected": float(I[peak_idx]),
            "peak_prevalence": float(I[peak_idx] / N0) if N0 else 0.0,
            "final_size": float((R[-1] - R[0]) / N0) if N0 else 0.0,
            "attack_rate": float((S[0] - S[-1]) / S[0]) if S[0] else 0.0,
        }
