"""
===========================================================
renewal.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Synthetic daily incidence from the renewal equation

        I[t] ~ Poisson(R[t] * sum_{s>=1} I[t-s] * w[s])

    with a known reproduction number and serial interval.
    Used to check that the Rt estimator recovers the R that
    generated the data.

Example Usage:
    from epicourse.renewal import RenewalParams, simulate_incidence
    w = discretize_serial_interval(4.8, 2.3, 60)
    cases = simulate_incidence(RenewalParams(r=1.3, si_distr=w,
                               initial_cases=[20], n_days=80), seed=7)
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np


@dataclass
class RenewalParams:
    r: Union[float, Sequence[float]]    # constant R or one value per day
    si_distr: Sequence[float]           # serial interval weights, w[0] ignored
    initial_cases: Sequence[int]        # seeding days, copied as-is
    n_days: int
    r_daily: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        self.si_distr = np.asarray(self.si_distr, dtype=float)
        self.initial_cases = np.asarray(self.initial_cases, dtype=float)
        if self.si_distr.ndim != 1 or self.si_distr.size < 2:
            raise ValueError("si_distr needs at least two entries (w[0], w[1], ...)")
        if np.any(self.si_distr < 0) or self.si_distr[1:].sum() <= 0:
            raise ValueError("si_distr must be non-negative with mass after day 0")
        if self.initial_cases.size == 0 or np.any(self.initial_cases < 0):
            raise ValueError("initial_cases must be a non-empty sequence of non-negative counts")
        if int(self.n_days) != self.n_days or self.n_days < self.initial_cases.size:
            raise ValueError("n_days must be an integer no shorter than initial_cases")
        self.n_days = int(self.n_days)

        r = np.asarray(self.r, dtype=float)
        if r.ndim == 0:
            r = np.full(self.n_days, float(r))
        if r.size != self.n_days:
            raise ValueError(f"r must be a scalar or have n_days={self.n_days} values, got {r.size}")
        if np.any(r < 0) or not np.all(np.isfinite(r)):
            raise ValueError("r must be finite and non-negative")
        self.r_daily = r


def simulate_incidence(
        params: RenewalParams,
        seed: Optional[int] = None,
        stochastic: bool = True,
) -> np.ndarray:
    """
    Run the renewal process forward for params.n_days days.

    With stochastic=False each day gets its expected count, rounded,
    which makes a noise-free series for checking the estimator.
    """
    rng = np.random.default_rng(seed)
    w = params.si_distr.copy()
    w[0] = 0.0

    cases = np.zeros(params.n_days, dtype=float)
    n_seed = params.initial_cases.size
    cases[:n_seed] = params.initial_cases

    for t in range(n_seed, params.n_days):
        lags = min(t, w.size - 1)
        # cases[t-1], cases[t-2], ... against w[1], w[2], ...
        infectivity = float(np.dot(cases[t - lags:t][::-1], w[1:lags + 1]))
        expected = params.r_daily[t] * infectivity
        cases[t] = rng.poisson(expected) if stochastic else np.round(expected)

    return cases.astype(np.int64)
