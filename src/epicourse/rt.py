"""
===========================================================
rt.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Estimate the instantaneous reproduction number Rt from
    daily incidence with the method of Cori et al. (2013),
    using a parametric (offset gamma) serial interval.

    For a window [t_start, t_end] the gamma prior on R is
    updated with the cases observed in the window and the
    overall infectivity Lambda (past incidence weighted by
    the serial interval):

        shape = a_prior + sum(I[t_start..t_end])
        scale = 1 / (1/b_prior + sum(Lambda[t_start..t_end]))

    and the posterior mean, std, median and credible bounds
    are reported for each window.

Example Usage:
    from epicourse.rt import RtConfig, estimate_rt
    cfg = RtConfig(mean_si=4.8, std_si=2.3)
    table = estimate_rt(incidence, cfg)

Notes:
    - Window indices are 0-based and inclusive. The default
      schedule starts at day 1 (day 0 has no infectivity) and
      uses t_end = t_start + 7.
    - Windows with no infectivity are kept and flagged as
      degenerate (mean NaN, interval [0, inf)).
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import math
import warnings
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.stats import gamma as gamma_dist

from casedata.incidence import check_counts, check_daily_index, prepare_incidence, split_geographies
from .serial_interval import discretize_serial_interval

Window = Tuple[int, int]

RT_COLUMNS = [
    "t_start", "t_end", "window_start", "window_end",
    "mean_r", "std_r", "median_r", "lower_r", "upper_r", "degenerate",
]

# infectivity summed over a window at or below this is treated as zero
_DEGENERATE_EPS = 1e-12


@dataclass
class RtConfig:
    """
    Settings for the Rt estimator.

    mean_si, std_si: serial interval mean and std in days
    mean_prior, std_prior: gamma prior on R
    window: t_end - t_start for generated sliding windows
    quantiles: (lower, upper) posterior quantiles reported as the credible interval
    cv_posterior: target posterior coefficient of variation; a first window
                  with fewer cases than this needs triggers a warning
    """
    mean_si: float
    std_si: float
    mean_prior: float = 5.0
    std_prior: float = 5.0
    window: int = 7
    quantiles: Tuple[float, float] = (0.025, 0.975)
    cv_posterior: float = 0.3

    def __post_init__(self):
        if not np.isfinite(self.mean_si) or self.mean_si <= 1:
            raise ValueError(f"mean_si must be > 1 day, got {self.mean_si}")
        if not np.isfinite(self.std_si) or self.std_si <= 0:
            raise ValueError(f"std_si must be positive, got {self.std_si}")
        if not np.isfinite([self.mean_prior, self.std_prior]).all() \
                or self.mean_prior <= 0 or self.std_prior <= 0:
            raise ValueError("mean_prior and std_prior must be positive")
        if int(self.window) != self.window or self.window < 0:
            raise ValueError(f"window must be a non-negative integer, got {self.window}")
        lo, hi = self.quantiles
        if not 0 < lo < hi < 1:
            raise ValueError(f"quantiles must satisfy 0 < lower < upper < 1, got {self.quantiles}")
        if not np.isfinite(self.cv_posterior) or self.cv_posterior <= 0:
            raise ValueError("cv_posterior must be positive")

    @property
    def prior_shape(self) -> float:
        return (self.mean_prior / self.std_prior) ** 2

    @property
    def prior_scale(self) -> float:
        return self.std_prior ** 2 / self.mean_prior

    def serial_interval(self, n_days: int) -> np.ndarray:
        """Discretized serial interval covering at least n_days lags and its own tail"""
        tail = int(math.ceil(self.mean_si + 10 * self.std_si))
        return discretize_serial_interval(self.mean_si, self.std_si, max(n_days - 1, tail, 1))


def make_sliding_windows(n: int, window: int = 7, first: int = 1) -> List[Window]:
    """
    Sliding windows t_start = first .. n-1-window, t_end = t_start + window.

    With the defaults this matches the 1-based schedule
    t_start = 2..N-7, t_end = t_start + 7.
    """
    if first < 1:
        raise ValueError("windows cannot start before day 1")
    last_start = n - 1 - window
    if last_start < first:
        raise ValueError(
            f"incidence of length {n} is too short for a {window}-day window starting on day {first}"
        )
    return [(t, t + window) for t in range(first, last_start + 1)]


def validate_windows(windows: Sequence[Window], n: int) -> List[Window]:
    """Check each (t_start, t_end) pair lies within 1..n-1 with t_start <= t_end"""
    checked = []
    if len(windows) == 0:
        raise ValueError("at least one estimation window is required")
    for i, pair in enumerate(windows):
        if len(pair) != 2:
            raise ValueError(f"window {i} must be a (t_start, t_end) pair, got {pair!r}")
        ts, te = pair
        if int(ts) != ts or int(te) != te:
            raise ValueError(f"window {i} bounds must be integers, got {pair!r}")
        ts, te = int(ts), int(te)
        if ts > te:
            raise ValueError(f"window {i} ends before it starts: ({ts}, {te})")
        if ts < 1:
            raise ValueError(f"window {i} starts on day {ts}; day 0 has no infectivity")
        if te > n - 1:
            raise ValueError(f"window {i} ends on day {te}, past the last day {n - 1}")
        checked.append((ts, te))
    return checked


def overall_infectivity(incidence: Sequence[float], si_distr: Sequence[float]) -> np.ndarray:
    """
    Lambda[t] = sum_{s>=1} I[t-s] * w[s], the infection pressure on day t
    from cases on earlier days. Lambda[0] is 0.
    """
    I = np.asarray(incidence, dtype=float)
    w = np.array(si_distr, dtype=float)
    if w.ndim != 1 or w.size == 0:
        raise ValueError("si_distr must be a non-empty 1-D array")
    w[0] = 0.0
    return np.convolve(I, w)[: I.size]


def _as_incidence(incidence) -> Tuple[np.ndarray, Optional[pd.DatetimeIndex]]:
    if isinstance(incidence, pd.Series):
        counts = check_counts(incidence.to_numpy())
        if isinstance(incidence.index, pd.DatetimeIndex):
            check_daily_index(incidence.index)
            return counts, incidence.index
        return counts, None
    return check_counts(incidence), None


def estimate_rt(
        incidence: Union[pd.Series, Sequence[int], np.ndarray],
        config: RtConfig,
        windows: Optional[Sequence[Window]] = None,
) -> pd.DataFrame:
    """
    Posterior summaries of Rt over sliding windows.

    Parameters
    ----------
    incidence : pd.Series or array-like
        Daily case counts, non-negative integers, no missing days.
        A DatetimeIndex is carried through to the window dates.
    config : RtConfig
        Serial interval, prior and reporting settings
    windows : list of (t_start, t_end), optional
        0-based inclusive index pairs; defaults to
        make_sliding_windows(len(incidence), config.window)

    Returns
    -------
    pd.DataFrame
        One row per window in the order supplied, columns RT_COLUMNS
    """
    counts, dates = _as_incidence(incidence)
    n = counts.size
    if windows is None:
        windows = make_sliding_windows(n, config.window)
    windows = validate_windows(windows, n)

    si_distr = config.serial_interval(n)
    lam = overall_infectivity(counts, si_distr)

    # prefix sums so each window costs O(1)
    cum_cases = np.concatenate([[0.0], np.cumsum(counts, dtype=float)])
    cum_lam = np.concatenate([[0.0], np.cumsum(lam)])

    a_prior, b_prior = config.prior_shape, config.prior_scale
    lo_q, hi_q = config.quantiles

    min_cases = int(math.ceil(1.0 / config.cv_posterior ** 2 - a_prior))
    first_cases = cum_cases[windows[0][1] + 1] - cum_cases[windows[0][0]]
    if first_cases < min_cases:
        warnings.warn(
            f"Estimating R too early in the epidemic: the first window has {first_cases:.0f} cases, "
            f"fewer than the {min_cases} needed for a posterior CV of {config.cv_posterior}",
            RuntimeWarning,
            stacklevel=2,
        )

    records = []
    n_degenerate = 0
    for ts, te in windows:
        cases = cum_cases[te + 1] - cum_cases[ts]
        infectivity = cum_lam[te + 1] - cum_lam[ts]
        start = dates[ts] if dates is not None else ts
        end = dates[te] if dates is not None else te

        if infectivity <= _DEGENERATE_EPS:
            n_degenerate += 1
            records.append({
                "t_start": ts, "t_end": te, "window_start": start, "window_end": end,
                "mean_r": np.nan, "std_r": np.nan, "median_r": np.nan,
                "lower_r": 0.0, "upper_r": np.inf, "degenerate": True,
            })
            continue

        shape = a_prior + cases
        scale = 1.0 / (1.0 / b_prior + infectivity)
        lower, median, upper = gamma_dist.ppf([lo_q, 0.5, hi_q], a=shape, scale=scale)
        records.append({
            "t_start": ts, "t_end": te, "window_start": start, "window_end": end,
            "mean_r": shape * scale,
            "std_r": math.sqrt(shape) * scale,
            "median_r": float(median),
            "lower_r": float(lower),
            "upper_r": float(upper),
            "degenerate": False,
        })

    if n_degenerate:
        warnings.warn(
            f"{n_degenerate} of {len(windows)} window(s) have zero infectivity; "
            f"Rt is undefined there and reported with an interval of [0, inf)",
            RuntimeWarning,
            stacklevel=2,
        )

    return pd.DataFrame.from_records(records, columns=RT_COLUMNS)


def estimate_rt_by_region(
        table: pd.DataFrame,
        config: RtConfig,
        date_col: Optional[str] = None,
        fill_gaps: bool = False,
) -> Dict[str, pd.DataFrame]:
    """
    Estimate Rt separately for every geography column of a wide
    daily table. Each column is cleaned with prepare_incidence
    (leading zeros trimmed) and gets its own default windows.
    A region whose data cannot be estimated (no cases, too few days,
    gaps) is left out of the result with a RuntimeWarning naming it.
    """
    results = {}
    for region, series in split_geographies(table, date_col=date_col).items():
        try:
            clean = prepare_incidence(series, fill_gaps=fill_gaps)
            results[region] = estimate_rt(clean, config)
        except ValueError as err:
            warnings.warn(f"{region}: {err}; region skipped", RuntimeWarning, stacklevel=2)
    return results
