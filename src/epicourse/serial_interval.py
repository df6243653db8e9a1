"""
===========================================================
serial_interval.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Discretize a gamma-shaped serial interval, given by its
    mean and standard deviation in days, into daily weights
    w[0], w[1], ..., w[max_days] that sum to 1.

    The serial interval is shifted by one day (a gamma with
    mean-1 and the same std, plus one), so w[0] = 0: nobody
    infects a secondary case on the day they were infected.

Notes:
    - Follows Cori et al. (2013), Web Appendix 11.
    - mean must be > 1 day for the one-day offset to exist.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
from typing import Tuple

import numpy as np
from scipy.stats import gamma as gamma_dist


def _gamma_cdf(k: np.ndarray, shape: float, scale: float) -> np.ndarray:
    # zero below the support so that k-1 and k-2 may go negative
    return np.where(k > 0, gamma_dist.cdf(np.clip(k, 0, None), a=shape, scale=scale), 0.0)


def discretize_serial_interval(mean: float, std: float, max_days: int) -> np.ndarray:
    """
    Daily serial interval weights from a one-day-offset gamma distribution.

    Parameters
    ----------
    mean : float
        Mean serial interval in days (> 1)
    std : float
        Standard deviation of the serial interval in days (> 0)
    max_days : int
        Largest lag kept; the output has max_days+1 entries

    Returns
    -------
    w : np.ndarray
        w[k] is the probability that the serial interval is k days,
        w[0] == 0, renormalized to sum to 1 over 0..max_days
    """
    if not np.isfinite(mean) or mean <= 1:
        raise ValueError(f"serial interval mean must be > 1 day, got {mean}")
    if not np.isfinite(std) or std <= 0:
        raise ValueError(f"serial interval std must be positive, got {std}")
    if int(max_days) != max_days or max_days < 1:
        raise ValueError(f"max_days must be a positive integer, got {max_days}")

    shape = ((mean - 1.0) / std) ** 2
    scale = std ** 2 / (mean - 1.0)

    k = np.arange(int(max_days) + 1, dtype=float)
    w = (k * _gamma_cdf(k, shape, scale)
         + (k - 2) * _gamma_cdf(k - 2, shape, scale)
         - 2 * (k - 1) * _gamma_cdf(k - 1, shape, scale))
    w += shape * scale * (2 * _gamma_cdf(k - 1, shape + 1, scale)
                          - _gamma_cdf(k - 2, shape + 1, scale)
                          - _gamma_cdf(k, shape + 1, scale))
    w = np.clip(w, 0.0, None)
    w[0] = 0.0

    total = w.sum()
    if total <= 0:
        raise ValueError(
            f"serial interval (mean={mean}, std={std}) has no mass within {max_days} days"
        )
    return w / total


def serial_interval_moments(w: np.ndarray) -> Tuple[float, float]:
    """Mean and standard deviation of a discrete serial interval"""
    w = np.asarray(w, dtype=float)
    k = np.arange(w.size)
    p = w / w.sum()
    mean = float(np.sum(k * p))
    std = float(np.sqrt(np.sum((k - mean) ** 2 * p)))
    return mean, std
