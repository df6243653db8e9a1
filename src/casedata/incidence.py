"""
===========================================================
incidence.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Turn a table of daily case counts into the clean,
    gap-free, non-negative integer series the Rt estimator
    needs: one series per geography, sorted by date, with
    the leading run of zeros (days before the first case)
    removed.

Notes:
    - Reading the CSV is left to the caller (pd.read_csv).
    - Missing calendar days are an error unless fill_gaps=True,
      in which case they become explicit zeros.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd


def check_counts(values: np.ndarray, name: str = "incidence") -> np.ndarray:
    """Return values as int64 after checking they are finite, integral and >= 0"""
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains missing or non-finite values")
    if np.any(arr < 0):
        first = int(np.argmax(arr < 0))
        raise ValueError(f"{name} must be non-negative (position {first} is {arr[first]:g})")
    if np.any(arr != np.round(arr)):
        first = int(np.argmax(arr != np.round(arr)))
        raise ValueError(f"{name} must hold integer counts (position {first} is {arr[first]:g})")
    return arr.astype(np.int64)


def check_daily_index(index: pd.DatetimeIndex, name: str = "incidence") -> None:
    """Raise if a date index is unsorted, duplicated or skips a calendar day"""
    if index.has_duplicates:
        dup = index[index.duplicated()][0]
        raise ValueError(f"{name} has duplicate date {dup.date()}")
    if not index.is_monotonic_increasing:
        raise ValueError(f"{name} dates must be sorted in increasing order")
    if len(index) < 2:
        return
    expected = pd.date_range(index[0], index[-1], freq="D")
    if len(expected) != len(index):
        missing = expected.difference(index)
        raise ValueError(
            f"{name} skips {len(missing)} calendar day(s), first missing {missing[0].date()}; "
            f"fill them with 0 instead of dropping them"
        )


def prepare_incidence(
        series: pd.Series,
        fill_gaps: bool = False,
        trim_leading_zeros: bool = True,
) -> pd.Series:
    """
    Clean one geography's daily incidence.

    Parameters
    ----------
    series : pd.Series
        Case counts indexed by date (anything pd.to_datetime accepts)
    fill_gaps : bool
        Insert missing calendar days as 0 instead of raising
    trim_leading_zeros : bool
        Drop the run of zero days before the first reported case

    Returns
    -------
    pd.Series
        int64 counts on a contiguous daily DatetimeIndex named 'date'
    """
    name = series.name if series.name is not None else "incidence"
    counts = check_counts(series.to_numpy(), name=str(name))
    index = pd.DatetimeIndex(pd.to_datetime(series.index)).normalize()
    clean = pd.Series(counts, index=index, name=series.name).sort_index()

    if clean.index.has_duplicates:
        dup = clean.index[clean.index.duplicated()][0]
        raise ValueError(f"{name} has duplicate date {dup.date()}")

    if fill_gaps and len(clean) > 1:
        full = pd.date_range(clean.index[0], clean.index[-1], freq="D")
        clean = clean.reindex(full, fill_value=0).astype(np.int64)
    check_daily_index(clean.index, name=str(name))

    if trim_leading_zeros:
        nonzero = np.flatnonzero(clean.to_numpy())
        if nonzero.size == 0:
            raise ValueError(f"{name} has no reported cases")
        clean = clean.iloc[nonzero[0]:]

    clean.index.name = "date"
    return clean


def split_geographies(
        table: pd.DataFrame,
        date_col: Optional[str] = None,
        columns: Optional[Sequence[str]] = None,
) -> Dict[str, pd.Series]:
    """
    Split a wide table (one incidence column per geography) into
    a dict of per-geography series keyed by column name.
    """
    df = table.set_index(date_col) if date_col is not None else table
    selected = list(columns) if columns is not None else list(df.columns)
    unknown = [c for c in selected if c not in df.columns]
    if unknown:
        raise KeyError(f"Columns not found: {unknown}. Available: {list(df.columns)}")
    return {str(col): df[col] for col in selected}


def to_daily_index(values, start: str = "2020-01-01", name: str = "incidence") -> pd.Series:
    """Put a plain array of daily counts on a daily DatetimeIndex starting at `start`"""
    counts = check_counts(values, name=name)
    index = pd.date_range(pd.to_datetime(start), periods=counts.size, freq="D", name="date")
    return pd.Series(counts, index=index, name=name)
