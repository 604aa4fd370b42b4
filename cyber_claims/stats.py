"""
Shared numeric helpers.

``percentile_cont`` is the single percentile implementation used by both the
aggregation engine and the discrepancy detector, so thresholds and group
statistics always agree.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

import numpy as np
import pandas as pd

from .errors import InvalidFieldError, NoDataError
from .schemas import StatsRecord

Numbers = Union[Sequence[float], np.ndarray, pd.Series, Iterable[float]]


def _clean_values(values: Numbers) -> np.ndarray:
    if not hasattr(values, "__array__"):
        values = list(values)
    arr = np.asarray(values, dtype=float)
    return arr[~np.isnan(arr)]


def percentile_cont(values: Numbers, p: float) -> float:
    """Continuous percentile with linear interpolation between closest ranks.

    rank = p * (n - 1); the result lies between the values at floor(rank)
    and ceil(rank) of the sorted input. Nulls are ignored.
    """
    if not 0.0 <= p <= 1.0:
        raise InvalidFieldError(f"percentile must be within [0, 1], got {p}")

    arr = np.sort(_clean_values(values))
    n = arr.size
    if n == 0:
        raise NoDataError("percentile of an empty group is undefined")
    if n == 1:
        return float(arr[0])

    rank = p * (n - 1)
    lo = int(np.floor(rank))
    hi = int(np.ceil(rank))
    frac = rank - lo
    return float(arr[lo] + (arr[hi] - arr[lo]) * frac)


def describe(values: Numbers) -> StatsRecord:
    """Count, sum, mean, extremes and percentiles of a numeric group."""
    arr = _clean_values(values)
    if arr.size == 0:
        raise NoDataError("cannot aggregate an empty group")

    return StatsRecord(
        count=int(arr.size),
        sum=float(arr.sum()),
        mean=float(arr.mean()),
        min=float(arr.min()),
        max=float(arr.max()),
        median=percentile_cont(arr, 0.50),
        p10=percentile_cont(arr, 0.10),
        p90=percentile_cont(arr, 0.90),
        p95=percentile_cont(arr, 0.95),
    )
