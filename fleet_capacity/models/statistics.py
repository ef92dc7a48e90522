"""
Statistics Summarizer
=====================
Các phép reduce thuần tuý: mean, population std, centroid.

Không gọi với series rỗng: caller phải guard (qua kết quả của aligner).
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class SeriesSummary:
    """Mean, population std và số điểm của một series."""
    mean: float
    std: float
    count: int


def _as_array(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float).ravel()
    if arr.size == 0:
        raise ValueError("cannot summarize an empty series")
    return arr


def mean(values: Sequence[float]) -> float:
    return float(np.mean(_as_array(values)))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0)."""
    return float(np.std(_as_array(values), ddof=0))


def centroid(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float]:
    """
    Centroid (x̄, ȳ) của tập điểm.

    Centroid luôn nằm trên đường OLS regression.
    """
    x = _as_array(x)
    y = _as_array(y)
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same length ({len(x)} != {len(y)})")
    return float(x.mean()), float(y.mean())


def summarize(values: Sequence[float]) -> SeriesSummary:
    arr = _as_array(values)
    return SeriesSummary(mean=float(arr.mean()), std=float(arr.std(ddof=0)), count=int(arr.size))
