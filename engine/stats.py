"""
Primitive numeric routines shared by the detectors, forecasters and the trend analyzer: central tendency, spread, quartiles, smoothing and least squares fits. Every routine is pure and returns a neutral value on empty input instead of raising.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.stats import linregress


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q2: float
    q3: float
    iqr: float


@dataclass(frozen=True)
class Regression:
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def _arr(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def mean(values: Sequence[float]) -> float:
    arr = _arr(values)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N)."""
    arr = _arr(values)
    if arr.size == 0:
        return 0.0
    return float(arr.std())


def median(values: Sequence[float]) -> float:
    arr = _arr(values)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def quartiles(values: Sequence[float]) -> Quartiles:
    """Q1/Q3 are medians of the lower and upper halves; the middle element is
    left out of both halves when the length is odd. A single value is its own
    quartiles."""
    ordered = np.sort(_arr(values))
    mid = ordered.size // 2
    q2 = median(ordered)
    lower = ordered[:mid]
    upper = ordered[mid + ordered.size % 2:]
    q1 = median(lower) if lower.size else q2
    q3 = median(upper) if upper.size else q2
    return Quartiles(q1=q1, q2=q2, q3=q3, iqr=q3 - q1)


def z_score(value: float, mu: float, sigma: float) -> float:
    if sigma == 0:
        return 0.0
    return (value - mu) / sigma


def z_scores(values: Sequence[float], mu: float, sigma: float) -> np.ndarray:
    arr = _arr(values)
    if sigma == 0:
        return np.zeros_like(arr)
    return (arr - mu) / sigma


def moving_average(values: Sequence[float], window: int) -> np.ndarray:
    """Trailing average of the last min(window, i+1) values at each index."""
    arr = _arr(values)
    if arr.size == 0:
        return arr
    window = max(1, int(window))
    csum = np.concatenate(([0.0], np.cumsum(arr)))
    idx = np.arange(arr.size)
    start = np.maximum(0, idx - window + 1)
    return (csum[idx + 1] - csum[start]) / (idx + 1 - start)


def ema(values: Sequence[float], period: int) -> np.ndarray:
    arr = _arr(values)
    if arr.size == 0:
        return arr
    k = 2.0 / (period + 1)
    result = np.zeros(arr.size)
    result[0] = arr[0]
    for i in range(1, arr.size):
        result[i] = arr[i] * k + result[i - 1] * (1 - k)
    return result


def mad(values: Sequence[float]) -> float:
    arr = _arr(values)
    if arr.size == 0:
        return 0.0
    return float(np.median(np.abs(arr - np.median(arr))))


def linear_regression(x: Sequence[float], y: Sequence[float]) -> Regression:
    xs = _arr(x)
    ys = _arr(y)
    if ys.size == 0:
        return Regression(slope=0.0, intercept=0.0, r_squared=0.0)
    if ys.size < 2 or np.all(xs == xs[0]) or np.all(ys == ys[0]):
        return Regression(slope=0.0, intercept=float(ys.mean()), r_squared=0.0)
    res = linregress(xs, ys)
    return Regression(
        slope=float(res.slope),
        intercept=float(res.intercept),
        r_squared=float(res.rvalue) ** 2,
    )


def index_regression(values: Sequence[float]) -> Regression:
    """Least squares fit of value on integer position 0..n-1."""
    ys = _arr(values)
    return linear_regression(np.arange(ys.size, dtype=float), ys)


def autocorrelation(values: Sequence[float], lag: int) -> float:
    arr = _arr(values)
    n = arr.size
    if n == 0 or lag >= n or lag < 0:
        return 0.0
    centered = arr - arr.mean()
    denominator = float(np.sum(centered ** 2))
    if denominator == 0:
        return 0.0
    numerator = float(np.sum(centered[: n - lag] * centered[lag:]))
    return numerator / denominator
