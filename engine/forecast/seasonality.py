"""
Seasonality detection from the autocorrelation function of a series, and classification of seasonal strength at a configured period.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Sequence

import numpy as np

from api.responses import SeasonalityPeak, SeasonalityReport
from engine import stats
from engine.enums import Seasonality
from engine.series import prepare, require_positive
from config import settings

log = logging.getLogger(__name__)


def classify(values: Sequence[float], period: int) -> Seasonality:
    arr = np.asarray(values, dtype=float)
    if period < 2 or arr.size <= period:
        return Seasonality.none
    # a linear trend alone autocorrelates at every lag
    fit = stats.index_regression(arr)
    detrended = arr - (fit.slope * np.arange(arr.size) + fit.intercept)
    spread = float(np.sum((arr - arr.mean()) ** 2))
    if float(np.sum(detrended ** 2)) <= 1e-12 * max(spread, 1.0):
        return Seasonality.none
    acf = stats.autocorrelation(detrended, period)
    if acf >= settings.seasonality_strong:
        return Seasonality.strong
    if acf >= settings.seasonality_weak:
        return Seasonality.weak
    return Seasonality.none


def detect_seasonality(data: Iterable[Any], period: int | None = None) -> SeasonalityReport:
    if period is None:
        period = settings.seasonal_period
    period = require_positive("seasonal_period", period)
    _, arr = prepare(data, purpose="seasonality detection")

    if arr.size < period * settings.seasonality_min_cycles:
        log.debug(
            "seasonality: %d points is fewer than %d cycles of period %d",
            arr.size, settings.seasonality_min_cycles, period,
        )
        return SeasonalityReport(detected=False, period=0, strength=0.0)

    max_lag = min(settings.seasonality_max_lag, arr.size // 3)
    peaks: List[SeasonalityPeak] = []
    for lag in range(1, max_lag + 1):
        correlation = stats.autocorrelation(arr, lag)
        if correlation > settings.seasonality_peak_correlation:
            peaks.append(SeasonalityPeak(lag=lag, correlation=correlation))

    if not peaks:
        return SeasonalityReport(detected=False, period=0, strength=0.0)

    peaks.sort(key=lambda p: p.correlation, reverse=True)
    strongest = peaks[0]
    return SeasonalityReport(
        detected=True,
        period=strongest.lag,
        strength=strongest.correlation,
        peaks=peaks[: settings.seasonality_top_peaks],
    )
