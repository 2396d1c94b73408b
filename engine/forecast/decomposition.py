"""
Seasonal decomposition forecasting: a centered moving-average trend plus per-phase seasonal offsets; the trend is extrapolated from a linear fit over its most recent values and the seasonal offset for each future phase is added back.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

import numpy as np

from api.requests import ForecastConfig
from api.responses import ForecastResult
from engine import stats
from engine.forecast import metrics, seasonality
from engine.series import prepare, require_positive
from config import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decomposition:
    trend: np.ndarray
    seasonal: np.ndarray
    residuals: np.ndarray

    def fitted(self) -> np.ndarray:
        period = self.seasonal.size
        phases = np.arange(self.trend.size) % period
        return self.trend + self.seasonal[phases]


def centered_trend(vals: Sequence[float], period: int) -> np.ndarray:
    """Centered moving average; edges without a full window keep the raw value."""
    arr = np.asarray(vals, dtype=float)
    half = period // 2
    trend = arr.copy()
    for i in range(half, arr.size - half):
        trend[i] = arr[i - half:i + half + 1].mean()
    return trend


def decompose(vals: Sequence[float], period: int) -> Decomposition:
    arr = np.asarray(vals, dtype=float)
    trend = centered_trend(arr, period)
    detrended = arr - trend
    seasonal = np.array([
        detrended[p::period].mean() if detrended[p::period].size else 0.0
        for p in range(period)
    ])
    residuals = arr - trend - seasonal[np.arange(arr.size) % period]
    return Decomposition(trend=trend, seasonal=seasonal, residuals=residuals)


def extrapolate_trend(trend: Sequence[float], horizon: int, tail: int | None = None) -> List[float]:
    if tail is None:
        tail = settings.seasonal_trend_tail
    arr = np.asarray(trend, dtype=float)
    slope = stats.index_regression(arr[-tail:]).slope
    last = float(arr[-1])
    return [last + slope * (h + 1) for h in range(horizon)]


def forecast(data: Iterable[Any], config: ForecastConfig) -> ForecastResult:
    horizon = metrics.horizon_of(config)
    confidence = metrics.confidence_of(config)
    period = require_positive("seasonal_period", config.seasonal_period, settings.seasonal_period)
    points, arr = prepare(
        data,
        min_points=max(period, settings.forecast_min_points),
        purpose="seasonal forecast",
    )

    parts = decompose(arr, period)
    trend_forecast = extrapolate_trend(parts.trend, horizon)
    n = arr.size
    predictions = [trend_forecast[h] + parts.seasonal[(n + h) % period] for h in range(horizon)]
    margin = metrics.z_for_confidence(confidence) * metrics.residual_std(parts.residuals)

    log.debug("seasonal: n=%d period=%d seasonal_amplitude=%.4f", n, period, float(np.ptp(parts.seasonal)))
    return ForecastResult(
        forecast=metrics.build_points(points, predictions, [margin] * horizon, confidence),
        accuracy=metrics.accuracy(arr, parts.fitted()),
        trend=metrics.label_slope(stats.index_regression(parts.trend).slope),
        seasonality=seasonality.classify(arr, period),
    )
