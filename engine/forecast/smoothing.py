"""
Holt's two-parameter exponential smoothing: recursive level and trend estimates extrapolated over the horizon, with a confidence margin that widens with the square root of the steps ahead.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

import numpy as np

from api.requests import ForecastConfig
from api.responses import ForecastResult
from engine.forecast import metrics, seasonality
from engine.series import prepare, require_positive
from config import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoltState:
    level: float
    trend: float
    smoothed: np.ndarray


def holt(vals: Sequence[float], alpha: float | None = None, beta: float | None = None) -> HoltState:
    if alpha is None:
        alpha = settings.holt_alpha
    if beta is None:
        beta = settings.holt_beta
    arr = np.asarray(vals, dtype=float)
    level = float(arr[0])
    trend = 0.0
    smoothed = np.zeros(arr.size)
    smoothed[0] = level
    for i in range(1, arr.size):
        prev_level = level
        level = alpha * arr[i] + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend
        smoothed[i] = level
    return HoltState(level=level, trend=trend, smoothed=smoothed)


def forecast(data: Iterable[Any], config: ForecastConfig) -> ForecastResult:
    horizon = metrics.horizon_of(config)
    confidence = metrics.confidence_of(config)
    period = require_positive("seasonal_period", config.seasonal_period, settings.seasonal_period)
    points, arr = prepare(data, min_points=settings.forecast_min_points, purpose="exponential forecast")

    state = holt(arr)
    std_err = metrics.residual_std(arr - state.smoothed)
    z = metrics.z_for_confidence(confidence)

    predictions: List[float] = []
    margins: List[float] = []
    for h in range(horizon):
        predictions.append(state.level + (h + 1) * state.trend)
        margins.append(z * std_err * math.sqrt(h + 1))

    log.debug("exponential: n=%d level=%.4f trend=%.4f", arr.size, state.level, state.trend)
    return ForecastResult(
        forecast=metrics.build_points(points, predictions, margins, confidence),
        accuracy=metrics.accuracy(arr, state.smoothed),
        trend=metrics.label_slope(state.trend),
        seasonality=seasonality.classify(arr, period),
    )
