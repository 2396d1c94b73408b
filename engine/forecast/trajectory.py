"""
Linear trajectory forecasting: ordinary least squares of value on position, extrapolated over the horizon with a constant confidence margin derived from the in-sample residual standard error.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import numpy as np

from api.requests import ForecastConfig
from api.responses import ForecastResult
from engine import stats
from engine.forecast import metrics, seasonality
from engine.series import prepare, require_positive
from config import settings

log = logging.getLogger(__name__)


def forecast(data: Iterable[Any], config: ForecastConfig) -> ForecastResult:
    horizon = metrics.horizon_of(config)
    confidence = metrics.confidence_of(config)
    period = require_positive("seasonal_period", config.seasonal_period, settings.seasonal_period)
    points, arr = prepare(data, min_points=settings.forecast_min_points, purpose="linear forecast")

    n = arr.size
    fit = stats.index_regression(arr)
    fitted = fit.slope * np.arange(n, dtype=float) + fit.intercept
    # n - 2 degrees of freedom; a two point line has no residual spread to measure
    std_err = metrics.residual_std(arr - fitted, dof=n - 2) if n > 2 else 0.0
    margin = metrics.z_for_confidence(confidence) * std_err

    predictions = [fit.predict(n + h) for h in range(horizon)]
    log.debug("linear: n=%d slope=%.4f r2=%.3f std_err=%.4f", n, fit.slope, fit.r_squared, std_err)

    return ForecastResult(
        forecast=metrics.build_points(points, predictions, [margin] * horizon, confidence),
        accuracy=metrics.accuracy(arr, fitted),
        trend=metrics.label_slope(fit.slope),
        seasonality=seasonality.classify(arr, period),
    )
