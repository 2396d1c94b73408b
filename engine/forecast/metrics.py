"""
Shared forecasting helpers: confidence level to z lookup, in-sample accuracy metrics (MAPE, MAE, RMSE), trend labelling and assembly of forecast points with their confidence bounds.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from api.requests import DataPoint, ForecastConfig
from api.responses import ForecastAccuracy, ForecastPoint
from engine.enums import TrendLabel
from engine.exceptions import InvalidArgumentError
from engine.series import future_timestamp
from config import settings

log = logging.getLogger(__name__)


def z_for_confidence(confidence: float) -> float:
    for minimum, z in settings.forecast_confidence_z:
        if confidence >= minimum:
            return z
    return settings.forecast_default_z


def horizon_of(config: ForecastConfig) -> int:
    if config.horizon < 1:
        raise InvalidArgumentError(f"forecast horizon must be >= 1, got {config.horizon}")
    return int(config.horizon)


def confidence_of(config: ForecastConfig) -> float:
    if config.confidence is None:
        return settings.forecast_default_confidence
    return float(config.confidence)


def label_slope(slope: float, deadband: float | None = None) -> TrendLabel:
    if deadband is None:
        deadband = settings.trend_deadband
    if slope > deadband:
        return TrendLabel.increasing
    if slope < -deadband:
        return TrendLabel.decreasing
    return TrendLabel.stable


def accuracy(actual: Sequence[float], predicted: Sequence[float]) -> ForecastAccuracy:
    """In-sample fit quality. MAPE is averaged over non-zero actuals only."""
    a = np.asarray(actual, dtype=float)
    p = np.asarray(predicted, dtype=float)
    n = min(a.size, p.size)
    if n == 0:
        return ForecastAccuracy(mape=0.0, rmse=0.0, mae=0.0, mape_points=0)
    a, p = a[:n], p[:n]
    errors = a - p

    nonzero = a != 0
    mape_points = int(nonzero.sum())
    if mape_points < n:
        log.warning(
            "accuracy: %d of %d actual values are zero, MAPE computed over the remaining %d",
            n - mape_points, n, mape_points,
        )
    mape = float(np.mean(np.abs(errors[nonzero] / a[nonzero])) * 100) if mape_points else 0.0

    return ForecastAccuracy(
        mape=mape,
        mae=float(np.mean(np.abs(errors))),
        rmse=float(math.sqrt(np.mean(errors ** 2))),
        mape_points=mape_points,
    )


def build_points(
    points: List[DataPoint],
    predictions: Sequence[float],
    margins: Sequence[float],
    confidence: float,
) -> List[ForecastPoint]:
    out: List[ForecastPoint] = []
    for h, (value, margin) in enumerate(zip(predictions, margins)):
        margin = abs(float(margin))
        value = float(value)
        out.append(ForecastPoint(
            timestamp=future_timestamp(points, h),
            value=value,
            lower_bound=value - margin,
            upper_bound=value + margin,
            confidence=confidence,
        ))
    return out


def residual_std(residuals: Sequence[float], dof: Optional[int] = None) -> float:
    r = np.asarray(residuals, dtype=float)
    if r.size == 0:
        return 0.0
    denom = r.size if dof is None else dof
    if denom <= 0:
        return 0.0
    return float(math.sqrt(float(np.sum(r ** 2)) / denom))
