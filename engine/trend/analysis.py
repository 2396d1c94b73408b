"""
Trend analysis for a numeric series: least squares slope and goodness of fit, change rate relative to the mean, volatility of period-over-period relative changes, and short-horizon projections along the fitted line.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Sequence

import numpy as np

from api.responses import Projections, TrendAnalysis
from engine import stats
from engine.enums import TrendDirection
from engine.exceptions import InvalidArgumentError
from engine.series import prepare
from config import settings

log = logging.getLogger(__name__)


def _direction(slope: float) -> TrendDirection:
    # sign only; the stable band belongs to forecast labels
    if slope > 0:
        return TrendDirection.up
    if slope < 0:
        return TrendDirection.down
    return TrendDirection.flat


def _volatility(arr: np.ndarray) -> float:
    """Root mean square of relative step changes, in percent."""
    prev = arr[:-1]
    if prev.size == 0:
        return 0.0
    zero_at = np.flatnonzero(prev == 0)
    if zero_at.size:
        raise InvalidArgumentError(
            f"volatility is undefined: value at index {int(zero_at[0])} is zero"
        )
    changes = np.diff(arr) / prev
    return float(math.sqrt(float(np.mean(changes ** 2))) * 100)


def _change_rate(slope: float, vals: Sequence[float]) -> float:
    mu = stats.mean(vals)
    if mu == 0:
        log.warning("trend: series mean is zero, change rate reported as 0")
        return 0.0
    return slope / mu * 100


def analyze(data: Iterable[Any]) -> TrendAnalysis:
    _, arr = prepare(data, min_points=settings.trend_min_points, purpose="trend analysis")

    fit = stats.index_regression(arr)
    last = arr.size - 1

    return TrendAnalysis(
        direction=_direction(fit.slope),
        slope=fit.slope,
        r_squared=fit.r_squared,
        change_rate=_change_rate(fit.slope, arr),
        volatility=_volatility(arr),
        projections=Projections(
            next_period=fit.predict(last + 1),
            next_5_periods=fit.predict(last + 5),
            next_10_periods=fit.predict(last + 10),
        ),
    )
