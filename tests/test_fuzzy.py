"""
Test cases for fuzzy testing of the analytics engine: detectors, forecasters, trend analysis, risk scoring and the analyzer are driven with randomized series to check the invariants that must hold for any input, such as finite outputs, ordered bounds, score ranges and monotonic sensitivity.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import math
import random

import pytest

from api.requests import DetectionConfig, ForecastConfig, RiskThresholds
from engine.analyzer import analyze
from engine.anomaly import (
    ensemble_detection,
    iqr_detection,
    mad_detection,
    moving_average_detection,
    z_score_detection,
)
from engine.forecast import forecast
from engine.risk import score_risk
from engine.trend import analyze_trend


def random_series(seed, low=10, high=80):
    random.seed(seed)
    length = random.randint(low, high)
    vals = [random.random() * 100 + 1 for _ in range(length)]
    if length > 5:
        vals[random.randrange(length)] += random.choice([150, 300])
    return vals


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_detectors_shape(seed):
    vals = random_series(seed)
    for fn in (z_score_detection, iqr_detection, moving_average_detection, mad_detection):
        res = fn(vals)
        assert res.total_data_points == len(vals)
        assert res.anomaly_count == len(res.anomalies)
        assert 0.0 <= res.anomaly_rate <= 1.0
        indices = [a.index for a in res.anomalies]
        assert indices == sorted(set(indices))
        for a in res.anomalies:
            assert 0 <= a.index < len(vals)
            assert 0.0 <= a.confidence <= 1.0
            assert math.isfinite(a.expected_value) and math.isfinite(a.deviation)
        counts = res.severity_counts
        assert counts.low + counts.medium + counts.high + counts.critical == res.anomaly_count


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_zscore_sensitivity_monotonic(seed):
    vals = random_series(seed)
    previous = set()
    for s in (0.0, 0.25, 0.5, 0.75, 1.0):
        flagged = {a.index for a in z_score_detection(vals, DetectionConfig(sensitivity=s)).anomalies}
        assert previous <= flagged
        previous = flagged


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_iqr_flags_only_outside_bounds(seed):
    vals = random_series(seed)
    res = iqr_detection(vals)
    flagged = {a.index for a in res.anomalies}
    for i, v in enumerate(vals):
        inside = res.normal_range.min <= v <= res.normal_range.max
        assert (i in flagged) != inside


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_ensemble_within_zscore(seed):
    vals = random_series(seed)
    consensus = {a.index for a in ensemble_detection(vals).anomalies}
    primary = {a.index for a in z_score_detection(vals).anomalies}
    assert consensus <= primary


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("method", ["linear", "exponential", "seasonal"])
@pytest.mark.parametrize("horizon", [1, 5, 20])
def test_fuzzy_forecast_bounds(seed, method, horizon):
    vals = random_series(seed, low=14)
    res = forecast(vals, ForecastConfig(method=method, horizon=horizon, seasonal_period=7))
    assert len(res.forecast) == horizon
    for p in res.forecast:
        assert math.isfinite(p.value)
        assert p.lower_bound <= p.value <= p.upper_bound
    assert res.accuracy.mape >= 0 and res.accuracy.rmse >= 0 and res.accuracy.mae >= 0


@pytest.mark.parametrize("seed", range(5))
def test_fuzzy_linear_forecast_exact_on_lines(seed):
    random.seed(seed)
    slope = random.uniform(-5, 5)
    intercept = random.uniform(-50, 50)
    length = random.randint(3, 40)
    vals = [slope * i + intercept for i in range(length)]
    res = forecast(vals, ForecastConfig(horizon=4))
    expected = [slope * (length + h) + intercept for h in range(4)]
    assert [p.value for p in res.forecast] == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_trend_and_risk(seed):
    vals = random_series(seed)
    trend = analyze_trend(vals)
    assert 0.0 <= trend.r_squared <= 1.0 + 1e-9
    assert trend.volatility >= 0
    random.seed(seed)
    thresholds = RiskThresholds(critical=random.random() * 100, warning=random.random() * 150)
    res = score_risk(vals, thresholds, trend=trend)
    assert 0.0 <= res.score <= 100.0
    assert all(-1.0 <= f.impact <= 1.0 for f in res.factors)


@pytest.mark.parametrize("seed", range(5))
def test_fuzzy_analyzer(seed):
    vals = random_series(seed, low=1, high=60)
    report = analyze(vals)
    assert report.total_data_points == len(vals)
    assert report.summary
    if len(vals) >= 2:
        assert report.trend is not None


@pytest.mark.parametrize("seed", range(8))
def test_fuzzy_monotone_trend_sign(seed):
    random.seed(seed)
    length = random.randint(2, 40)
    scale = 10 ** random.randint(-4, 2)
    rising = [1.0]
    for _ in range(length - 1):
        rising.append(rising[-1] + random.uniform(0.1, 1.0) * scale)
    assert analyze_trend(rising).direction.value == "up"
    assert analyze_trend(rising[::-1]).direction.value == "down"
