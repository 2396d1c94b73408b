"""
Test cases for forecasting: linear trajectory, Holt's exponential smoothing and seasonal decomposition forecasts, their confidence bounds, in-sample accuracy, trend and seasonality labels, and autocorrelation based seasonality detection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import timedelta

import numpy as np
import pytest

from api.requests import ForecastConfig
from engine.enums import Seasonality, TrendLabel
from engine.exceptions import InsufficientDataError, InvalidArgumentError
from engine.forecast import detect_seasonality, forecast
from engine.forecast import decomposition, metrics, seasonality, smoothing
from engine.series import coerce_points


def test_z_for_confidence():
    assert metrics.z_for_confidence(0.99) == 2.576
    assert metrics.z_for_confidence(0.95) == 1.96
    assert metrics.z_for_confidence(0.9) == 1.645
    assert metrics.z_for_confidence(0.5) == 1.96


def test_label_slope_deadband():
    assert metrics.label_slope(0.5) == TrendLabel.increasing
    assert metrics.label_slope(-0.5) == TrendLabel.decreasing
    assert metrics.label_slope(0.005) == TrendLabel.stable
    assert metrics.label_slope(0.005, deadband=0.001) == TrendLabel.increasing


def test_accuracy_skips_zero_actuals():
    acc = metrics.accuracy([0, 2], [1, 1])
    assert acc.mape == pytest.approx(50.0)
    assert acc.mape_points == 1
    assert acc.mae == pytest.approx(1.0)
    assert acc.rmse == pytest.approx(1.0)


def test_accuracy_all_zero_actuals():
    acc = metrics.accuracy([0, 0], [1, -1])
    assert acc.mape == 0.0
    assert acc.mape_points == 0
    assert acc.mae == pytest.approx(1.0)


def test_linear_exact_line():
    vals = [3 * i + 7 for i in range(10)]
    res = forecast(vals, ForecastConfig(method="linear", horizon=3))
    assert [p.value for p in res.forecast] == pytest.approx([37.0, 40.0, 43.0])
    for p in res.forecast:
        assert p.upper_bound - p.lower_bound == pytest.approx(0.0, abs=1e-6)
        assert p.confidence == 0.95
    assert res.accuracy.mape == pytest.approx(0.0, abs=1e-9)
    assert res.accuracy.rmse == pytest.approx(0.0, abs=1e-9)
    assert res.trend == TrendLabel.increasing
    assert res.seasonality == Seasonality.none


def test_linear_bounds_are_constant_and_contain_value(noisy_series):
    res = forecast(noisy_series, ForecastConfig(horizon=5, confidence=0.99))
    widths = [p.upper_bound - p.lower_bound for p in res.forecast]
    assert widths == pytest.approx([widths[0]] * 5)
    assert widths[0] > 0
    assert all(p.lower_bound <= p.value <= p.upper_bound for p in res.forecast)
    assert all(p.timestamp is None for p in res.forecast)


def test_linear_two_points():
    res = forecast([1, 3], ForecastConfig(horizon=1))
    assert res.forecast[0].value == pytest.approx(5.0)
    assert res.forecast[0].lower_bound == res.forecast[0].upper_bound


def test_linear_future_timestamps(daily_points):
    res = forecast(daily_points, ForecastConfig(horizon=2))
    last = coerce_points(daily_points)[-1].timestamp
    assert [p.timestamp for p in res.forecast] == [last + timedelta(days=1), last + timedelta(days=2)]
    assert res.forecast[0].value == pytest.approx(34.0)


def test_decreasing_and_stable_labels():
    assert forecast([10, 8, 6, 4, 2], ForecastConfig(horizon=1)).trend == TrendLabel.decreasing
    assert forecast([5, 5, 5, 5], ForecastConfig(horizon=1)).trend == TrendLabel.stable


def test_holt_recursion():
    state = smoothing.holt([1, 2])
    assert state.level == pytest.approx(1.3)
    assert state.trend == pytest.approx(0.03)
    assert state.smoothed.tolist() == pytest.approx([1.0, 1.3])


def test_exponential_forecast_widening_bounds():
    res = forecast([1, 2], ForecastConfig(method="exponential", horizon=3))
    assert [p.value for p in res.forecast] == pytest.approx([1.33, 1.36, 1.39])
    widths = [p.upper_bound - p.lower_bound for p in res.forecast]
    assert widths[0] < widths[1] < widths[2]
    assert widths[1] / widths[0] == pytest.approx(np.sqrt(2))
    assert res.trend == TrendLabel.increasing


def test_centered_trend_and_extrapolation():
    trend = decomposition.centered_trend([1, 5, 1, 5, 1], 3)
    assert trend.tolist() == pytest.approx([1.0, 7 / 3, 11 / 3, 7 / 3, 1.0])
    assert decomposition.extrapolate_trend([0, 1, 2, 3], 3) == pytest.approx([4.0, 5.0, 6.0])


def test_decompose_reconstructs_series(weekly_pattern):
    parts = decomposition.decompose(weekly_pattern, 7)
    assert parts.seasonal.size == 7
    assert (parts.fitted() + parts.residuals).tolist() == pytest.approx(weekly_pattern)


def test_seasonal_forecast(weekly_pattern):
    res = forecast(weekly_pattern, ForecastConfig(method="seasonal", horizon=7, seasonal_period=7))
    assert len(res.forecast) == 7
    assert all(np.isfinite(p.value) for p in res.forecast)
    assert all(p.lower_bound <= p.value <= p.upper_bound for p in res.forecast)
    assert res.seasonality == Seasonality.strong


def test_seasonal_forecast_needs_one_period():
    with pytest.raises(InsufficientDataError):
        forecast([1, 2, 3], ForecastConfig(method="seasonal", horizon=2, seasonal_period=7))


@pytest.mark.parametrize("method", ["linear", "exponential", "seasonal"])
def test_forecast_guards(method):
    with pytest.raises(InvalidArgumentError):
        forecast([1, 2, 3, 4, 5, 6, 7, 8], ForecastConfig(method=method, horizon=0, seasonal_period=2))
    with pytest.raises(InsufficientDataError):
        forecast([1], ForecastConfig(method=method, horizon=1, seasonal_period=1))
    # an explicit zero period is rejected, not replaced by the default
    with pytest.raises(InvalidArgumentError):
        forecast(range(1, 15), ForecastConfig(method=method, horizon=2, seasonal_period=0))


def test_classify_seasonality(weekly_pattern):
    assert seasonality.classify(weekly_pattern, 7) == Seasonality.strong
    assert seasonality.classify([1, 2, 3], 7) == Seasonality.none
    assert seasonality.classify(list(range(50)), 7) == Seasonality.none


def test_detect_seasonality(weekly_pattern):
    report = detect_seasonality(weekly_pattern, 7)
    assert report.detected is True
    assert report.period == 7
    assert report.strength == pytest.approx(0.875)
    # lags are searched up to a third of the series length
    assert [p.lag for p in report.peaks] == [7, 14]


def test_detect_seasonality_needs_cycles():
    report = detect_seasonality([10, 20, 30] * 5, 7)
    assert report.detected is False
    assert report.period == 0
    assert report.peaks == []


def test_detect_seasonality_flat():
    assert detect_seasonality([3.0] * 60).detected is False
