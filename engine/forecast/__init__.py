"""
Forecasting logic for numeric series: linear trajectory, Holt's exponential smoothing and seasonal decomposition, each producing point forecasts with confidence bounds and in-sample accuracy, plus autocorrelation based seasonality detection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from engine.forecast.forecaster import forecast
from engine.forecast.seasonality import detect_seasonality

__all__ = ["forecast", "detect_seasonality"]
