"""
Engine Packages for the TaskPulse Analytics Engine

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.enums import (
    AnomalyType,
    DetectionMethod,
    ForecastMethod,
    RiskLevel,
    Seasonality,
    Severity,
    TrendDirection,
    TrendLabel,
)
from engine.exceptions import AnalyticsError, InsufficientDataError, InvalidArgumentError

__all__ = [
    "AnomalyType",
    "DetectionMethod",
    "ForecastMethod",
    "RiskLevel",
    "Seasonality",
    "Severity",
    "TrendDirection",
    "TrendLabel",
    "AnalyticsError",
    "InsufficientDataError",
    "InvalidArgumentError",
]
