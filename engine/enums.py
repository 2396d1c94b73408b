"""
Enumerations for Severity, Anomaly Types, Detection and Forecast Methods, Trend Labels and Risk Levels

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from config import SEVERITY_WEIGHTS

log = logging.getLogger(__name__)


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    @classmethod
    def from_ratio(cls, score: float, threshold: float) -> Severity:
        # bands are configurable via settings so that tests and
        # runtime behaviour can be tuned without modifying this logic.
        from config import settings

        ratio = abs(score) / threshold if threshold > 0 else float("inf")
        if ratio > settings.severity_ratio_critical:
            return cls.critical
        if ratio > settings.severity_ratio_high:
            return cls.high
        if ratio > settings.severity_ratio_medium:
            return cls.medium
        return cls.low

    @classmethod
    def from_confidence(cls, confidence: float) -> Severity:
        from config import settings

        if confidence >= settings.severity_confidence_critical:
            return cls.critical
        if confidence >= settings.severity_confidence_high:
            return cls.high
        if confidence >= settings.severity_confidence_medium:
            return cls.medium
        return cls.low

    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self.value]


class AnomalyType(str, Enum):
    spike = "spike"
    drop = "drop"
    trend_change = "trend_change"
    outlier = "outlier"
    pattern_break = "pattern_break"


class DetectionMethod(str, Enum):
    zscore = "zscore"
    iqr = "iqr"
    moving_average = "moving_average"
    seasonal = "seasonal"
    trend_change = "trend_change"
    mad = "mad"
    isolation_forest = "isolation_forest"
    ensemble = "ensemble"

    @classmethod
    def resolve(cls, name: Optional[str]) -> DetectionMethod:
        if name is None:
            return cls.zscore
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            log.debug("unknown detection method %r, falling back to zscore", name)
            return cls.zscore


class ForecastMethod(str, Enum):
    linear = "linear"
    exponential = "exponential"
    seasonal = "seasonal"

    @classmethod
    def resolve(cls, name: Optional[str]) -> ForecastMethod:
        if name is None:
            return cls.linear
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            log.debug("unknown forecast method %r, falling back to linear", name)
            return cls.linear


class TrendLabel(str, Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"


class TrendDirection(str, Enum):
    up = "up"
    down = "down"
    flat = "flat"


class Seasonality(str, Enum):
    strong = "strong"
    weak = "weak"
    none = "none"


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    @classmethod
    def from_score(cls, score: float) -> RiskLevel:
        from config import settings

        if score >= settings.risk_level_critical:
            return cls.critical
        if score >= settings.risk_level_high:
            return cls.high
        if score >= settings.risk_level_medium:
            return cls.medium
        return cls.low

    def as_severity(self) -> Severity:
        return Severity(self.value)
