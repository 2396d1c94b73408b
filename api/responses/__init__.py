"""
Result models returned by the analytics engine to its callers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, List, Optional
from datetime import datetime
import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from engine.enums import (
    AnomalyType,
    RiskLevel,
    Seasonality,
    Severity,
    TrendDirection,
    TrendLabel,
)


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class NormalRange(NpModel):

    min: float
    max: float
    mean: float
    std_dev: float


class Anomaly(NpModel):
    model_config = ConfigDict(frozen=True)

    index: int
    timestamp: Optional[datetime] = None
    value: float
    expected_value: float
    deviation: float
    severity: Severity
    confidence: float = Field(ge=0.0, le=1.0)
    type: AnomalyType
    description: str


class SeverityCounts(NpModel):

    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class AnomalyDetectionResult(NpModel):

    anomalies: List[Anomaly]
    normal_range: NormalRange
    total_data_points: int
    anomaly_count: int
    anomaly_rate: float = Field(ge=0.0, le=1.0)
    severity_counts: SeverityCounts = Field(default_factory=SeverityCounts)


class ForecastPoint(NpModel):

    timestamp: Optional[datetime] = None
    value: float
    lower_bound: float
    upper_bound: float
    confidence: float


class ForecastAccuracy(NpModel):

    mape: float
    rmse: float
    mae: float
    # number of points with a non-zero actual value that MAPE was averaged over
    mape_points: int = 0


class ForecastResult(NpModel):

    forecast: List[ForecastPoint]
    accuracy: ForecastAccuracy
    trend: TrendLabel
    seasonality: Seasonality


class Projections(NpModel):

    next_period: float
    next_5_periods: float
    next_10_periods: float


class TrendAnalysis(NpModel):

    direction: TrendDirection
    slope: float
    r_squared: float
    change_rate: float
    volatility: float
    projections: Projections


class RiskFactor(NpModel):

    name: str
    impact: float = Field(ge=-1.0, le=1.0)
    description: str


class RiskScore(NpModel):

    score: float = Field(ge=0.0, le=100.0)
    level: RiskLevel
    factors: List[RiskFactor]
    recommendation: str


class SeasonalityPeak(NpModel):

    lag: int
    correlation: float


class SeasonalityReport(NpModel):

    detected: bool
    period: int
    strength: float
    peaks: List[SeasonalityPeak] = []


class SeriesReport(NpModel):

    name: str
    total_data_points: int
    detection: Optional[AnomalyDetectionResult] = None
    forecast: Optional[ForecastResult] = None
    trend: Optional[TrendAnalysis] = None
    risk: Optional[RiskScore] = None
    seasonality: Optional[SeasonalityReport] = None
    analysis_warnings: List[str] = []
    overall_severity: Severity
    summary: str


class PortfolioReport(NpModel):

    total_series: int
    series_with_anomalies: int
    total_anomalies: int
    critical_anomalies: int
    reports: List[SeriesReport]
