from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: Optional[datetime] = None
    value: float
    label: Optional[str] = None


class DetectionConfig(BaseModel):
    method: Optional[str] = None
    sensitivity: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    lookback_window: Optional[int] = None
    seasonal_period: Optional[int] = None
    min_anomaly_score: Optional[float] = Field(default=None, gt=0.0)


class ForecastConfig(BaseModel):
    method: Optional[str] = None
    horizon: int
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    seasonal_period: Optional[int] = None


class RiskThresholds(BaseModel):
    critical: Optional[float] = None
    warning: Optional[float] = None


class AnalyzeRequest(BaseModel):
    name: str = "series"
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    forecast: Optional[ForecastConfig] = None
    thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
