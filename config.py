"""
Constants and configuration for the TaskPulse analytics engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, List, Tuple

from pydantic_settings import BaseSettings


TASKPULSE_DEFAULT_SENSITIVITY: float = float(os.getenv("TASKPULSE_DEFAULT_SENSITIVITY", "0.5"))
TASKPULSE_SEASONAL_PERIOD: int = int(os.getenv("TASKPULSE_SEASONAL_PERIOD", "7"))
TASKPULSE_DEFAULT_HORIZON: int = int(os.getenv("TASKPULSE_DEFAULT_HORIZON", "7"))

# weight values assigned to severity labels for comparison and ranking
SEVERITY_WEIGHTS: dict[str, int] = {
    "low": 1,
    "medium": 2,
    "high": 4,
    "critical": 8,
}

# one fixed recommendation per risk level
RISK_RECOMMENDATIONS: Dict[str, str] = {
    "critical": "Immediate action required. Consider implementing mitigation strategies.",
    "high": "Elevated risk detected. Monitor closely and prepare contingency plans.",
    "medium": "Moderate risk. Continue monitoring and review trends regularly.",
    "low": "Low risk. Maintain current operations and monitoring practices.",
}


class Settings(BaseSettings):
    # shared detection defaults
    anomaly_default_sensitivity: float = TASKPULSE_DEFAULT_SENSITIVITY
    baseline_range_sigma: float = 2.0

    # z-score detector
    zscore_min_anomaly_score: float = 2.5
    zscore_sensitivity_scale: float = 0.5
    zscore_confidence_divisor: float = 5.0

    # IQR detector
    iqr_multiplier: float = 1.5
    iqr_sensitivity_scale: float = 0.3
    # IQR / 1.35 approximates sigma for a normal distribution
    iqr_sigma_divisor: float = 1.35
    deviation_confidence_divisor: float = 3.0

    # moving-average deviation detector
    moving_average_window: int = 10

    # seasonal detector and forecaster
    seasonal_period: int = TASKPULSE_SEASONAL_PERIOD
    seasonal_threshold: float = 2.5
    seasonal_sensitivity_scale: float = 0.5

    # trend-change detector
    trend_change_window: int = 5
    trend_change_min_delta: float = 0.1

    # median absolute deviation detector
    mad_scale: float = 0.6745
    mad_threshold: float = 3.5
    mad_sensitivity_scale: float = 0.5
    mad_confidence_divisor: float = 10.0

    # isolation forest detector
    iso_contamination_scale: float = 0.2
    iso_contamination_min: float = 0.01
    iso_contamination_max: float = 0.5
    iso_n_estimators: int = 100
    iso_random_state: int = 42
    iso_min_samples: int = 8

    # severity bands, applied to |score| / threshold
    severity_ratio_critical: float = 3.0
    severity_ratio_high: float = 2.0
    severity_ratio_medium: float = 1.5

    # severity bands, applied to a [0, 1] confidence
    severity_confidence_critical: float = 0.9
    severity_confidence_high: float = 0.7
    severity_confidence_medium: float = 0.5

    # ensemble voting
    ensemble_min_votes: int = 2

    # forecasting
    forecast_min_points: int = 2
    forecast_default_confidence: float = 0.95
    forecast_default_z: float = 1.96
    # (minimum confidence, z) pairs, checked in order
    forecast_confidence_z: List[Tuple[float, float]] = [
        (0.99, 2.576),
        (0.95, 1.96),
        (0.90, 1.645),
    ]
    holt_alpha: float = 0.3
    holt_beta: float = 0.1
    seasonal_trend_tail: int = 10

    # slopes within +/- deadband are labelled stable / flat
    trend_deadband: float = 0.01
    trend_min_points: int = 2

    # autocorrelation based seasonality detection
    seasonality_max_lag: int = 30
    seasonality_min_cycles: int = 4
    seasonality_peak_correlation: float = 0.5
    seasonality_top_peaks: int = 3
    seasonality_strong: float = 0.5
    seasonality_weak: float = 0.2

    # risk scoring
    risk_base_score: float = 50.0
    risk_decline_scale: float = 10.0
    risk_decline_weight: float = 20.0
    risk_volatility_cutoff: float = 10.0
    risk_volatility_scale: float = 50.0
    risk_volatility_weight: float = 15.0
    risk_critical_breach: float = 30.0
    risk_warning_breach: float = 15.0
    risk_level_critical: float = 75.0
    risk_level_high: float = 50.0
    risk_level_medium: float = 25.0

    # series analyzer
    analyzer_default_horizon: int = TASKPULSE_DEFAULT_HORIZON
    analyzer_detection_method: str = "ensemble"

    model_config = {
        "env_prefix": "TASKPULSE_",
        "extra": "ignore",
    }


settings = Settings()
