"""
Anomaly detection for numeric series: single-method detectors selected by name and the consensus ensemble built on top of them.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import (
    detect,
    iqr_detection,
    isolation_forest_detection,
    mad_detection,
    moving_average_detection,
    seasonal_detection,
    trend_change_detection,
    z_score_detection,
)
from engine.anomaly.ensemble import ensemble_detection

__all__ = [
    "detect",
    "ensemble_detection",
    "iqr_detection",
    "isolation_forest_detection",
    "mad_detection",
    "moving_average_detection",
    "seasonal_detection",
    "trend_change_detection",
    "z_score_detection",
]
