"""
Consensus detection: runs the z-score, IQR and moving-average detectors with the same configuration and keeps only the z-score anomalies whose index was flagged by at least two of the three methods.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Optional

from api.requests import DetectionConfig
from api.responses import AnomalyDetectionResult
from engine.anomaly.detection import (
    _result,
    iqr_detection,
    moving_average_detection,
    z_score_detection,
)
from engine.series import coerce_points
from config import settings

log = logging.getLogger(__name__)


def ensemble_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
    min_votes: int | None = None,
) -> AnomalyDetectionResult:
    if min_votes is None:
        min_votes = settings.ensemble_min_votes
    config = config or DetectionConfig()
    points = coerce_points(data)

    primary = z_score_detection(points, config)
    results = [
        primary,
        iqr_detection(points, config),
        moving_average_detection(points, config),
    ]

    votes: Counter[int] = Counter()
    for result in results:
        votes.update({a.index for a in result.anomalies})

    consensus = [a for a in primary.anomalies if votes[a.index] >= min_votes]
    log.debug(
        "ensemble: n=%d zscore=%d iqr=%d moving_average=%d consensus=%d",
        len(points),
        *(r.anomaly_count for r in results),
        len(consensus),
    )
    return _result(points, consensus, primary.normal_range)
