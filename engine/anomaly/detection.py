"""
Detection logic for identifying anomalies in a numeric series using interchangeable strategies (z-score, IQR fences, moving-average deviation, seasonal phase baselines, trend reversals, median absolute deviation and Isolation Forest), each returning the same normalized result shape.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np
from sklearn.ensemble import IsolationForest

from api.requests import DataPoint, DetectionConfig
from api.responses import Anomaly, AnomalyDetectionResult, NormalRange, SeverityCounts
from engine import baseline, stats
from engine.enums import AnomalyType, DetectionMethod, Severity
from engine.series import prepare, require_positive
from config import settings

log = logging.getLogger(__name__)


def _sensitivity(config: DetectionConfig) -> float:
    if config.sensitivity is None:
        return settings.anomaly_default_sensitivity
    return float(config.sensitivity)


def _direction(deviation: float) -> AnomalyType:
    return AnomalyType.spike if deviation > 0 else AnomalyType.drop


def _severity_counts(anomalies: List[Anomaly]) -> SeverityCounts:
    counts = {s.value: 0 for s in Severity}
    for a in anomalies:
        counts[a.severity.value] += 1
    return SeverityCounts(**counts)


def _result(
    points: List[DataPoint],
    anomalies: List[Anomaly],
    normal_range: NormalRange,
) -> AnomalyDetectionResult:
    total = len(points)
    return AnomalyDetectionResult(
        anomalies=anomalies,
        normal_range=normal_range,
        total_data_points=total,
        anomaly_count=len(anomalies),
        anomaly_rate=len(anomalies) / total if total else 0.0,
        severity_counts=_severity_counts(anomalies),
    )


def z_score_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    points, arr = prepare(data, purpose="z-score detection")
    sensitivity = _sensitivity(config)
    min_score = (
        settings.zscore_min_anomaly_score
        if config.min_anomaly_score is None
        else config.min_anomaly_score
    )

    base = baseline.compute(arr)
    threshold = min_score * (1 - sensitivity * settings.zscore_sensitivity_scale)
    z = stats.z_scores(arr, base.mean, base.std)

    anomalies: List[Anomaly] = []
    for i, (point, score) in enumerate(zip(points, z)):
        az = abs(float(score))
        if az <= threshold:
            continue
        deviation = point.value - base.mean
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=base.mean,
            deviation=deviation,
            severity=Severity.from_ratio(az, threshold),
            confidence=min(az / settings.zscore_confidence_divisor, 1.0),
            type=_direction(deviation),
            description=(
                f"Value {point.value:.2f} deviates {az:.2f} standard deviations "
                f"from mean {base.mean:.2f}"
            ),
        ))

    log.debug("zscore: n=%d threshold=%.3f anomalies=%d", len(points), threshold, len(anomalies))
    return _result(points, anomalies, base.normal_range())


def iqr_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    points, arr = prepare(data, purpose="IQR detection")
    sensitivity = _sensitivity(config)

    q = stats.quartiles(arr)
    multiplier = settings.iqr_multiplier * (1 - sensitivity * settings.iqr_sensitivity_scale)
    lower = q.q1 - multiplier * q.iqr
    upper = q.q3 + multiplier * q.iqr

    anomalies: List[Anomaly] = []
    for i, point in enumerate(points):
        if lower <= point.value <= upper:
            continue
        deviation = point.value - q.q2
        # a zero IQR fences at a single value; anything outside it is maximally unusual
        normalized = abs(deviation) / q.iqr if q.iqr > 0 else math.inf
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=q.q2,
            deviation=deviation,
            severity=Severity.from_ratio(normalized, 1.0),
            confidence=min(normalized / settings.deviation_confidence_divisor, 1.0),
            type=_direction(deviation),
            description=(
                f"Value {point.value:.2f} is outside IQR bounds [{lower:.2f}, {upper:.2f}]"
            ),
        ))

    if q.iqr == 0 and anomalies:
        log.warning("iqr: zero interquartile range, %d point(s) fenced at a single value", len(anomalies))
    normal_range = NormalRange(
        min=lower,
        max=upper,
        mean=q.q2,
        std_dev=q.iqr / settings.iqr_sigma_divisor,
    )
    return _result(points, anomalies, normal_range)


def moving_average_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    window = require_positive("lookback_window", config.lookback_window, settings.moving_average_window)
    points, arr = prepare(data, purpose="moving-average detection")
    sensitivity = _sensitivity(config)

    ma = stats.moving_average(arr, window)
    abs_dev = np.abs(arr - ma)
    avg_deviation = stats.mean(abs_dev)
    threshold = avg_deviation * (2 - sensitivity)

    anomalies: List[Anomaly] = []
    for i, point in enumerate(points):
        if abs_dev[i] <= threshold:
            continue
        expected = float(ma[i])
        deviation = point.value - expected
        normalized = abs(deviation) / avg_deviation
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=expected,
            deviation=deviation,
            severity=Severity.from_ratio(normalized, 1.0),
            confidence=min(normalized / settings.deviation_confidence_divisor, 1.0),
            type=_direction(deviation),
            description=(
                f"Value {point.value:.2f} deviates {abs(deviation):.2f} "
                f"from moving average {expected:.2f}"
            ),
        ))

    log.debug("moving_average: n=%d window=%d anomalies=%d", len(points), window, len(anomalies))
    return _result(points, anomalies, baseline.compute(arr).normal_range())


def seasonal_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    period = require_positive("seasonal_period", config.seasonal_period, settings.seasonal_period)
    points, arr = prepare(data, min_points=period, purpose="seasonal detection")
    sensitivity = _sensitivity(config)

    phases = baseline.seasonal(arr, period)
    threshold = settings.seasonal_threshold * (1 - sensitivity * settings.seasonal_sensitivity_scale)

    anomalies: List[Anomaly] = []
    for i, point in enumerate(points):
        phase = phases[i % period]
        az = abs(stats.z_score(point.value, phase.mean, phase.std))
        if az <= threshold:
            continue
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=phase.mean,
            deviation=point.value - phase.mean,
            severity=Severity.from_ratio(az, threshold),
            confidence=min(az / settings.zscore_confidence_divisor, 1.0),
            type=AnomalyType.pattern_break,
            description=(
                f"Seasonal anomaly: value {point.value:.2f} deviates from expected "
                f"{phase.mean:.2f} for phase {i % period}"
            ),
        ))

    return _result(points, anomalies, baseline.compute(arr).normal_range())


def _slope_word(slope: float) -> str:
    if slope > 0:
        return "upward"
    if slope < 0:
        return "downward"
    return "flat"


def trend_change_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    window = require_positive("lookback_window", config.lookback_window, settings.trend_change_window)
    points, arr = prepare(data, min_points=2 * window + 1, purpose="trend-change detection")

    anomalies: List[Anomaly] = []
    for i in range(window, len(arr) - window):
        before = stats.index_regression(arr[i - window:i]).slope
        after = stats.index_regression(arr[i + 1:i + 1 + window]).slope
        delta = after - before
        if np.sign(before) == np.sign(after) or abs(delta) <= settings.trend_change_min_delta:
            continue
        point = points[i]
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=point.value,
            deviation=0.0,
            severity=Severity.medium,
            confidence=min(abs(delta), 1.0),
            type=AnomalyType.trend_change,
            description=(
                f"Trend reversal detected: from {_slope_word(before)} "
                f"to {_slope_word(after)}"
            ),
        ))

    return _result(points, anomalies, baseline.compute(arr).normal_range())


def mad_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    points, arr = prepare(data, purpose="MAD detection")
    sensitivity = _sensitivity(config)

    med = stats.median(arr)
    spread = stats.mad(arr)
    threshold = settings.mad_threshold * (1 - sensitivity * settings.mad_sensitivity_scale)
    if spread == 0:
        scores = np.zeros_like(arr)
    else:
        scores = settings.mad_scale * (arr - med) / spread

    anomalies: List[Anomaly] = []
    for i, (point, m) in enumerate(zip(points, scores)):
        am = abs(float(m))
        if am <= threshold:
            continue
        deviation = point.value - med
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=med,
            deviation=deviation,
            severity=Severity.from_ratio(am, threshold),
            confidence=min(am / settings.mad_confidence_divisor, 1.0),
            type=_direction(deviation),
            description=(
                f"Modified z-score {float(m):+.2f} exceeds threshold {threshold:.2f} "
                f"around median {med:.2f}"
            ),
        ))

    return _result(points, anomalies, baseline.compute(arr).normal_range())


def _contamination(sensitivity: float) -> float:
    return max(
        settings.iso_contamination_min,
        min(settings.iso_contamination_max, settings.iso_contamination_scale * sensitivity),
    )


def isolation_forest_detection(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    points, arr = prepare(data, min_points=settings.iso_min_samples, purpose="isolation forest detection")
    sensitivity = _sensitivity(config)
    base = baseline.compute(arr)
    med = stats.median(arr)

    iso = IsolationForest(
        contamination=_contamination(sensitivity),
        random_state=settings.iso_random_state,
        n_estimators=settings.iso_n_estimators,
    )
    labels = iso.fit_predict(arr.reshape(-1, 1))
    # score_samples is the negated anomaly score: around -0.5 for inliers, towards -1 when isolated
    iso_scores = iso.score_samples(arr.reshape(-1, 1))

    anomalies: List[Anomaly] = []
    for i, (point, label, s) in enumerate(zip(points, labels, iso_scores)):
        if label != -1 or point.value == med:
            continue
        confidence = float(min(1.0, max(0.0, (-float(s) - 0.5) * 2.0)))
        deviation = point.value - med
        anomalies.append(Anomaly(
            index=i,
            timestamp=point.timestamp,
            value=point.value,
            expected_value=med,
            deviation=deviation,
            severity=Severity.from_confidence(confidence),
            confidence=confidence,
            type=AnomalyType.outlier,
            description=(
                f"Value {point.value:.2f} isolated from the bulk of the series "
                f"(isolation score {-float(s):.3f})"
            ),
        ))

    return _result(points, anomalies, base.normal_range())


_DETECTORS: Dict[DetectionMethod, Callable[..., AnomalyDetectionResult]] = {
    DetectionMethod.zscore: z_score_detection,
    DetectionMethod.iqr: iqr_detection,
    DetectionMethod.moving_average: moving_average_detection,
    DetectionMethod.seasonal: seasonal_detection,
    DetectionMethod.trend_change: trend_change_detection,
    DetectionMethod.mad: mad_detection,
    DetectionMethod.isolation_forest: isolation_forest_detection,
}


def detect(
    data: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> AnomalyDetectionResult:
    config = config or DetectionConfig()
    method = DetectionMethod.resolve(config.method)
    if method is DetectionMethod.ensemble:
        from engine.anomaly.ensemble import ensemble_detection

        return ensemble_detection(data, config)
    return _DETECTORS[method](data, config)
