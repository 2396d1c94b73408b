from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from api.requests import AnalyzeRequest, DetectionConfig, ForecastConfig
from api.responses import PortfolioReport, SeriesReport
from engine import anomaly
from engine.enums import Severity
from engine.exceptions import AnalyticsError
from engine.forecast import detect_seasonality, forecast
from engine.risk import score_risk
from engine.series import coerce_points
from engine.trend import analyze_trend
from config import settings

log = logging.getLogger(__name__)

T = TypeVar("T")


def _stage(name: str, fn: Callable[[], T], warnings: List[str]) -> Optional[T]:
    try:
        return fn()
    except AnalyticsError as exc:
        log.info("analysis stage %s skipped: %s", name, exc)
        warnings.append(f"{name}: {exc}")
        return None


def _overall_severity(report: SeriesReport) -> Severity:
    best = Severity.low
    if report.detection is not None:
        for item in report.detection.anomalies:
            if item.severity.weight() > best.weight():
                best = item.severity
    if report.risk is not None:
        risk_severity = report.risk.level.as_severity()
        if risk_severity.weight() > best.weight():
            best = risk_severity
    return best


def _summary(report: SeriesReport) -> str:
    parts = []
    if report.detection is not None and report.detection.anomaly_count:
        parts.append(f"{report.detection.anomaly_count} anomaly(ies)")
        if report.detection.severity_counts.critical:
            parts.append(f"{report.detection.severity_counts.critical} critical")
    if report.trend is not None:
        parts.append(f"trend {report.trend.direction.value} ({report.trend.change_rate:+.1f}%/period)")
    if report.forecast is not None and report.forecast.forecast:
        last = report.forecast.forecast[-1]
        parts.append(f"{len(report.forecast.forecast)}-period forecast ends at {last.value:.4g}")
    if report.seasonality is not None and report.seasonality.detected:
        parts.append(f"seasonal period {report.seasonality.period}")
    if report.risk is not None:
        parts.append(f"risk {report.risk.score:.0f}/100")
    if not parts:
        return f"{report.name}: no analysis could be produced."
    return f"[{report.overall_severity.value.upper()}] {report.name}: {' | '.join(parts)}."


def analyze(data: Iterable[Any], req: Optional[AnalyzeRequest] = None) -> SeriesReport:
    req = req or AnalyzeRequest()
    points = coerce_points(data)
    warnings: List[str] = []

    detection_config = req.detection
    if detection_config.method is None:
        detection_config = detection_config.model_copy(
            update={"method": settings.analyzer_detection_method}
        )
    forecast_config = req.forecast or ForecastConfig(horizon=settings.analyzer_default_horizon)
    period = detection_config.seasonal_period
    if period is None:
        period = forecast_config.seasonal_period

    detection = _stage("detection", lambda: anomaly.detect(points, detection_config), warnings)
    predicted = _stage("forecast", lambda: forecast(points, forecast_config), warnings)
    trend = _stage("trend", lambda: analyze_trend(points), warnings)
    risk = None
    if trend is not None:
        risk = _stage("risk", lambda: score_risk(points, req.thresholds, trend=trend), warnings)
    seasonality = _stage("seasonality", lambda: detect_seasonality(points, period), warnings)

    report = SeriesReport(
        name=req.name,
        total_data_points=len(points),
        detection=detection,
        forecast=predicted,
        trend=trend,
        risk=risk,
        seasonality=seasonality,
        analysis_warnings=warnings,
        overall_severity=Severity.low,
        summary="",
    )
    report.overall_severity = _overall_severity(report)
    report.summary = _summary(report)
    return report


def analyze_many(
    series: Dict[str, Iterable[Any]],
    detection: Optional[DetectionConfig] = None,
    forecast_config: Optional[ForecastConfig] = None,
) -> PortfolioReport:
    reports: List[SeriesReport] = []
    for name, data in series.items():
        req = AnalyzeRequest(
            name=name,
            detection=detection or DetectionConfig(),
            forecast=forecast_config,
        )
        reports.append(analyze(data, req))

    def _critical(r: SeriesReport) -> int:
        return r.detection.severity_counts.critical if r.detection is not None else 0

    def _count(r: SeriesReport) -> int:
        return r.detection.anomaly_count if r.detection is not None else 0

    reports.sort(key=lambda r: (_critical(r), _count(r)), reverse=True)
    return PortfolioReport(
        total_series=len(reports),
        series_with_anomalies=sum(1 for r in reports if _count(r) > 0),
        total_anomalies=sum(_count(r) for r in reports),
        critical_anomalies=sum(_critical(r) for r in reports),
        reports=reports,
    )
