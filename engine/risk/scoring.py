"""
Risk scoring for a numeric series: starts from a base score and adds capped, weighted contributions for a declining trend, high volatility and threshold breaches of the latest value, then maps the clamped score to a risk level with a fixed recommendation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from api.requests import RiskThresholds
from api.responses import RiskFactor, RiskScore, TrendAnalysis
from engine.enums import RiskLevel, TrendDirection
from engine.exceptions import InsufficientDataError
from engine.series import coerce_points
from engine.trend import analyze_trend
from config import RISK_RECOMMENDATIONS, settings

log = logging.getLogger(__name__)


def score_declining_trend(trend: TrendAnalysis) -> Tuple[float, Optional[RiskFactor]]:
    if trend.direction != TrendDirection.down:
        return 0.0, None
    impact = min(abs(trend.change_rate) / settings.risk_decline_scale, 1.0)
    factor = RiskFactor(
        name="Declining Trend",
        impact=-impact,
        description=f"{abs(trend.change_rate):.1f}% decline per period",
    )
    return impact * settings.risk_decline_weight, factor


def score_volatility(trend: TrendAnalysis) -> Tuple[float, Optional[RiskFactor]]:
    if trend.volatility <= settings.risk_volatility_cutoff:
        return 0.0, None
    impact = min(trend.volatility / settings.risk_volatility_scale, 1.0)
    factor = RiskFactor(
        name="High Volatility",
        impact=-impact,
        description=f"{trend.volatility:.1f}% volatility",
    )
    return impact * settings.risk_volatility_weight, factor


def score_threshold_breach(
    current: float,
    thresholds: RiskThresholds,
) -> Tuple[float, Optional[RiskFactor]]:
    if thresholds.critical is not None and current < thresholds.critical:
        return settings.risk_critical_breach, RiskFactor(
            name="Critical Threshold",
            impact=-1.0,
            description=f"Below critical threshold ({thresholds.critical:g})",
        )
    if thresholds.warning is not None and current < thresholds.warning:
        return settings.risk_warning_breach, RiskFactor(
            name="Warning Threshold",
            impact=-0.5,
            description=f"Below warning threshold ({thresholds.warning:g})",
        )
    return 0.0, None


def score(
    data: Iterable[Any],
    thresholds: Optional[RiskThresholds] = None,
    trend: Optional[TrendAnalysis] = None,
) -> RiskScore:
    thresholds = thresholds or RiskThresholds()
    points = coerce_points(data)
    if not points:
        raise InsufficientDataError("risk scoring needs at least 1 data point, got 0")
    if trend is None:
        trend = analyze_trend(points)

    total = settings.risk_base_score
    factors: List[RiskFactor] = []
    for contribution, factor in (
        score_declining_trend(trend),
        score_volatility(trend),
        score_threshold_breach(points[-1].value, thresholds),
    ):
        if factor is None:
            continue
        total += contribution
        factors.append(factor)

    clamped = max(0.0, min(100.0, total))
    level = RiskLevel.from_score(clamped)
    log.debug("risk: score=%.2f level=%s factors=%d", clamped, level.value, len(factors))
    return RiskScore(
        score=clamped,
        level=level,
        factors=factors,
        recommendation=RISK_RECOMMENDATIONS[level.value],
    )
