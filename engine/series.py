"""
Input coercion for the analytics engine: turns caller supplied observations (DataPoint models, mappings or bare numbers) into an ordered list of DataPoints plus a float array, and enforces the per-method minimum series length.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import numpy as np
from pydantic import ValidationError

from api.requests import DataPoint
from engine.exceptions import InsufficientDataError, InvalidArgumentError

log = logging.getLogger(__name__)


def _to_point(raw: Any, position: int) -> DataPoint:
    if isinstance(raw, DataPoint):
        return raw
    try:
        if isinstance(raw, Mapping):
            return DataPoint.model_validate(dict(raw))
        if isinstance(raw, (int, float, np.integer, np.floating)) and not isinstance(raw, bool):
            return DataPoint(value=float(raw))
    except ValidationError as exc:
        raise InvalidArgumentError(f"observation {position} is malformed: {exc}") from exc
    raise InvalidArgumentError(
        f"observation {position} has unsupported type {type(raw).__name__}"
    )


def coerce_points(raw: Iterable[Any]) -> List[DataPoint]:
    points: List[DataPoint] = []
    for position, item in enumerate(raw):
        point = _to_point(item, position)
        if not math.isfinite(point.value):
            log.warning("rejecting series: observation %d is %r", position, point.value)
            raise InvalidArgumentError(
                f"observation {position} has non-finite value {point.value!r}"
            )
        points.append(point)
    return points


def prepare(
    raw: Iterable[Any],
    min_points: int = 1,
    purpose: str = "analysis",
) -> Tuple[List[DataPoint], np.ndarray]:
    points = coerce_points(raw)
    if len(points) < max(1, min_points):
        raise InsufficientDataError(
            f"{purpose} needs at least {max(1, min_points)} data points, got {len(points)}"
        )
    values = np.array([p.value for p in points], dtype=float)
    return points, values


def require_positive(name: str, value: Optional[int], default: Optional[int] = None) -> int:
    """Validate a window or period; only a missing value falls back to the default."""
    if value is None:
        value = default
    if value is None or int(value) < 1:
        raise InvalidArgumentError(f"{name} must be >= 1, got {value!r}")
    return int(value)


def future_timestamp(points: List[DataPoint], periods_ahead: int) -> Optional[datetime]:
    """Last timestamp advanced by (periods_ahead + 1) observed intervals."""
    if len(points) < 2:
        return None
    last = points[-1].timestamp
    prev = points[-2].timestamp
    if last is None or prev is None:
        return None
    interval: timedelta = last - prev
    return last + interval * (periods_ahead + 1)
