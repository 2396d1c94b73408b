"""
Test cases for input coercion: accepted observation shapes, rejection of malformed and non-finite values, minimum length enforcement and future timestamp projection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import datetime, timedelta

import numpy as np
import pytest

from api.requests import DataPoint
from engine.exceptions import InsufficientDataError, InvalidArgumentError
from engine.series import coerce_points, future_timestamp, prepare, require_positive


def test_coerce_mixed_inputs(daily_points):
    pts = coerce_points([1, 2.5, np.float64(3), DataPoint(value=4), daily_points[0]])
    assert [p.value for p in pts] == [1.0, 2.5, 3.0, 4.0, 20.0]
    assert pts[-1].label == "day-0"
    assert pts[0].timestamp is None


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
def test_non_finite_rejected(bad):
    with pytest.raises(InvalidArgumentError):
        coerce_points([1, bad, 3])


def test_unsupported_types_rejected():
    with pytest.raises(InvalidArgumentError):
        coerce_points(["12"])
    with pytest.raises(InvalidArgumentError):
        coerce_points([True])
    with pytest.raises(InvalidArgumentError):
        coerce_points([{"timestamp": "not a date"}])


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        coerce_points([None])


def test_prepare_enforces_minimum():
    with pytest.raises(InsufficientDataError):
        prepare([])
    with pytest.raises(InsufficientDataError, match="at least 3"):
        prepare([1, 2], min_points=3, purpose="x")
    pts, arr = prepare([1, 2, 3], min_points=3)
    assert len(pts) == 3
    assert arr.dtype == float


def test_require_positive():
    assert require_positive("w", 3) == 3
    assert require_positive("w", None, 7) == 7
    assert require_positive("w", 2, 7) == 2
    for bad in (0, -2, None):
        with pytest.raises(InvalidArgumentError):
            require_positive("w", bad)
    # an explicit zero never falls back to the default
    with pytest.raises(InvalidArgumentError):
        require_positive("w", 0, 7)


def test_future_timestamp(daily_points):
    pts = coerce_points(daily_points)
    last = pts[-1].timestamp
    assert future_timestamp(pts, 0) == last + timedelta(days=1)
    assert future_timestamp(pts, 4) == last + timedelta(days=5)


def test_future_timestamp_needs_two_stamped_points():
    assert future_timestamp(coerce_points([{"timestamp": datetime(2026, 1, 1), "value": 1}]), 0) is None
    assert future_timestamp(coerce_points([1, 2, 3]), 0) is None
