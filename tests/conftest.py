import os
import sys
from datetime import datetime, timedelta

import numpy as np
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def spike_series():
    return [10, 10, 10, 10, 10, 50, 10, 10, 10, 10]


@pytest.fixture
def weekly_pattern():
    """Eight weeks of a repeating weekly sawtooth."""
    return [10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0] * 8


@pytest.fixture
def noisy_series():
    rng = np.random.default_rng(7)
    return list(100.0 + rng.normal(0.0, 5.0, size=80))


@pytest.fixture
def daily_points():
    start = datetime(2026, 1, 1)
    return [
        {"timestamp": start + timedelta(days=i), "value": 20.0 + i, "label": f"day-{i}"}
        for i in range(14)
    ]
