"""
Compute logic for baseline statistics (mean, standard deviation and the mean +/- k sigma normal range) over a series, with per-phase seasonal baselines, to give detectors a reference point for identifying significant deviations.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from api.responses import NormalRange
from engine import stats
from config import settings


@dataclass(frozen=True)
class Baseline:
    mean: float
    std: float
    lower: float
    upper: float
    sample_count: int = 0

    def normal_range(self) -> NormalRange:
        return NormalRange(min=self.lower, max=self.upper, mean=self.mean, std_dev=self.std)


def _phase_buckets(n: int, period: int) -> List[int]:
    return [i % period for i in range(n)]


def compute(vals: Sequence[float], sigma: float | None = None) -> Baseline:
    if sigma is None:
        sigma = settings.baseline_range_sigma
    arr = np.asarray(vals, dtype=float)
    m = stats.mean(arr)
    s = stats.std_dev(arr)
    return Baseline(mean=m, std=s, lower=m - sigma * s, upper=m + sigma * s, sample_count=int(arr.size))


def seasonal(vals: Sequence[float], period: int, sigma: float | None = None) -> List[Baseline]:
    """One baseline per phase (index % period)."""
    bucket_map: Dict[int, List[float]] = {p: [] for p in range(period)}
    for b, v in zip(_phase_buckets(len(vals), period), vals):
        bucket_map[b].append(float(v))
    return [compute(bucket_map[p], sigma=sigma) for p in range(period)]

