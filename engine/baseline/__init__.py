"""
Baseline statistics (mean, standard deviation, normal range) for a series, with per-phase seasonal baselines used by the seasonal detector.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.baseline.compute import Baseline, compute, seasonal

__all__ = ["Baseline", "compute", "seasonal"]
