"""
Forecast entry point: selects the linear, exponential (Holt) or seasonal decomposition strategy by name.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable

from api.requests import ForecastConfig
from api.responses import ForecastResult
from engine.enums import ForecastMethod
from engine.forecast import decomposition, smoothing, trajectory

_FORECASTERS: Dict[ForecastMethod, Callable[[Iterable[Any], ForecastConfig], ForecastResult]] = {
    ForecastMethod.linear: trajectory.forecast,
    ForecastMethod.exponential: smoothing.forecast,
    ForecastMethod.seasonal: decomposition.forecast,
}


def forecast(data: Iterable[Any], config: ForecastConfig) -> ForecastResult:
    return _FORECASTERS[ForecastMethod.resolve(config.method)](data, config)
