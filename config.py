"""
Constants and configuration for the Seasonal Hybrid ESD engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict

from pydantic_settings import BaseSettings


SHESD_HOST = os.getenv("SHESD_HOST", "0.0.0.0")
SHESD_PORT = int(os.getenv("SHESD_PORT", "4323"))
SHESD_LOG_LEVEL = os.getenv("SHESD_LOG_LEVEL", "INFO").upper()

# observations per seasonal cycle for each supported sampling granularity
DEFAULT_PERIODS: Dict[str, int] = {
    "min": 1440,
    "hr": 24,
    "day": 7,
}

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


class Settings(BaseSettings):
    host: str = SHESD_HOST
    port: int = SHESD_PORT
    log_level: str = SHESD_LOG_LEVEL

    # generalized ESD defaults
    esd_default_k: float = 0.49
    esd_default_alpha: float = 0.05
    # MAD within this many float ulps of the input magnitude counts as zero
    esd_degenerate_scale_ulps: int = 1024

    # periodic robust STL (s.window = factor * n + 1, degree 0)
    stl_seasonal_window_factor: int = 10
    stl_inner_iter: int = 1
    stl_outer_iter: int = 15

    timestamp_format: str = "%Y-%m-%d %H:%M:%S"

    # time-based front end
    ts_default_max_anoms: float = 0.10
    ts_max_anoms_limit: float = 0.49
    ts_default_piecewise_median_period_weeks: int = 2
    ts_periods: Dict[str, int] = DEFAULT_PERIODS

    # alpha values outside this range are accepted with a warning
    alpha_warn_low: float = 0.01
    alpha_warn_high: float = 0.1

    model_config = {
        "env_prefix": "SHESD_",
        "extra": "ignore",
    }


settings = Settings()
