"""
Seasonal Hybrid ESD anomaly detection: seasonal decomposition followed by an iterative generalized ESD test on the residual.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.esd.detection import EsdResult, detect_anoms
from engine.esd.timeseries import detect_ts
from engine.esd.vector import detect_vec
from engine.esd.windows import AnomalyPoint

__all__ = ["AnomalyPoint", "EsdResult", "detect_anoms", "detect_ts", "detect_vec"]
