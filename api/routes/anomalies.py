from __future__ import annotations

import asyncio
from typing import List

from fastapi import APIRouter

from api.requests import EsdRequest, TsAnomalyRequest, VecAnomalyRequest
from api.responses import Anomaly, EsdResponse, ExpectedPoint
from api.routes.exception import handle_exceptions
from engine.esd import detect_anoms, detect_ts, detect_vec
from engine.esd.windows import AnomalyPoint

router = APIRouter(tags=["Anomalies"])


def _to_response(points: List[AnomalyPoint]) -> List[Anomaly]:
    return [
        Anomaly(timestamp=p.timestamp, value=p.value, expected_value=p.expected_value)
        for p in points
    ]


@router.post("/anomalies/ts", response_model=List[Anomaly])
@handle_exceptions
async def ts_anomalies(req: TsAnomalyRequest) -> List[Anomaly]:
    points = await asyncio.to_thread(
        detect_ts,
        [p[0] for p in req.points],
        [p[1] for p in req.points],
        max_anoms=req.max_anoms,
        direction=req.direction,
        alpha=req.alpha,
        only_last=req.only_last,
        threshold=req.threshold,
        e_value=req.e_value,
        longterm=req.longterm,
        piecewise_median_period_weeks=req.piecewise_median_period_weeks,
    )
    return _to_response(points)


@router.post("/anomalies/vec", response_model=List[Anomaly])
@handle_exceptions
async def vec_anomalies(req: VecAnomalyRequest) -> List[Anomaly]:
    points = await asyncio.to_thread(
        detect_vec,
        req.values,
        period=req.period,
        max_anoms=req.max_anoms,
        direction=req.direction,
        alpha=req.alpha,
        only_last=req.only_last,
        threshold=req.threshold,
        e_value=req.e_value,
        longterm_period=req.longterm_period,
    )
    return _to_response(points)


@router.post("/anomalies/esd", response_model=EsdResponse)
@handle_exceptions
async def esd_anomalies(req: EsdRequest) -> EsdResponse:
    result = await asyncio.to_thread(
        detect_anoms,
        req.points,
        k=req.k,
        alpha=req.alpha,
        period_length=req.period_length,
        use_decomp=req.use_decomp,
        use_esd=req.use_esd,
        one_tail=req.one_tail,
        upper_tail=req.upper_tail,
    )
    return EsdResponse(
        anomalies=result.anomalies,
        expected=[ExpectedPoint(timestamp=t, value=v) for t, v in result.expected],
    )
