from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from engine.enums import Direction, OnlyLast, Threshold


class TsAnomalyRequest(BaseModel):
    # [epoch_seconds, value]; value may be null at the start or end
    points: List[Tuple[float, Optional[float]]] = Field(min_length=2)
    max_anoms: float = Field(default=0.10, gt=0.0, le=0.49)
    direction: Direction = Direction.pos
    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)
    only_last: Optional[OnlyLast] = None
    threshold: Optional[Threshold] = None
    e_value: bool = False
    longterm: bool = False
    piecewise_median_period_weeks: int = Field(default=2, ge=2)


class VecAnomalyRequest(BaseModel):
    values: List[Optional[float]] = Field(min_length=2)
    period: int = Field(ge=2)
    max_anoms: float = Field(default=0.10, gt=0.0, le=0.49)
    direction: Direction = Direction.pos
    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)
    only_last: bool = False
    threshold: Optional[Threshold] = None
    e_value: bool = False
    longterm_period: Optional[int] = Field(default=None, ge=2)


class EsdRequest(BaseModel):
    points: List[Tuple[float, Optional[float]]] = Field(min_length=2)
    period_length: int = Field(ge=1)
    k: float = Field(default=0.49, gt=0.0, le=1.0)
    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)
    use_decomp: bool = True
    use_esd: bool = False
    one_tail: bool = True
    upper_tail: bool = True

    @model_validator(mode="after")
    def _decomposable_period(self) -> "EsdRequest":
        if self.use_decomp and self.period_length < 2:
            raise ValueError("period_length must be at least 2 when use_decomp is set")
        return self
