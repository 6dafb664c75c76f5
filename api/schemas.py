from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from runpace.services.age_grade import AgeGradeClass


class SimpleStatusResponse(BaseModel):
    status: str


class PaceSetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    threshold: Optional[float] = None
    p10min: Optional[float] = None
    p6min: Optional[float] = None
    p3min: Optional[float] = None
    p1min: Optional[float] = None
    easy: Optional[float] = None


class EnvironmentAdjustmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    valid: bool
    impact_percent: Optional[float] = None
    adjusted_paces: Optional[PaceSetOut] = None


class PacingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    valid: bool
    vdot: float
    pred_5k_seconds: float
    pred_5k_pace: float
    input_pace_seconds: float
    paces: PaceSetOut
    heat: EnvironmentAdjustmentOut
    headwind: EnvironmentAdjustmentOut
    tailwind: EnvironmentAdjustmentOut
    altitude: EnvironmentAdjustmentOut
    temp_c: Optional[float] = None
    dew_c: Optional[float] = None
    heat_category: Optional[str] = None
    paces_display: dict[str, str] = Field(default_factory=dict)


class AgeGradeResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: float
    age_graded_time_seconds: float
    class_label: AgeGradeClass
    used_factor: float
    standard_distance_m: float
    open_standard_seconds: float


class AgeGradeResponse(BaseModel):
    available: bool
    result: Optional[AgeGradeResultOut] = None


class TrainingPaceRangeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    safe_sec_per_km: float
    median_sec_per_km: float
    range_fast_sec_per_km: float
    range_slow_sec_per_km: float


class TrainingPaceEstimateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    threshold: TrainingPaceRangeOut
    cv: TrainingPaceRangeOut
    vo2max: TrainingPaceRangeOut
    age_used: float
    model: str


class ThresholdPaceRangeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    faster_sec_per_km: float
    slower_sec_per_km: float
    quantile_p10_sec_per_km: float
    quantile_p90_sec_per_km: float
    age_used: float
    model: str


class TrainingRangeResponse(BaseModel):
    available: bool
    result: Optional[TrainingPaceEstimateOut] = None
    threshold_range: Optional[ThresholdPaceRangeOut] = None


class WbgtResponse(BaseModel):
    wbgt_c: float
    wet_bulb_c: float
    globe_c: float
    risk: str


class AltitudeImpactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    impact_pct: float
    correction_factor: float
    delta_alt: float
    base_vo2: float
    target_vo2: float
    vo2_drop: float
    applied: bool


class RaceEquivalentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    distance_label: str
    distance_m: float
    predicted_seconds: float
    predicted_display: str
    pace_sec_per_km: float
    method: str
    vdot_used: Optional[float] = None


class EquivalentsResponse(BaseModel):
    available: bool
    items: list[RaceEquivalentOut] = Field(default_factory=list)
