import logging
from dataclasses import asdict
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi_cache.decorator import cache

from api.ratelimit import compute_limit, limiter
from api.schemas import (
    AgeGradeResponse,
    AgeGradeResultOut,
    AltitudeImpactResponse,
    EquivalentsResponse,
    PacingResponse,
    RaceEquivalentOut,
    SimpleStatusResponse,
    ThresholdPaceRangeOut,
    TrainingPaceEstimateOut,
    TrainingRangeResponse,
    WbgtResponse,
)
from runpace.config import get_settings
from runpace.data_tables import EngineTables
from runpace.services.age_grade import calculate_age_grade
from runpace.services.altitude import get_altitude_impact
from runpace.services.heat import impact_category
from runpace.services.pacing import compute_pacing
from runpace.services.race_predictor import equivalent_performances
from runpace.services.time_format import pace_display
from runpace.services.training_range import estimate_threshold_pace_range, estimate_training_paces
from runpace.services.wbgt import black_globe_temperature, calculate_wbgt, stull_wet_bulb, wbgt_risk
from runpace.validators import AgeGradeRequest, PacingRequest, TrainingRangeRequest, WbgtRequest, coerce_time

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")


def get_tables(request: Request) -> EngineTables:
    return request.app.state.tables


@router.get("/health", response_model=SimpleStatusResponse, tags=["system"])
def health():
    return SimpleStatusResponse(status="ok")


@router.post("/pacing", response_model=PacingResponse, tags=["pacing"])
@limiter.limit(compute_limit)
def pacing(
    request: Request,
    response: Response,
    body: PacingRequest,
    tables: Annotated[EngineTables, Depends(get_tables)],
):
    settings = get_settings()
    result = compute_pacing(
        body.to_inputs(settings.default_runner_weight_kg),
        heat_grid=tables.heat_grid,
        reference_pace=settings.reference_pace_sec_per_km,
        altitude_threshold_m=settings.altitude_noise_threshold_m,
    )
    out = PacingResponse.model_validate(result)
    return out.model_copy(update={
        "heat_category": impact_category(result.heat.impact_percent) if result.heat.valid else None,
        "paces_display": {zone: pace_display(pace) for zone, pace in result.paces.as_dict().items()},
    })


@router.post("/age-grade", response_model=AgeGradeResponse, tags=["age-grade"])
@limiter.limit(compute_limit)
def age_grade(
    request: Request,
    response: Response,
    body: AgeGradeRequest,
    tables: Annotated[EngineTables, Depends(get_tables)],
):
    result = calculate_age_grade(tables.age_grade, body.distance_m, body.time_seconds, body.age, body.gender)
    if result is None:
        logger.info("age_grade_unavailable", extra={"distance_m": body.distance_m, "age": body.age, "gender": body.gender})
        return AgeGradeResponse(available=False)
    return AgeGradeResponse(available=True, result=AgeGradeResultOut.model_validate(result))


@router.post("/training-range", response_model=TrainingRangeResponse, tags=["training-range"])
@limiter.limit(compute_limit)
def training_range(
    request: Request,
    response: Response,
    body: TrainingRangeRequest,
    tables: Annotated[EngineTables, Depends(get_tables)],
):
    age = body.age if body.age is not None else get_settings().default_reference_age
    estimate = estimate_training_paces(tables.cv_model, body.distance_m, body.time_seconds, age)
    if estimate is None:
        return TrainingRangeResponse(available=False)
    threshold = estimate_threshold_pace_range(tables.cv_model, body.distance_m, body.time_seconds, age)
    return TrainingRangeResponse(
        available=True,
        result=TrainingPaceEstimateOut.model_validate(estimate),
        threshold_range=ThresholdPaceRangeOut.model_validate(threshold),
    )


@router.post("/wbgt", response_model=WbgtResponse, tags=["weather"])
@limiter.limit(compute_limit)
def wbgt(request: Request, response: Response, body: WbgtRequest):
    del request, response
    value = calculate_wbgt(body.temp_c, body.humidity_pct, body.wind_kmh, body.solar_wm2)
    return WbgtResponse(
        wbgt_c=round(value, 2),
        wet_bulb_c=round(stull_wet_bulb(body.temp_c, body.humidity_pct), 2),
        globe_c=round(black_globe_temperature(body.temp_c, body.wind_kmh, body.solar_wm2), 2),
        risk=wbgt_risk(value),
    )


@router.get("/altitude/impact", response_model=AltitudeImpactResponse, tags=["altitude"])
@cache(namespace="altitude")
async def altitude_impact(
    target_m: float = Query(..., ge=-500, le=9000),
    base_m: float = Query(0.0, ge=-500, le=9000),
) -> AltitudeImpactResponse:
    impact = get_altitude_impact(base_m, target_m)
    applied = abs(target_m - base_m) > get_settings().altitude_noise_threshold_m
    return AltitudeImpactResponse(**asdict(impact), applied=applied)


@router.get("/equivalents", response_model=EquivalentsResponse, tags=["pacing"])
@cache(namespace="equivalents")
async def equivalents(
    distance_m: float = Query(..., gt=0, le=1_000_000),
    time_seconds: Optional[float] = Query(None, gt=0),
    time: Optional[str] = Query(None, max_length=16),
) -> EquivalentsResponse:
    if time_seconds is None:
        if time is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="time or time_seconds is required")
        try:
            time_seconds = float(coerce_time(time))
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    items = equivalent_performances(distance_m, time_seconds)
    return EquivalentsResponse(
        available=bool(items),
        items=[RaceEquivalentOut.model_validate(item) for item in items],
    )
