"""Pydantic validation models for all user-facing data entry points."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from runpace.services.age_grade import normalize_gender
from runpace.services.pacing import PacingInputs, RunnerProfile
from runpace.services.time_format import parse_time


def coerce_time(v):
    """Accept seconds or an 'M:SS' / 'H:MM:SS' / '1920' string."""
    if isinstance(v, str):
        if not any(ch.isdigit() for ch in v):
            raise ValueError("time must be seconds or a M:SS / H:MM:SS string")
        return parse_time(v)
    return v


class TimeTrialInput(BaseModel):
    # Zero is accepted and yields an unavailable result rather than an error
    distance_m: float = Field(ge=0, le=1_000_000)
    time_seconds: float = Field(ge=0, le=100 * 3600)

    @field_validator("time_seconds", mode="before")
    @classmethod
    def parse_time_string(cls, v):
        return coerce_time(v)


class PacingRequest(TimeTrialInput):
    temp_c: Optional[float] = Field(default=None, ge=-50, le=60)
    dew_c: Optional[float] = Field(default=None, ge=-60, le=60)
    wind_kmh: float = Field(default=0.0, ge=0, le=150)
    weight_kg: Optional[float] = Field(default=None, gt=0, le=300)
    height_cm: Optional[float] = Field(default=None, gt=0, le=260)
    age: Optional[float] = Field(default=None, gt=0, le=120)
    gender: Optional[str] = None
    base_altitude_m: Optional[float] = Field(default=None, ge=-500, le=9000)
    target_altitude_m: Optional[float] = Field(default=None, ge=-500, le=9000)

    @field_validator("gender")
    @classmethod
    def valid_gender(cls, v):
        if v is None:
            return v
        sex = normalize_gender(v)
        if sex is None:
            raise ValueError("gender must be M or F")
        return sex

    def to_inputs(self, default_weight_kg: float) -> PacingInputs:
        return PacingInputs(
            distance_m=self.distance_m,
            time_seconds=self.time_seconds,
            temp_c=self.temp_c,
            dew_c=self.dew_c,
            wind_kmh=self.wind_kmh,
            runner=RunnerProfile(
                weight_kg=self.weight_kg or default_weight_kg,
                height_cm=self.height_cm,
                age=self.age,
                gender=self.gender,
            ),
            base_altitude_m=self.base_altitude_m,
            target_altitude_m=self.target_altitude_m,
        )


class AgeGradeRequest(TimeTrialInput):
    age: float = Field(gt=0, le=120)
    gender: str

    @field_validator("gender")
    @classmethod
    def valid_gender(cls, v):
        sex = normalize_gender(v)
        if sex is None:
            raise ValueError("gender must be M or F")
        return sex


class TrainingRangeRequest(TimeTrialInput):
    age: Optional[float] = Field(default=None, ge=0, le=120)


class WbgtRequest(BaseModel):
    temp_c: float = Field(ge=-50, le=60)
    humidity_pct: float = Field(ge=0, le=100)
    wind_kmh: float = Field(default=0.0, ge=0, le=150)
    solar_wm2: float = Field(default=0.0, ge=0, le=1500)
