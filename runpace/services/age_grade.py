"""Age grading against age/gender performance standards.

An age-graded score compares a performance with the open-class standard for
the same distance after correcting the athlete's time by an age/gender
factor. Factors here are performance factors (at most 1.0 for masters): the
age-graded time is the actual time multiplied by the factor.

Standards cover a handful of road distances; any other distance is
projected from the nearest standard with Riegel's formula.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from runpace.constants import RIEGEL_EXPONENT
from runpace.services.race_predictor import predict_riegel


class AgeGradeClass(str, Enum):
    NONE = "None"
    LOCAL = "Local Class"
    REGIONAL = "Regional Class"
    NATIONAL = "National Class"
    WORLD_CLASS = "World Class"
    WORLD_RECORD = "World Record"


# Minimum score for each class, best first
_CLASS_THRESHOLDS: tuple[tuple[float, AgeGradeClass], ...] = (
    (100.0, AgeGradeClass.WORLD_RECORD),
    (90.0, AgeGradeClass.WORLD_CLASS),
    (80.0, AgeGradeClass.NATIONAL),
    (70.0, AgeGradeClass.REGIONAL),
    (60.0, AgeGradeClass.LOCAL),
)


@dataclass(frozen=True)
class AgeGradeStandard:
    """Standards for one distance: open-class time and per-age factors by gender."""
    distance_m: float
    open_seconds: Mapping[str, float]
    factors: Mapping[str, Mapping[int, float]]


@dataclass(frozen=True)
class AgeGradeTable:
    standards: tuple[AgeGradeStandard, ...]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AgeGradeTable":
        """Build from {distance_m: {"open": {gender: s}, "factors": {gender: {age: f}}}}."""
        standards = []
        for distance, entry in raw.items():
            open_seconds = {normalize_gender(g) or g: float(s) for g, s in entry["open"].items()}
            factors = {
                normalize_gender(g) or g: MappingProxyType({int(age): float(f) for age, f in by_age.items()})
                for g, by_age in entry["factors"].items()
            }
            standards.append(AgeGradeStandard(
                distance_m=float(distance),
                open_seconds=MappingProxyType(open_seconds),
                factors=MappingProxyType(factors),
            ))
        return cls(standards=tuple(sorted(standards, key=lambda s: s.distance_m)))

    def nearest(self, distance_m: float) -> AgeGradeStandard | None:
        if not self.standards:
            return None
        return min(self.standards, key=lambda s: abs(s.distance_m - distance_m))


@dataclass(frozen=True)
class AgeGradeResult:
    score: float
    age_graded_time_seconds: float
    class_label: AgeGradeClass
    used_factor: float
    standard_distance_m: float
    open_standard_seconds: float


def normalize_gender(gender: str | None) -> str | None:
    """Map 'M'/'male'/'F'/'female' (any case) to 'M' or 'F'; None otherwise."""
    if not gender:
        return None
    first = gender.strip()[:1].upper()
    return first if first in ("M", "F") else None


def classify(score: float) -> AgeGradeClass:
    for minimum, label in _CLASS_THRESHOLDS:
        if score >= minimum:
            return label
    return AgeGradeClass.NONE


def calculate_age_grade(
    table: AgeGradeTable,
    distance_m: float,
    time_seconds: float,
    age: float,
    gender: str,
) -> AgeGradeResult | None:
    """Age-grade a performance; None when no standard or factor applies."""
    if not age or not all(math.isfinite(v) for v in (distance_m, time_seconds, age)):
        return None
    if distance_m <= 0 or time_seconds <= 0:
        return None
    sex = normalize_gender(gender)
    if sex is None:
        return None

    standard = table.nearest(distance_m)
    if standard is None:
        return None
    open_seconds = standard.open_seconds.get(sex)
    factor = standard.factors.get(sex, {}).get(int(age))
    if not open_seconds or not factor:
        return None

    projected_open = predict_riegel(standard.distance_m, open_seconds, distance_m, RIEGEL_EXPONENT)
    age_graded_time = time_seconds * factor
    score = projected_open / age_graded_time * 100
    return AgeGradeResult(
        score=score,
        age_graded_time_seconds=age_graded_time,
        class_label=classify(score),
        used_factor=factor,
        standard_distance_m=standard.distance_m,
        open_standard_seconds=open_seconds,
    )
