"""
Candidate feature vector — the input every agent variant scores.

Six dimensions, each with a fixed valid range. Out-of-range values are
clamped (and remembered), missing or non-numeric values are rejected.

  technical        0-100
  experienceYears  0-50
  educationLevel   0-10   (HS=2, Bachelor=5, Master=7, PhD=10)
  communication    0-100
  leadership       0-100
  cultureFit       0-100
"""
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from screening.services.errors import FeatureValidationError


@dataclass(frozen=True)
class FeatureSpec:
    attr: str
    wire_name: str
    aliases: tuple[str, ...]
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


FEATURE_SPECS: tuple[FeatureSpec, ...] = (
    FeatureSpec("technical", "technical", ("technicalScore",), 0.0, 100.0),
    FeatureSpec("experience_years", "experienceYears", ("experience_years",), 0.0, 50.0),
    FeatureSpec("education_level", "educationLevel", ("education_level",), 0.0, 10.0),
    FeatureSpec("communication", "communication", ("communicationScore",), 0.0, 100.0),
    FeatureSpec("leadership", "leadership", ("leadershipScore",), 0.0, 100.0),
    FeatureSpec("culture_fit", "cultureFit", ("culture_fit", "cultureFitScore"), 0.0, 100.0),
)

# Composite score weights (sum to 1.0)
COMPOSITE_WEIGHTS = {
    "technical": 0.28,
    "experience": 0.20,
    "communication": 0.18,
    "culture_fit": 0.15,
    "education": 0.12,
    "leadership": 0.07,
}

# Years of experience at which the experience dimension saturates
EXPERIENCE_SATURATION_YEARS = 8.0


@dataclass(frozen=True)
class FeatureVector:
    technical: float
    experience_years: float
    education_level: float
    communication: float
    leadership: float
    culture_fit: float
    clamped_fields: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FeatureVector":
        """Build a vector from a JSON-style mapping, failing loudly on bad input."""
        if not isinstance(data, Mapping):
            raise FeatureValidationError({"features": "Expected an object of named feature scores."})

        errors: dict[str, str] = {}
        values: dict[str, float] = {}
        clamped: list[str] = []

        for spec in FEATURE_SPECS:
            raw = _first_present(data, (spec.wire_name, spec.attr) + spec.aliases)
            if raw is _MISSING or raw is None:
                errors[spec.wire_name] = "This field is required."
                continue
            number = _coerce_number(raw)
            if number is None:
                errors[spec.wire_name] = "A finite number is required."
                continue
            bounded = spec.clamp(number)
            if bounded != number:
                clamped.append(spec.wire_name)
            values[spec.attr] = bounded

        if errors:
            raise FeatureValidationError(errors)

        return cls(**values, clamped_fields=tuple(clamped))

    @classmethod
    def of(cls, **values) -> "FeatureVector":
        """Keyword constructor that clamps like from_mapping (handy in code and tests)."""
        return cls.from_mapping(values)

    def to_dict(self) -> dict:
        return {spec.wire_name: getattr(self, spec.attr) for spec in FEATURE_SPECS}

    def as_list(self) -> list[float]:
        return [getattr(self, spec.attr) for spec in FEATURE_SPECS]


_MISSING = object()


def _first_present(data: Mapping[str, Any], names: tuple[str, ...]):
    for name in names:
        if name in data:
            return data[name]
    return _MISSING


def _coerce_number(raw) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


# ─── Scoring ─────────────────────────────────────────────────────────────────

def experience_percent(years: float) -> float:
    return min(years / EXPERIENCE_SATURATION_YEARS, 1.0) * 100.0


def composite_from_values(
    technical: float,
    experience_years: float,
    education_level: float,
    communication: float,
    leadership: float,
    culture_fit: float,
) -> float:
    return (
        technical * COMPOSITE_WEIGHTS["technical"]
        + experience_percent(experience_years) * COMPOSITE_WEIGHTS["experience"]
        + communication * COMPOSITE_WEIGHTS["communication"]
        + culture_fit * COMPOSITE_WEIGHTS["culture_fit"]
        + education_level * 10.0 * COMPOSITE_WEIGHTS["education"]
        + leadership * COMPOSITE_WEIGHTS["leadership"]
    )


def composite_score(vector: FeatureVector) -> float:
    """ATS-style 0-100 score, independent of any learned state."""
    return round(
        composite_from_values(
            vector.technical,
            vector.experience_years,
            vector.education_level,
            vector.communication,
            vector.leadership,
            vector.culture_fit,
        ),
        2,
    )


def dimension_scores(vector: FeatureVector) -> dict[str, float]:
    """Per-dimension 0-100 breakdown plus the composite."""
    return {
        "technical": round(vector.technical, 1),
        "experience": round(experience_percent(vector.experience_years), 1),
        "education": round(vector.education_level * 10.0, 1),
        "communication": round(vector.communication, 1),
        "leadership": round(vector.leadership, 1),
        "cultureFit": round(vector.culture_fit, 1),
        "composite": composite_score(vector),
    }
