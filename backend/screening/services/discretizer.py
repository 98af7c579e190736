"""
State discretizer — maps a FeatureVector onto a finite Q-table state.

Each dimension is banded independently; the band indices are joined in a
fixed order into the state key:

    "technical,experienceYears,educationLevel,communication,leadership,cultureFit"

  technical / communication / leadership / cultureFit   ten-point bands 0-9
  experienceYears   edges 1, 3, 5, 8, 12 years   → bands 0-5
  educationLevel    edges 3, 5, 7, 9             → bands 0-4

Vectors in the same bands share a state; that is the generalization the
Q-table relies on.
"""
from bisect import bisect_right
from dataclasses import dataclass

from screening.services.features import FEATURE_SPECS, FeatureVector, composite_from_values

CandidateState = str


@dataclass(frozen=True)
class Banding:
    """Upper-exclusive band edges over a closed [minimum, maximum] range."""
    attr: str
    edges: tuple[float, ...]
    minimum: float
    maximum: float

    @property
    def band_count(self) -> int:
        return len(self.edges) + 1

    def band(self, value: float) -> int:
        value = max(self.minimum, min(self.maximum, value))
        return bisect_right(self.edges, value) if value < self.maximum else self.band_count - 1

    def midpoint(self, band: int) -> float:
        band = max(0, min(self.band_count - 1, band))
        bounds = (self.minimum,) + self.edges + (self.maximum,)
        return (bounds[band] + bounds[band + 1]) / 2.0


_RANGES = {spec.attr: (spec.minimum, spec.maximum) for spec in FEATURE_SPECS}
_TEN_POINT = tuple(float(edge) for edge in range(10, 100, 10))

BANDINGS: tuple[Banding, ...] = (
    Banding("technical", _TEN_POINT, *_RANGES["technical"]),
    Banding("experience_years", (1.0, 3.0, 5.0, 8.0, 12.0), *_RANGES["experience_years"]),
    Banding("education_level", (3.0, 5.0, 7.0, 9.0), *_RANGES["education_level"]),
    Banding("communication", _TEN_POINT, *_RANGES["communication"]),
    Banding("leadership", _TEN_POINT, *_RANGES["leadership"]),
    Banding("culture_fit", _TEN_POINT, *_RANGES["culture_fit"]),
)


def discretize(vector: FeatureVector) -> CandidateState:
    return ",".join(str(b.band(getattr(vector, b.attr))) for b in BANDINGS)


def parse_state(state: CandidateState) -> tuple[int, ...] | None:
    """Band indices of a state key, or None when the key is not well-formed."""
    parts = state.split(",") if isinstance(state, str) else []
    if len(parts) != len(BANDINGS):
        return None
    try:
        bands = tuple(int(p) for p in parts)
    except ValueError:
        return None
    if any(not 0 <= idx < b.band_count for idx, b in zip(bands, BANDINGS)):
        return None
    return bands


def state_profile(state: CandidateState) -> dict[str, float] | None:
    """Representative (band midpoint) value of each dimension for a state."""
    bands = parse_state(state)
    if bands is None:
        return None
    return {b.attr: b.midpoint(idx) for idx, b in zip(bands, BANDINGS)}


def state_composite(state: CandidateState) -> float | None:
    """Composite score of a state's representative profile, 0-100."""
    profile = state_profile(state)
    if profile is None:
        return None
    return composite_from_values(**profile)


def state_space_size() -> int:
    size = 1
    for b in BANDINGS:
        size *= b.band_count
    return size
