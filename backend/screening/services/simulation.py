"""
Simulated hiring outcomes for warm-starting the agents.

Candidates are drawn from weighted profile tiers (elite through weak) that
roughly mirror a real applicant pool. Whether a candidate works out is
random but biased by their composite score, since real hiring is noisy.
"""
import random
from dataclasses import dataclass

from screening.services.features import FeatureVector, composite_score


@dataclass(frozen=True)
class ProfileTier:
    label: str
    weight: float
    technical: tuple[float, float]
    experience_years: tuple[float, float]
    education_level: tuple[int, int]
    communication: tuple[float, float]
    leadership: tuple[float, float]
    culture_fit: tuple[float, float]


PROFILE_TIERS: tuple[ProfileTier, ...] = (
    ProfileTier("Distinguished expert", 0.02, (90, 99), (10, 20), (8, 10), (80, 95), (75, 92), (80, 95)),
    ProfileTier("Principal / staff", 0.05, (82, 95), (6, 15), (7, 10), (75, 92), (70, 90), (75, 92)),
    ProfileTier("Senior engineer", 0.10, (72, 88), (4, 10), (6, 9), (65, 88), (55, 80), (68, 88)),
    ProfileTier("Tech lead", 0.06, (65, 80), (6, 14), (5, 9), (70, 88), (65, 85), (68, 87)),
    ProfileTier("Strong mid-level", 0.14, (65, 82), (2, 7), (5, 9), (60, 82), (45, 75), (60, 85)),
    ProfileTier("Exceptional graduate", 0.03, (72, 86), (0, 2), (8, 10), (68, 85), (35, 62), (70, 88)),
    ProfileTier("Great communicator", 0.03, (55, 72), (2, 5), (5, 8), (75, 90), (65, 85), (75, 90)),
    ProfileTier("Brilliant introvert", 0.03, (80, 95), (4, 12), (6, 9), (25, 45), (15, 35), (32, 58)),
    ProfileTier("Junior engineer", 0.17, (50, 72), (0.5, 4), (5, 9), (50, 75), (30, 60), (52, 80)),
    ProfileTier("Outdated senior", 0.04, (48, 68), (8, 18), (3, 6), (45, 65), (48, 70), (45, 68)),
    ProfileTier("Below average", 0.15, (35, 60), (0, 4), (4, 8), (45, 70), (25, 55), (45, 75)),
    ProfileTier("Poor fit", 0.10, (25, 48), (0, 6), (3, 7), (35, 58), (20, 45), (38, 65)),
    ProfileTier("Weak overall", 0.08, (5, 35), (0, 3), (1, 5), (12, 45), (5, 32), (18, 52)),
)

# ± spread of the random factor applied to the composite-based hire probability
HIRE_NOISE = 0.3


@dataclass(frozen=True)
class SimulatedCandidate:
    tier: str
    vector: FeatureVector
    worked_out: bool
    performance_rating: float


def _uniform(rng: random.Random, bounds) -> float:
    low, high = bounds
    return low + rng.random() * (high - low)


def pick_tier(rng: random.Random) -> ProfileTier:
    return rng.choices(PROFILE_TIERS, weights=[t.weight for t in PROFILE_TIERS], k=1)[0]


def simulate_candidate(rng: random.Random) -> SimulatedCandidate:
    tier = pick_tier(rng)
    vector = FeatureVector.of(
        technical=round(_uniform(rng, tier.technical)),
        experience_years=round(_uniform(rng, tier.experience_years), 1),
        education_level=round(_uniform(rng, tier.education_level)),
        communication=round(_uniform(rng, tier.communication)),
        leadership=round(_uniform(rng, tier.leadership)),
        culture_fit=round(_uniform(rng, tier.culture_fit)),
    )
    quality = composite_score(vector) / 100.0
    probability = max(0.05, min(0.95, quality + (rng.random() - 0.5) * HIRE_NOISE))
    worked_out = rng.random() < probability
    rating = max(1.0, min(5.0, quality * 5.0 + (rng.random() - 0.5)))
    if not worked_out:
        rating = min(rating, 2.5)
    return SimulatedCandidate(tier.label, vector, worked_out, round(rating, 1))


def simulate_candidates(count: int, seed: int | None = None):
    rng = random.Random(seed)
    for _ in range(count):
        yield simulate_candidate(rng)
