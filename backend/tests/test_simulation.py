"""Tests for the simulated applicant pool."""
import random

from screening.services.features import composite_score
from screening.services.simulation import PROFILE_TIERS, pick_tier, simulate_candidates


def test_same_seed_same_candidates():
    first = [(c.tier, c.vector, c.worked_out) for c in simulate_candidates(25, seed=3)]
    second = [(c.tier, c.vector, c.worked_out) for c in simulate_candidates(25, seed=3)]
    assert first == second


def test_candidates_stay_in_range():
    for candidate in simulate_candidates(300, seed=1):
        assert 1.0 <= candidate.performance_rating <= 5.0
        assert candidate.vector.clamped_fields == ()
        if not candidate.worked_out:
            assert candidate.performance_rating <= 2.5


def test_every_tier_can_be_drawn():
    rng = random.Random(0)
    drawn = {pick_tier(rng).label for _ in range(5000)}
    assert drawn == {tier.label for tier in PROFILE_TIERS}


def test_stronger_candidates_work_out_more_often():
    candidates = list(simulate_candidates(2000, seed=11))
    strong = [c.worked_out for c in candidates if composite_score(c.vector) >= 75]
    weak = [c.worked_out for c in candidates if composite_score(c.vector) < 45]
    assert strong and weak
    assert sum(strong) / len(strong) > sum(weak) / len(weak)
