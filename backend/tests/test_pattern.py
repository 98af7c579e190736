"""Tests for the pattern-matching agent."""
import pytest

from screening.services.agents.pattern import PATTERNS, PatternStrategy
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT
from screening.services.features import FeatureVector, composite_score

# composite ≈ 60.7, matches no pattern and triggers no override
MIDDLE = FeatureVector.of(technical=65, experience_years=4, education_level=6,
                          communication=65, leadership=55, culture_fit=65)

# strong technically, weak communicator
SPECIALIST = FeatureVector.of(technical=90, experience_years=8, education_level=6,
                              communication=40, leadership=50, culture_fit=60)


def _pattern(name):
    return next(p for p in PATTERNS if p.name == name)


@pytest.fixture
def agent(config):
    return PatternStrategy(config)


class TestScoring:
    def test_strong_candidate_matches_positive_patterns(self, agent, strong_vector):
        score, matched = agent.score(strong_vector)
        assert {p.name for p in matched} == {
            "senior_technologist", "communicator_leader", "well_rounded",
            "culture_champion", "academic_technologist",
        }
        assert score == 100.0

    def test_weak_candidate_matches_negative_patterns(self, agent, weak_vector):
        score, matched = agent.score(weak_vector)
        assert {p.name for p in matched} == {
            "weak_technical_foundation", "communication_gap", "no_track_record",
        }
        assert score == pytest.approx(composite_score(weak_vector) - 17.0)

    def test_untrained_points_equal_base_points(self, agent):
        for pattern in PATTERNS:
            assert agent.pattern_points(pattern) == pytest.approx(pattern.points)

    def test_base_score_without_job_description_is_composite(self, agent, strong_vector):
        assert agent.base_score(strong_vector) == pytest.approx(composite_score(strong_vector))

    def test_job_description_shifts_weights(self, agent):
        plain = agent.base_score(SPECIALIST)
        technical_role = agent.base_score(SPECIALIST, "Senior Python engineer for backend services on AWS")
        client_role = agent.base_score(
            SPECIALIST, "Client-facing role working with stakeholders; strong communication required",
        )
        assert technical_role > plain > client_role


class TestDecide:
    def test_strong_hire_weak_reject(self, agent, strong_vector, weak_vector):
        assert agent.decide(strong_vector).decision == HIRE
        assert agent.decide(weak_vector).decision == REJECT

    def test_middle_candidate_is_considered(self, agent):
        decision = agent.decide(MIDDLE)
        assert decision.decision == CONSIDER
        assert decision.override is None
        assert 0.55 <= decision.confidence <= 0.95

    def test_thresholds_are_configurable(self):
        agent = PatternStrategy(AgentConfig(consider_threshold=65.0))
        assert agent.decide(MIDDLE).decision == REJECT

    def test_reasoning_lists_matched_patterns(self, agent, weak_vector):
        decision = agent.decide(weak_vector)
        detail = decision.reasoning[-1]
        assert detail.startswith("Pattern score")
        assert "Weak technical foundation (-8.0)" in detail

    def test_decide_is_recorded(self, agent, strong_vector):
        agent.decide(strong_vector, candidate_id="c-1")
        insights = agent.insights()
        assert insights["totalDecisions"] == 1
        assert insights["decisionDistribution"][HIRE] == 1
        assert agent.recent_decisions()[0]["candidateId"] == "c-1"


class TestLearn:
    def test_successful_hire_strengthens_matched_patterns(self, agent, strong_vector):
        agent.train(strong_vector, HIRE, True, 5)
        assert agent.pattern_points(_pattern("senior_technologist")) == pytest.approx(7.2)
        # unmatched patterns keep the prior
        assert agent.pattern_points(_pattern("communication_gap")) == pytest.approx(-5.0)

    def test_failed_hire_weakens_matched_patterns(self, agent, strong_vector):
        agent.train(strong_vector, HIRE, False)
        assert agent.pattern_points(_pattern("senior_technologist")) == pytest.approx(4.8)

    def test_low_rating_does_not_count_as_success(self, agent, strong_vector):
        agent.train(strong_vector, HIRE, True, 2)
        assert agent.stats["senior_technologist"].successes == 0
        assert agent.stats["senior_technologist"].trials == 1

    def test_vindicated_negative_pattern_gets_more_negative(self, agent, weak_vector):
        agent.train(weak_vector, REJECT, False)
        assert agent.pattern_points(_pattern("weak_technical_foundation")) == pytest.approx(-9.6)

    def test_training_counts_accuracy(self, agent, strong_vector, weak_vector):
        agent.train(strong_vector, HIRE, True, 4)
        agent.train(weak_vector, REJECT, True)
        insights = agent.insights()
        assert insights["totalTraining"] == 2
        assert insights["successfulHires"] == 1
        assert insights["accuracy"] == 50.0
        assert insights["status"] == "trained"

    def test_training_example_records_scores(self, agent, strong_vector):
        example = agent.train(strong_vector, "hire", True, 5, candidate_id="c-9")
        assert example.action == HIRE
        assert example.candidate_id == "c-9"
        assert example.reward == pytest.approx(0.9)

    def test_invalid_rating_is_rejected(self, agent, strong_vector):
        with pytest.raises(ValueError):
            agent.train(strong_vector, HIRE, True, 7)
        assert agent.total_training == 0


class TestState:
    def test_export_import_round_trip(self, agent, strong_vector, weak_vector):
        agent.train(strong_vector, HIRE, True, 5)
        agent.train(weak_vector, REJECT, False)
        snapshot = agent.export_state()

        restored = PatternStrategy(agent.config)
        assert restored.import_state(snapshot)
        for pattern in PATTERNS:
            assert restored.pattern_points(pattern) == pytest.approx(agent.pattern_points(pattern))
        assert restored.insights()["totalTraining"] == 2
        assert len(restored.training_history()) == 2

    def test_import_skips_malformed_pattern_entries(self, agent):
        assert agent.import_state({"model": {"patterns": {
            "senior_technologist": [1, 5],
            "culture_champion": [3, 2],
            "unknown_pattern": [1, 1],
            "well_rounded": "bad",
        }}})
        assert agent.stats["senior_technologist"].trials == 0
        assert (agent.stats["culture_champion"].trials, agent.stats["culture_champion"].successes) == (3, 2)
        assert "unknown_pattern" not in agent.stats

    def test_import_rejects_other_agent_snapshot(self, agent):
        assert not agent.import_state({"agentType": "rl", "model": {}})
        assert not agent.import_state(["not", "a", "dict"])

    def test_reset(self, agent, strong_vector):
        agent.train(strong_vector, HIRE, True, 5)
        agent.reset()
        assert agent.total_training == 0
        assert agent.pattern_points(_pattern("senior_technologist")) == pytest.approx(6.0)
