"""Tests for the neural agent."""
import numpy as np
import pytest

from screening.services.agents.neural import LAYER_SIZES, NeuralStrategy, encode
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT
from screening.services.features import FeatureVector, composite_score

MIDDLE = FeatureVector.of(technical=65, experience_years=4, education_level=6,
                          communication=65, leadership=55, culture_fit=65)


@pytest.fixture
def agent(config):
    return NeuralStrategy(config)


class TestNetwork:
    def test_layer_shapes(self, agent):
        assert [w.shape for w in agent.weights] == list(zip(LAYER_SIZES[:-1], LAYER_SIZES[1:]))
        assert [b.shape for b in agent.biases] == [(size,) for size in LAYER_SIZES[1:]]

    def test_encode_scales_to_unit_interval(self, strong_vector):
        assert encode(strong_vector) == pytest.approx([0.9, 1.0, 0.8, 0.85, 0.8, 0.85])

    def test_seeded_init_is_deterministic(self, config, strong_vector):
        assert NeuralStrategy(config).predict(strong_vector) == NeuralStrategy(config).predict(strong_vector)

    def test_untrained_network_tracks_composite(self, agent, strong_vector, weak_vector):
        for vector in (strong_vector, weak_vector, MIDDLE):
            assert agent.predict(vector) * 100 == pytest.approx(composite_score(vector), abs=5.0)


class TestDecide:
    def test_strong_hire_weak_reject(self, agent, strong_vector, weak_vector):
        assert agent.decide(strong_vector).decision == HIRE
        assert agent.decide(weak_vector).decision == REJECT

    def test_middle_candidate_is_considered(self, agent):
        assert agent.decide(MIDDLE).decision == CONSIDER

    def test_confidence_is_bounded(self, agent, strong_vector, weak_vector):
        for vector in (strong_vector, weak_vector, MIDDLE):
            assert 0.5 <= agent.decide(vector).confidence <= 0.95

    def test_q_value_is_network_probability(self, agent):
        decision = agent.decide(MIDDLE)
        assert decision.q_value == pytest.approx(agent.predict(MIDDLE), abs=1e-4)
        assert decision.reasoning[-1].startswith("Network score")


class TestLearn:
    def test_good_outcome_moves_prediction_up(self, agent):
        before = agent.predict(MIDDLE)
        example = agent.train(MIDDLE, CONSIDER, True, 5)
        assert agent.predict(MIDDLE) > before
        assert example.q_after >= example.q_before

    def test_bad_outcome_moves_prediction_down(self, agent):
        before = agent.predict(MIDDLE)
        agent.train(MIDDLE, HIRE, False)
        assert agent.predict(MIDDLE) < before

    def test_repeated_failures_converge_toward_bad_target(self, agent):
        for _ in range(300):
            agent.train(MIDDLE, HIRE, False)
        assert agent.predict(MIDDLE) < 0.5
        assert agent.decide(MIDDLE).decision == REJECT

    def test_insights_track_training_steps(self, agent, strong_vector):
        agent.train(strong_vector, HIRE, True, 4)
        insights = agent.insights()
        assert insights["trainingSteps"] == 1
        assert insights["lastLoss"] is not None
        assert insights["networkArchitecture"] == "6-16-8-1"


class TestState:
    def test_export_import_round_trip(self, agent, strong_vector):
        for _ in range(5):
            agent.train(MIDDLE, HIRE, False)
        snapshot = agent.export_state()

        restored = NeuralStrategy(AgentConfig(random_seed=7))
        assert restored.import_state(snapshot)
        assert restored.predict(MIDDLE) == pytest.approx(agent.predict(MIDDLE))
        assert restored.training_steps == 5

    def test_mismatched_shapes_keep_fresh_weights(self, agent, config):
        snapshot = agent.export_state()
        snapshot["model"]["weights"][0] = np.zeros((3, 3)).tolist()
        agent.train(MIDDLE, HIRE, False)

        assert agent.import_state(snapshot)
        assert agent.predict(MIDDLE) == pytest.approx(NeuralStrategy(config).predict(MIDDLE))
        assert agent.training_steps == 0

    def test_wrong_architecture_is_ignored(self, agent, config):
        agent.train(MIDDLE, HIRE, False)
        assert agent.import_state({"model": {"layers": [6, 4, 1], "weights": [], "biases": []}})
        assert agent.predict(MIDDLE) == pytest.approx(NeuralStrategy(config).predict(MIDDLE))

    def test_reset_restores_initial_network(self, agent, config):
        agent.train(MIDDLE, HIRE, False)
        agent.reset()
        assert agent.predict(MIDDLE) == pytest.approx(NeuralStrategy(config).predict(MIDDLE))
        assert agent.insights()["trainingSteps"] == 0
