"""
Tabular Q-learning hiring agent.

State:    banded candidate profile (see discretizer) — bounded state space
Actions:  HIRE, CONSIDER, REJECT
Learning: one-step Q-learning on realized hiring outcomes; a hiring decision
          is terminal, so the bootstrap term reads the same state
Exploration: ε-greedy with multiplicative decay, floored

Unseen cells start from a composite-score prior, and the shared override
policy keeps an undertrained table from rejecting obviously strong candidates.
"""
import logging

from screening.services.agents.base import DecisionStrategy, clamp01, validate_rating
from screening.services.config import AgentConfig
from screening.services.decisions import (
    ACTIONS, CONSIDER, HIRE, REJECT, Decision, TrainingExample, normalize_action,
)
from screening.services.discretizer import CandidateState, discretize, state_space_size
from screening.services.features import FeatureVector, composite_score
from screening.services.q_table import QTable

logger = logging.getLogger(__name__)

# ─── Constants ────────────────────────────────────────────────────────────────

# Reward when no performance rating was reported
DEFAULT_PERFORMANCE_REWARD = 0.5

# (minimum rating, reward); first match wins
PERFORMANCE_REWARDS = (
    (4.5, 0.9),
    (4.0, 0.7),
    (3.0, 0.3),
    (2.0, -0.2),
)
POOR_PERFORMANCE_REWARD = -0.6

BAD_HIRE_REWARD = -0.6
CONSIDER_HIRED_SCALE = 0.5
CONSIDER_NOT_HIRED_REWARD = 0.2
CORRECT_REJECT_REWARD = 0.6
MISSED_CANDIDATE_REWARD = -0.8
MISSED_STRONG_CANDIDATE_REWARD = -0.9
STRONG_RATING = 4.0

# Confidence blend: calibrated composite vs Q-value margin
CALIBRATION_WEIGHT = 0.7
MARGIN_WEIGHT = 0.3
CONSIDER_CENTER = 55.0
CONSIDER_SPREAD = 45.0


# ─── Reward ──────────────────────────────────────────────────────────────────

def performance_reward(rating: float | None) -> float:
    if rating is None:
        return DEFAULT_PERFORMANCE_REWARD
    for minimum, reward in PERFORMANCE_REWARDS:
        if rating >= minimum:
            return reward
    return POOR_PERFORMANCE_REWARD


def compute_reward(action: str, outcome: bool, rating: float | None = None) -> float:
    """
    Asymmetric reward for a decision once its outcome is known.

    Wrongly rejecting a good candidate costs more than a bad hire; a correct
    rejection earns less than a great hire.
    """
    if action == HIRE:
        return performance_reward(rating) if outcome else BAD_HIRE_REWARD
    if action == CONSIDER:
        return CONSIDER_HIRED_SCALE * performance_reward(rating) if outcome else CONSIDER_NOT_HIRED_REWARD
    if not outcome:
        return CORRECT_REJECT_REWARD
    if rating is not None and rating >= STRONG_RATING:
        return MISSED_STRONG_CANDIDATE_REWARD
    return MISSED_CANDIDATE_REWARD


def calibrated_confidence(action: str, composite: float) -> float:
    """How well the composite score supports an action, 0-1."""
    if action == HIRE:
        return composite / 100.0
    if action == REJECT:
        return 1.0 - composite / 100.0
    closeness = 1.0 - abs(composite - CONSIDER_CENTER) / CONSIDER_SPREAD
    return 0.5 + 0.3 * max(0.0, closeness)


def margin_confidence(action: str, q_values: dict[str, float]) -> float:
    """0.5 plus the (clamped) lead of the action over its best alternative."""
    best_other = max(q for a, q in q_values.items() if a != action)
    return 0.5 + max(-0.5, min(0.5, q_values[action] - best_other))


# ─── Strategy ────────────────────────────────────────────────────────────────

class QLearningStrategy(DecisionStrategy):
    agent_type = "rl"

    def __init__(self, config: AgentConfig | None = None):
        super().__init__(config)
        self.q_table = QTable()
        self.exploration_rate = self.exploration_cap

    @property
    def exploration_cap(self) -> float:
        return max(0.0, min(1.0, self.config.exploration_rate))

    @property
    def exploration_floor(self) -> float:
        return min(max(0.0, self.config.exploration_floor), self.exploration_cap)

    # ─── Decide ──────────────────────────────────────────────────────────────

    def select_action(self, state: CandidateState) -> tuple[str, bool]:
        """ε-greedy over the state's Q-values. Returns (action, explored)."""
        if self.exploration_rate > 0 and self.rng.random() < self.exploration_rate:
            return self.rng.choice(ACTIONS), True
        q_values = self.q_table.values(state)
        # ties resolve in ACTIONS order
        return max(ACTIONS, key=lambda a: q_values[a]), False

    def _decide(self, vector: FeatureVector, job_description: str | None) -> Decision:
        state = discretize(vector)
        q_values = self.q_table.values(state)
        composite = composite_score(vector)
        action, explored = self.select_action(state)

        def confidence(final: str) -> float:
            return clamp01(
                CALIBRATION_WEIGHT * calibrated_confidence(final, composite)
                + MARGIN_WEIGHT * margin_confidence(final, q_values)
            )

        detail = "Learned policy: " + ", ".join(f"Q({a})={q_values[a]:.3f}" for a in ACTIONS)
        if explored:
            detail += f"; exploratory pick (ε={self.exploration_rate:.3f})"

        decision = self._finalize(
            vector, action, confidence, lambda final: q_values[final],
            job_description, detail=detail, state=state,
        )
        logger.debug(
            "Decide: state=%s pick=%s final=%s explored=%s composite=%.2f",
            state, action, decision.decision, explored, composite,
        )
        return decision

    # ─── Learn ───────────────────────────────────────────────────────────────

    def learn(
        self,
        state: CandidateState,
        action: str,
        outcome: bool,
        performance_rating: float | None = None,
        candidate_id: str | None = None,
    ) -> TrainingExample:
        """
        Learn from one outcome in an already discretized state and record it
        in the training history, like train() does for a feature vector.
        """
        action = normalize_action(action)
        rating = validate_rating(performance_rating)
        outcome = bool(outcome)

        example = self._update(state, action, outcome, rating)
        example.candidate_id = candidate_id
        self._record_training(example)
        return example

    def _update(self, state: CandidateState, action: str, outcome: bool, rating: float | None) -> TrainingExample:
        """
        Q(s,a) ← Q(s,a) + α[r + γ·max_a' Q(s,a') − Q(s,a)]
        """
        reward = compute_reward(action, outcome, rating)
        old_q = self.q_table.get(state, action)
        max_q_next = self.q_table.max_q(state)

        td_target = reward + self.config.discount_factor * max_q_next
        td_error = td_target - old_q
        new_q = old_q + self.config.learning_rate * td_error
        self.q_table.update(state, action, new_q, reward=reward)

        logger.info(
            "Q-update: Q(%s, %s) %.4f -> %.4f (reward=%.2f, td_error=%.4f)",
            state, action, old_q, new_q, reward, td_error,
        )
        self.decay_exploration()

        return TrainingExample(
            state=state,
            action=action,
            outcome=outcome,
            performance_rating=rating,
            reward=reward,
            q_before=old_q,
            q_after=new_q,
        )

    def _train(self, vector, action, outcome, rating) -> TrainingExample:
        return self._update(discretize(vector), action, outcome, rating)

    def decay_exploration(self) -> float:
        self.exploration_rate = max(self.exploration_floor, self.exploration_rate * self.config.exploration_decay)
        return self.exploration_rate

    # ─── Model state ─────────────────────────────────────────────────────────

    def _model_insights(self) -> dict:
        return {
            "explorationRate": round(self.exploration_rate, 6),
            "qTableSize": len(self.q_table),
            "statesVisited": self.q_table.state_count(),
            "stateSpaceSize": state_space_size(),
            "averageQValue": round(self.q_table.average_value(), 4),
            "learningRate": self.config.learning_rate,
            "discountFactor": self.config.discount_factor,
        }

    def _export_model(self) -> dict:
        return {
            "qTable": self.q_table.serialize(),
            "explorationRate": self.exploration_rate,
        }

    def _import_model(self, data) -> None:
        data = data if isinstance(data, dict) else {}
        self.q_table = QTable.deserialize(data.get("qTable"))
        rate = data.get("explorationRate")
        if isinstance(rate, (int, float)) and not isinstance(rate, bool):
            self.exploration_rate = max(self.exploration_floor, min(self.exploration_cap, float(rate)))
        else:
            self.exploration_rate = self.exploration_cap

    def _reset_model(self) -> None:
        self.q_table = QTable()
        self.exploration_rate = self.exploration_cap
