"""
Neural hiring agent.

A small 6 → 16 → 8 → 1 feed-forward network (ReLU hidden layers, sigmoid
output) predicts how likely a candidate is to work out. Its logit is added to
the logit of a linear prior built from the composite weights, so an untrained
network reproduces the composite score and training only has to learn the
correction.

Each realized outcome is one back-propagation step toward 0.85 (the candidate
worked out) or 0.15 (they did not).
"""
import logging

import numpy as np

from screening.services.agents.base import DecisionStrategy
from screening.services.agents.q_learning import compute_reward
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT, Decision, TrainingExample
from screening.services.discretizer import discretize
from screening.services.features import COMPOSITE_WEIGHTS, FeatureVector, experience_percent

logger = logging.getLogger(__name__)

LAYER_SIZES = (6, 16, 8, 1)
NETWORK_LEARNING_RATE = 0.05
# Scale of the output layer at init; keeps the untrained correction near zero
OUTPUT_INIT_SCALE = 0.1

GOOD_TARGET = 0.85
BAD_TARGET = 0.15
SUCCESS_RATING = 3.0

PRIOR_EPSILON = 0.01

# Input order: technical, experience, education, communication, leadership, culture fit
PRIOR_WEIGHTS = np.array([
    COMPOSITE_WEIGHTS["technical"],
    COMPOSITE_WEIGHTS["experience"],
    COMPOSITE_WEIGHTS["education"],
    COMPOSITE_WEIGHTS["communication"],
    COMPOSITE_WEIGHTS["leadership"],
    COMPOSITE_WEIGHTS["culture_fit"],
])


def encode(vector: FeatureVector) -> np.ndarray:
    """Feature vector → network input, every dimension scaled to 0-1."""
    return np.array([
        vector.technical / 100.0,
        experience_percent(vector.experience_years) / 100.0,
        vector.education_level / 10.0,
        vector.communication / 100.0,
        vector.leadership / 100.0,
        vector.culture_fit / 100.0,
    ])


def sigmoid(z):
    return 1.0 / (1.0 + np.exp(-z))


def prior_logit(x: np.ndarray) -> float:
    p = float(np.clip(PRIOR_WEIGHTS @ x, PRIOR_EPSILON, 1.0 - PRIOR_EPSILON))
    return float(np.log(p / (1.0 - p)))


class NeuralStrategy(DecisionStrategy):
    agent_type = "intelligent"

    def __init__(self, config: AgentConfig | None = None):
        super().__init__(config)
        self.weights: list[np.ndarray] = []
        self.biases: list[np.ndarray] = []
        self.training_steps = 0
        self.last_loss: float | None = None
        self._reset_model()

    # ─── Network ─────────────────────────────────────────────────────────────

    def _init_network(self):
        """He-initialised weights from a seeded generator."""
        rng = np.random.default_rng(self.config.random_seed)
        self.weights = []
        self.biases = []
        for fan_in, fan_out in zip(LAYER_SIZES[:-1], LAYER_SIZES[1:]):
            self.weights.append(rng.normal(0.0, np.sqrt(2.0 / fan_in), size=(fan_in, fan_out)))
            self.biases.append(np.zeros(fan_out))
        self.weights[-1] *= OUTPUT_INIT_SCALE

    def _forward(self, x: np.ndarray) -> tuple[float, list[np.ndarray], list[np.ndarray]]:
        """Returns (probability, layer activations, hidden pre-activations)."""
        activations = [x]
        pre_activations = []
        a = x
        for w, b in zip(self.weights[:-1], self.biases[:-1]):
            z = a @ w + b
            pre_activations.append(z)
            a = np.maximum(z, 0.0)
            activations.append(a)
        logit = float((a @ self.weights[-1] + self.biases[-1])[0]) + prior_logit(x)
        return float(sigmoid(logit)), activations, pre_activations

    def predict(self, vector: FeatureVector) -> float:
        probability, _, _ = self._forward(encode(vector))
        return probability

    def _backprop(self, x: np.ndarray, target: float) -> float:
        """One gradient step on squared error; returns the loss before the step."""
        p, activations, pre_activations = self._forward(x)
        loss = 0.5 * (p - target) ** 2

        delta = np.array([(p - target) * p * (1.0 - p)])
        for layer in range(len(self.weights) - 1, -1, -1):
            grad_w = np.outer(activations[layer], delta)
            grad_b = delta
            if layer > 0:
                delta = (self.weights[layer] @ delta) * (pre_activations[layer - 1] > 0)
            self.weights[layer] -= NETWORK_LEARNING_RATE * grad_w
            self.biases[layer] -= NETWORK_LEARNING_RATE * grad_b
        return loss

    # ─── Decide ──────────────────────────────────────────────────────────────

    def classify(self, score: float) -> str:
        if score >= self.config.hire_threshold:
            return HIRE
        if score >= self.config.consider_threshold:
            return CONSIDER
        return REJECT

    def confidence(self, x: np.ndarray, score: float) -> float:
        # uneven profiles are harder to call
        consistency = 1.0 - min(float(np.std(x)) / 0.5, 1.0)
        distance = min(abs(score - self.config.hire_threshold), abs(score - self.config.consider_threshold))
        return min(0.95, 0.5 + 0.25 * consistency + 0.2 * min(distance / 25.0, 1.0))

    def _decide(self, vector: FeatureVector, job_description: str | None) -> Decision:
        x = encode(vector)
        probability, _, _ = self._forward(x)
        score = probability * 100.0
        action = self.classify(score)

        detail = f"Network score {score:.1f}/100 (prior {PRIOR_WEIGHTS @ x * 100.0:.1f})"
        return self._finalize(
            vector, action, self.confidence(x, score), probability, job_description, detail=detail,
        )

    # ─── Learn ───────────────────────────────────────────────────────────────

    def _train(self, vector, action, outcome, rating) -> TrainingExample:
        x = encode(vector)
        worked_out = outcome and (rating is None or rating >= SUCCESS_RATING)
        target = GOOD_TARGET if worked_out else BAD_TARGET

        before = self.predict(vector)
        self.last_loss = self._backprop(x, target)
        self.training_steps += 1
        after = self.predict(vector)

        logger.info(
            "Network update: target=%.2f prediction %.4f -> %.4f (loss=%.5f)",
            target, before, after, self.last_loss,
        )
        return TrainingExample(
            state=discretize(vector),
            action=action,
            outcome=outcome,
            performance_rating=rating,
            reward=compute_reward(action, outcome, rating),
            q_before=round(before, 4),
            q_after=round(after, 4),
        )

    # ─── Model state ─────────────────────────────────────────────────────────

    def _model_insights(self) -> dict:
        return {
            "networkArchitecture": "-".join(str(size) for size in LAYER_SIZES),
            "trainingSteps": self.training_steps,
            "lastLoss": None if self.last_loss is None else round(self.last_loss, 6),
            "hireThreshold": self.config.hire_threshold,
            "considerThreshold": self.config.consider_threshold,
        }

    def _export_model(self) -> dict:
        return {
            "layers": list(LAYER_SIZES),
            "weights": [w.tolist() for w in self.weights],
            "biases": [b.tolist() for b in self.biases],
            "trainingSteps": self.training_steps,
        }

    def _import_model(self, data) -> None:
        self._reset_model()
        if not isinstance(data, dict) or data.get("layers") != list(LAYER_SIZES):
            return
        try:
            weights = [np.asarray(w, dtype=float) for w in data["weights"]]
            biases = [np.asarray(b, dtype=float) for b in data["biases"]]
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed network weights in %s snapshot", self.agent_type)
            return

        shapes_ok = (
            len(weights) == len(self.weights)
            and len(biases) == len(self.biases)
            and all(w.shape == cur.shape for w, cur in zip(weights, self.weights))
            and all(b.shape == cur.shape for b, cur in zip(biases, self.biases))
        )
        if not shapes_ok:
            logger.warning("Ignoring network weights with unexpected shapes in %s snapshot", self.agent_type)
            return

        self.weights = weights
        self.biases = biases
        steps = data.get("trainingSteps")
        self.training_steps = steps if isinstance(steps, int) and steps >= 0 else 0

    def _reset_model(self) -> None:
        self._init_network()
        self.training_steps = 0
        self.last_loss = None
