"""
DecisionStrategy — the contract every agent variant implements.

A strategy turns a FeatureVector (plus an optional job description) into a
Decision and learns from realized hiring outcomes. The base class owns what
the variants share:

- the override policy that bounds visibly wrong outputs,
- reasoning text (each dimension is reported once, as a strength or a concern),
- bounded decision / training histories and the aggregate counters behind
  insights(),
- export / import of everything above, with the variant's own model state
  nested under "model".
"""
import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Iterable

from screening.services.config import ALGORITHM_VERSIONS, AgentConfig
from screening.services.decisions import (
    ACTIONS, CONSIDER, HIRE, REJECT, Decision, TrainingExample, normalize_action,
)
from screening.services.discretizer import discretize
from screening.services.features import FeatureVector, composite_score, dimension_scores
from screening.services.job_description import DIMENSION_LABELS, top_emphasis

logger = logging.getLogger(__name__)

STATE_SCHEMA_VERSION = 1


# ─── Override policy ─────────────────────────────────────────────────────────

def apply_overrides(
    action: str, vector: FeatureVector, composite: float, config: AgentConfig
) -> tuple[str, str | None]:
    """
    Deterministic rules applied after the learned/heuristic pick, in priority order:

    1. composite >= force_hire_threshold        -> HIRE
    2. composite >= no_reject_threshold         -> never REJECT (CONSIDER)
    3. technical or communication above the
       strong_signal_threshold                  -> never REJECT (CONSIDER)

    Returns (action, override name or None).
    """
    if composite >= config.force_hire_threshold:
        return HIRE, None if action == HIRE else "force_hire"

    if action != REJECT:
        return action, None

    if composite >= config.no_reject_threshold:
        return CONSIDER, "no_reject_high_score"

    if max(vector.technical, vector.communication) > config.strong_signal_threshold:
        return CONSIDER, "no_reject_strong_signal"

    return action, None


# ─── Reasoning ───────────────────────────────────────────────────────────────

def _assess(vector: FeatureVector) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """Split dimensions into (attr, text) strengths and concerns. A dimension lands in at most one list."""
    strengths: list[tuple[str, str]] = []
    concerns: list[tuple[str, str]] = []

    def classify(attr, strong, strong_text, weak, weak_text, good=None, good_text=None):
        if strong:
            strengths.append((attr, strong_text))
        elif good:
            strengths.append((attr, good_text))
        elif weak:
            concerns.append((attr, weak_text))

    v = vector
    classify("technical", v.technical >= 75, "Excellent technical skills",
             v.technical < 40, "Limited technical background",
             v.technical >= 60, "Good technical skills")
    classify("experience_years", v.experience_years >= 10, "Extensive industry experience",
             v.experience_years < 2, "Early career stage",
             v.experience_years >= 5, "Solid experience level")
    classify("education_level", v.education_level >= 9, "Advanced degree holder",
             v.education_level <= 3, "Limited formal education")
    classify("communication", v.communication >= 75, "Strong communication skills",
             v.communication < 50, "Communication needs improvement")
    classify("leadership", v.leadership >= 70, "Demonstrated leadership abilities",
             v.leadership < 30, "Little leadership evidence")
    classify("culture_fit", v.culture_fit >= 75, "Excellent culture alignment",
             v.culture_fit < 50, "Culture fit concerns")
    return strengths, concerns


OVERRIDE_TEXT = {
    "force_hire": "Override: composite score {composite:.0f} meets the {threshold:.0f} bar, so the decision is HIRE",
    "no_reject_high_score": "Override: composite score {composite:.0f} is too high to reject; escalated to CONSIDER",
    "no_reject_strong_signal": "Override: an exceptional technical or communication score rules out REJECT; escalated to CONSIDER",
}


def build_reasoning(
    vector: FeatureVector,
    action: str,
    composite: float,
    override: str | None,
    config: AgentConfig,
    job_description: str | None = None,
    detail: str | None = None,
) -> list[str]:
    strengths, concerns = _assess(vector)
    lines = []

    if action == HIRE:
        top = " and ".join(text for _, text in strengths[:2]) or "Well-rounded profile"
        lines.append(f"Strong candidate: {top} (composite {composite:.0f}/100)")
    elif action == REJECT:
        first = concerns[0][1] if concerns else "Does not meet role requirements"
        lines.append(f"Not recommended: {first} (composite {composite:.0f}/100)")
    else:
        lines.append(f"Requires review: shows potential but needs further evaluation (composite {composite:.0f}/100)")

    if strengths:
        lines.append("Strengths: " + ", ".join(text for _, text in strengths))
    if concerns:
        lines.append("Areas for consideration: " + ", ".join(text for _, text in concerns))

    if override:
        lines.append(OVERRIDE_TEXT[override].format(composite=composite, threshold=config.force_hire_threshold))

    emphasis = top_emphasis(job_description)
    if emphasis:
        strong_attrs = {attr for attr, _ in strengths}
        weak_attrs = {attr for attr, _ in concerns}
        parts = []
        for attr in emphasis:
            label = DIMENSION_LABELS[attr]
            if attr in strong_attrs:
                parts.append(f"{label} (meets)")
            elif attr in weak_attrs:
                parts.append(f"{label} (gap)")
            else:
                parts.append(f"{label} (partial)")
        lines.append("Job description emphasis: " + ", ".join(parts))

    if detail:
        lines.append(detail)
    return lines


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def is_correct(action: str, outcome: bool) -> bool:
    """Whether a decision agreed with the realized outcome."""
    if action == REJECT:
        return not outcome
    return bool(outcome)


def validate_rating(performance_rating) -> float | None:
    if performance_rating is None:
        return None
    rating = float(performance_rating)
    if not 1.0 <= rating <= 5.0:
        raise ValueError("performance_rating must be between 1 and 5")
    return rating


# ─── Strategy base class ─────────────────────────────────────────────────────

class DecisionStrategy(ABC):
    agent_type: str = ""

    def __init__(self, config: AgentConfig | None = None):
        self.config = config or AgentConfig()
        self.rng = random.Random(self.config.random_seed)
        self._reset_tracking()

    def _reset_tracking(self):
        self._decisions: deque[dict] = deque(maxlen=self.config.max_decision_history)
        self._training: deque[TrainingExample] = deque(maxlen=self.config.max_training_history)
        self.total_decisions = 0
        self.total_training = 0
        self.correct_decisions = 0
        self.successful_hires = 0
        self.distribution = {action: 0 for action in ACTIONS}

    @property
    def algorithm_version(self) -> str:
        return ALGORITHM_VERSIONS[self.agent_type]

    # ─── Decide ──────────────────────────────────────────────────────────────

    def decide(
        self, vector: FeatureVector, job_description: str | None = None, candidate_id: str | None = None
    ) -> Decision:
        decision = self.evaluate(vector, job_description)
        decision.candidate_id = candidate_id
        self.total_decisions += 1
        self.distribution[decision.decision] += 1
        self._decisions.append(decision.to_dict())
        return decision

    def evaluate(self, vector: FeatureVector, job_description: str | None = None) -> Decision:
        """Decide without recording the decision in history or counters."""
        return self._decide(vector, job_description)

    @abstractmethod
    def _decide(self, vector: FeatureVector, job_description: str | None) -> Decision:
        ...

    def _finalize(
        self,
        vector: FeatureVector,
        action: str,
        confidence: float | Callable[[str], float],
        q_value: float | Callable[[str], float],
        job_description: str | None,
        detail: str | None = None,
        state: str | None = None,
    ) -> Decision:
        """
        Apply the override policy and assemble the Decision.

        confidence and q_value may be callables of the final action, for
        strategies whose numbers depend on which action survived the overrides.
        """
        composite = composite_score(vector)
        final, override = apply_overrides(action, vector, composite, self.config)
        if callable(confidence):
            confidence = confidence(final)
        if callable(q_value):
            q_value = q_value(final)
        if composite >= self.config.force_hire_threshold:
            # holds whether or not the learned pick already was HIRE
            confidence = max(confidence, composite / 100.0)
        elif override:
            confidence = max(confidence, 0.5)

        return Decision(
            decision=final,
            confidence=round(clamp01(confidence), 4),
            q_value=round(q_value, 4),
            reasoning=build_reasoning(vector, final, composite, override, self.config, job_description, detail),
            scores=dimension_scores(vector),
            agent_type=self.agent_type,
            algorithm_version=self.algorithm_version,
            state=state or discretize(vector),
            composite_score=composite,
            override=override,
            clamped_fields=vector.clamped_fields,
        )

    # ─── Learn ───────────────────────────────────────────────────────────────

    def train(
        self,
        vector: FeatureVector,
        action: str,
        outcome: bool,
        performance_rating: float | None = None,
        candidate_id: str | None = None,
    ) -> TrainingExample:
        action = normalize_action(action)
        rating = validate_rating(performance_rating)
        outcome = bool(outcome)

        example = self._train(vector, action, outcome, rating)
        example.candidate_id = candidate_id
        self._record_training(example)
        return example

    def _record_training(self, example: TrainingExample):
        self.total_training += 1
        if is_correct(example.action, example.outcome):
            self.correct_decisions += 1
            if example.action == HIRE:
                self.successful_hires += 1
        self._training.append(example)

    @abstractmethod
    def _train(
        self, vector: FeatureVector, action: str, outcome: bool, rating: float | None
    ) -> TrainingExample:
        ...

    def batch_train(self, outcomes: Iterable[dict]) -> list[TrainingExample]:
        """Train on many outcomes: dicts with features, action, outcome and optional performance_rating."""
        examples = []
        for item in outcomes:
            vector = item["features"]
            if not isinstance(vector, FeatureVector):
                vector = FeatureVector.from_mapping(vector)
            examples.append(self.train(
                vector,
                item["action"],
                item["outcome"],
                item.get("performance_rating"),
                item.get("candidate_id"),
            ))
        return examples

    # ─── Reporting ───────────────────────────────────────────────────────────

    def accuracy(self) -> float:
        if not self.total_training:
            return 0.0
        return round(self.correct_decisions / self.total_training * 100.0, 2)

    def insights(self) -> dict:
        data = {
            "agentType": self.agent_type,
            "algorithmVersion": self.algorithm_version,
            "status": "trained" if self.total_training else "untrained",
            "totalDecisions": self.total_decisions,
            "totalTraining": self.total_training,
            "successfulHires": self.successful_hires,
            "accuracy": self.accuracy(),
            "decisionDistribution": dict(self.distribution),
            "trainingExamples": len(self._training),
        }
        data.update(self._model_insights())
        return data

    def _model_insights(self) -> dict:
        return {}

    def recent_decisions(self, limit: int = 10) -> list[dict]:
        if limit <= 0:
            return []
        return list(self._decisions)[-limit:]

    def training_history(self, limit: int | None = None) -> list[dict]:
        history = [example.to_dict() for example in self._training]
        return history[-limit:] if limit else history

    # ─── State snapshot ──────────────────────────────────────────────────────

    def export_state(self) -> dict:
        return {
            "version": STATE_SCHEMA_VERSION,
            "agentType": self.agent_type,
            "algorithmVersion": self.algorithm_version,
            "counters": {
                "totalDecisions": self.total_decisions,
                "totalTraining": self.total_training,
                "correctDecisions": self.correct_decisions,
                "successfulHires": self.successful_hires,
                "distribution": dict(self.distribution),
            },
            "decisionHistory": list(self._decisions),
            "trainingHistory": self.training_history(),
            "model": self._export_model(),
        }

    def import_state(self, data) -> bool:
        """Restore a snapshot. Unknown or malformed parts are skipped; returns False if nothing usable was found."""
        if not isinstance(data, dict):
            return False
        if data.get("agentType") not in (None, self.agent_type):
            logger.warning("Refusing %s snapshot for %s agent", data.get("agentType"), self.agent_type)
            return False

        # parse everything before touching current state
        decisions = data.get("decisionHistory")
        decisions = [item for item in decisions if isinstance(item, dict)] if isinstance(decisions, list) else []
        training = data.get("trainingHistory")
        examples = []
        for item in training if isinstance(training, list) else []:
            try:
                examples.append(TrainingExample.from_dict(item))
            except (AttributeError, TypeError, ValueError):
                logger.debug("Skipping malformed training example in %s snapshot", self.agent_type)

        self._reset_tracking()
        counters = data.get("counters") if isinstance(data.get("counters"), dict) else {}
        self.total_decisions = _as_int(counters.get("totalDecisions"))
        self.total_training = _as_int(counters.get("totalTraining"))
        self.correct_decisions = _as_int(counters.get("correctDecisions"))
        self.successful_hires = _as_int(counters.get("successfulHires"))
        distribution = counters.get("distribution") if isinstance(counters.get("distribution"), dict) else {}
        for action in ACTIONS:
            self.distribution[action] = _as_int(distribution.get(action))

        self._decisions.extend(decisions)
        self._training.extend(examples)

        self._import_model(data.get("model"))
        return True

    def reset(self):
        self._reset_tracking()
        self.rng = random.Random(self.config.random_seed)
        self._reset_model()

    @abstractmethod
    def _export_model(self) -> dict:
        ...

    @abstractmethod
    def _import_model(self, data) -> None:
        ...

    @abstractmethod
    def _reset_model(self) -> None:
        ...


def _as_int(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
