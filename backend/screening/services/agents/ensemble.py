"""
Ensemble agent — majority vote over the pattern, neural and Q-learning agents.

Votes are counted per action; ties go to the most cautious non-final
action (CONSIDER, then HIRE, then REJECT). Confidence is a fixed weighted
average: a member that voted for the winning action contributes its
confidence, a dissenting member contributes 1 - confidence. The shared
override policy applies to the combined result.

The ensemble owns no model of its own. Outcomes are forwarded to every member.
"""
import logging
from collections import Counter

from screening.services.agents.base import DecisionStrategy
from screening.services.agents.q_learning import compute_reward
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT, Decision, TrainingExample
from screening.services.discretizer import discretize
from screening.services.features import FeatureVector

logger = logging.getLogger(__name__)

MEMBER_WEIGHTS = {
    "rl": 0.40,
    "intelligent": 0.35,
    "custom": 0.25,
}

TIE_BREAK_ORDER = (CONSIDER, HIRE, REJECT)


def majority_vote(votes: list[str]) -> str:
    counts = Counter(votes)
    top = max(counts.values())
    return next(action for action in TIE_BREAK_ORDER if counts.get(action) == top)


class EnsembleStrategy(DecisionStrategy):
    agent_type = "ensemble"

    def __init__(self, members: dict[str, DecisionStrategy], config: AgentConfig | None = None):
        super().__init__(config)
        missing = set(MEMBER_WEIGHTS) - set(members)
        if missing:
            raise ValueError(f"Ensemble is missing member(s): {', '.join(sorted(missing))}")
        self.members = {name: members[name] for name in MEMBER_WEIGHTS}

    def _decide(self, vector: FeatureVector, job_description: str | None) -> Decision:
        results = {name: member.evaluate(vector, job_description) for name, member in self.members.items()}
        winner = majority_vote([d.decision for d in results.values()])

        def confidence(final: str) -> float:
            return sum(
                MEMBER_WEIGHTS[name] * (d.confidence if d.decision == final else 1.0 - d.confidence)
                for name, d in results.items()
            )

        q_value = sum(MEMBER_WEIGHTS[name] * d.q_value for name, d in results.items())
        detail = "Ensemble votes: " + ", ".join(
            f"{name}={d.decision} ({d.confidence:.2f})" for name, d in results.items()
        )

        decision = self._finalize(vector, winner, confidence, q_value, job_description, detail=detail)
        decision.votes = {
            name: {"decision": d.decision, "confidence": d.confidence, "weight": MEMBER_WEIGHTS[name]}
            for name, d in results.items()
        }
        return decision

    def _train(self, vector, action, outcome, rating) -> TrainingExample:
        examples = {
            name: member.train(vector, action, outcome, rating)
            for name, member in self.members.items()
        }
        logger.info("Ensemble forwarded outcome (%s, outcome=%s) to %d members", action, outcome, len(examples))
        return TrainingExample(
            state=discretize(vector),
            action=action,
            outcome=outcome,
            performance_rating=rating,
            reward=compute_reward(action, outcome, rating),
            q_before=round(sum(MEMBER_WEIGHTS[n] * e.q_before for n, e in examples.items()), 4),
            q_after=round(sum(MEMBER_WEIGHTS[n] * e.q_after for n, e in examples.items()), 4),
        )

    def _model_insights(self) -> dict:
        return {
            "members": list(self.members),
            "memberWeights": dict(MEMBER_WEIGHTS),
        }

    def _export_model(self) -> dict:
        # members persist their own state
        return {"memberWeights": dict(MEMBER_WEIGHTS)}

    def _import_model(self, data) -> None:
        pass

    def _reset_model(self) -> None:
        pass
