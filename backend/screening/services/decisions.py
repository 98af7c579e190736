"""
Decision value types shared by every agent variant.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone

HIRE = "HIRE"
CONSIDER = "CONSIDER"
REJECT = "REJECT"

ACTIONS = (HIRE, CONSIDER, REJECT)


def normalize_action(value: str) -> str:
    """Accept 'hire' / 'Hire' / 'HIRE'; raise ValueError for anything else."""
    action = str(value).strip().upper()
    if action not in ACTIONS:
        raise ValueError(f"Unknown action {value!r}; expected one of {', '.join(ACTIONS)}")
    return action


@dataclass
class Decision:
    decision: str
    confidence: float
    q_value: float
    reasoning: list[str]
    scores: dict[str, float]

    agent_type: str
    algorithm_version: str
    state: str = ""
    composite_score: float = 0.0
    override: str | None = None
    clamped_fields: tuple[str, ...] = ()
    candidate_id: str | None = None
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Per-member votes, filled by the ensemble only
    votes: dict[str, dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "candidateId": self.candidate_id,
            "decision": self.decision,
            "confidence": self.confidence,
            "qValue": self.q_value,
            "reasoning": list(self.reasoning),
            "scores": dict(self.scores),
            "metadata": {
                "processedAt": self.processed_at.isoformat(),
                "agentType": self.agent_type,
                "algorithmVersion": self.algorithm_version,
                "state": self.state,
                "compositeScore": self.composite_score,
                "override": self.override,
                "clampedFields": list(self.clamped_fields),
            },
        }
        if self.votes:
            data["metadata"]["votes"] = self.votes
        return data


@dataclass
class TrainingExample:
    state: str
    action: str
    outcome: bool
    performance_rating: float | None
    reward: float
    q_before: float = 0.0
    q_after: float = 0.0
    candidate_id: str | None = None
    trained_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "candidateId": self.candidate_id,
            "state": self.state,
            "action": self.action,
            "outcome": self.outcome,
            "performanceRating": self.performance_rating,
            "reward": self.reward,
            "qBefore": self.q_before,
            "qAfter": self.q_after,
            "trainedAt": self.trained_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrainingExample":
        trained_at = data.get("trainedAt")
        return cls(
            candidate_id=data.get("candidateId"),
            state=str(data.get("state", "")),
            action=normalize_action(data.get("action", "")),
            outcome=bool(data.get("outcome")),
            performance_rating=data.get("performanceRating"),
            reward=float(data.get("reward", 0.0)),
            q_before=float(data.get("qBefore", 0.0)),
            q_after=float(data.get("qAfter", 0.0)),
            trained_at=datetime.fromisoformat(trained_at) if trained_at else datetime.now(timezone.utc),
        )
