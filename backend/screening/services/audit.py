"""
Decision audit trail — ties Decide and Train calls together.

Every decision served over the API is stored as a HiringDecision row keyed by
candidate_id. A later outcome for that candidate is learned from the stored
features and the stored decision, then the row is marked trained so the same
outcome is never learned twice.
"""
import logging
import uuid
from collections import defaultdict

from django.db import IntegrityError, transaction
from django.utils import timezone

from screening.models import HiringDecision
from screening.services.decisions import Decision
from screening.services.errors import AlreadyTrainedError, DecisionNotFoundError, DuplicateCandidateError
from screening.services.features import FeatureVector
from screening.services.registry import AgentRegistry

logger = logging.getLogger(__name__)


def record_decision(
    registry: AgentRegistry,
    agent_type: str,
    vector: FeatureVector,
    job_description: str | None = None,
    candidate_id: str | None = None,
) -> tuple[Decision, HiringDecision]:
    """Decide for a candidate and store the audit row."""
    if candidate_id and HiringDecision.objects.filter(candidate_id=candidate_id).exists():
        raise DuplicateCandidateError(candidate_id)
    candidate_id = candidate_id or str(uuid.uuid4())

    decision = registry.decide(agent_type, vector, job_description, candidate_id)
    try:
        with transaction.atomic():
            row = HiringDecision.objects.create(
                candidate_id=candidate_id,
                agent_type=agent_type,
                features=vector.to_dict(),
                job_description=job_description or None,
                state=decision.state,
                decision=decision.decision,
                confidence=decision.confidence,
                q_value=decision.q_value,
                composite_score=decision.composite_score,
                override=decision.override,
                reasoning=decision.reasoning,
                scores=decision.scores,
                algorithm_version=decision.algorithm_version,
            )
    except IntegrityError as exc:
        raise DuplicateCandidateError(candidate_id) from exc

    logger.info(
        "Decision %s (%.2f) for candidate %s by %s agent",
        decision.decision, decision.confidence, candidate_id, agent_type,
    )
    return decision, row


def train_outcomes(registry: AgentRegistry, outcomes: list[dict]) -> tuple[list[HiringDecision], dict]:
    """
    Learn from realized outcomes of recorded decisions.

    Each outcome is {candidate_id, outcome, performance_rating?, agent_type?};
    agent_type defaults to the agent that made the decision. Nothing is
    learned unless every candidate has an untrained decision on record.

    Returns (updated rows, {agent_type: insights}).
    """
    ids = [item["candidate_id"] for item in outcomes]

    with transaction.atomic():
        rows = {row.candidate_id: row for row in HiringDecision.objects.select_for_update().filter(candidate_id__in=ids)}
        missing = [cid for cid in ids if cid not in rows]
        if missing:
            raise DecisionNotFoundError(missing)
        trained = [cid for cid in ids if rows[cid].trained_at is not None]
        if trained:
            raise AlreadyTrainedError(trained)

        by_agent: dict[str, list[dict]] = defaultdict(list)
        for item in outcomes:
            row = rows[item["candidate_id"]]
            agent_type = item.get("agent_type") or row.agent_type
            by_agent[agent_type].append({
                "features": FeatureVector.from_mapping(row.features),
                "action": row.decision,
                "outcome": item["outcome"],
                "performance_rating": item.get("performance_rating"),
                "candidate_id": row.candidate_id,
            })
            row.outcome = item["outcome"]
            row.performance_rating = item.get("performance_rating")
            row.trained_by = agent_type

        # fail before learning anything if an agent cannot be built
        for agent_type in by_agent:
            registry.agent(agent_type)

        # a row is marked trained before its outcome is learned
        now = timezone.now()
        for row in rows.values():
            row.trained_at = now
            row.save(update_fields=["outcome", "performance_rating", "trained_by", "trained_at"])

        for agent_type, items in by_agent.items():
            registry.batch_train(agent_type, items)

    logger.info("Learned from %d outcome(s) across %s", len(ids), ", ".join(sorted(by_agent)))
    return [rows[cid] for cid in ids], {agent_type: registry.insights(agent_type) for agent_type in by_agent}
