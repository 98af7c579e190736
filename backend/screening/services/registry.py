"""
AgentRegistry — owns the agent instances for one process.

Agents are built lazily on first use and restored from the persistence
backend. An agent whose construction fails is remembered as unavailable and
every later call for it raises AgentUnavailableError instead of retrying.

The registry is an ordinary object: the screening AppConfig holds the one
the service uses (see get_registry), tests build their own.
"""
import logging
import threading
from typing import Iterable

from django.apps import apps
from django.conf import settings

from screening.services.agents import AGENT_TYPES, STRATEGY_CLASSES, DecisionStrategy, EnsembleStrategy
from screening.services.config import AgentConfig
from screening.services.decisions import Decision, TrainingExample
from screening.services.errors import AgentUnavailableError, UnknownAgentError
from screening.services.features import FeatureVector
from screening.services.persistence import NullPersistence, PersistenceBackend, build_persistence_backend

logger = logging.getLogger(__name__)


class AgentRegistry:
    def __init__(
        self,
        config: AgentConfig | None = None,
        persistence: PersistenceBackend | None = None,
        snapshot_async: bool = False,
    ):
        self.config = config or AgentConfig()
        self.persistence = persistence or NullPersistence()
        self.snapshot_async = snapshot_async
        self._agents: dict[str, DecisionStrategy] = {}
        self._failures: dict[str, str] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls) -> "AgentRegistry":
        return cls(
            config=AgentConfig.from_settings(),
            persistence=build_persistence_backend(),
            snapshot_async=getattr(settings, "AGENT_SNAPSHOT_ASYNC", False),
        )

    # ─── Construction ────────────────────────────────────────────────────────

    def agent(self, agent_type: str) -> DecisionStrategy:
        if agent_type not in AGENT_TYPES:
            raise UnknownAgentError(agent_type)

        with self._lock:
            if agent_type in self._failures:
                raise AgentUnavailableError(agent_type, self._failures[agent_type])
            existing = self._agents.get(agent_type)
            if existing is not None:
                return existing

            try:
                agent = self._build(agent_type)
            except AgentUnavailableError as exc:
                self._failures[agent_type] = str(exc)
                raise
            except Exception as exc:
                logger.exception("Failed to construct %s agent", agent_type)
                self._failures[agent_type] = str(exc) or exc.__class__.__name__
                raise AgentUnavailableError(agent_type, self._failures[agent_type]) from exc

            self._agents[agent_type] = agent
            return agent

    def _build(self, agent_type: str) -> DecisionStrategy:
        if agent_type == "ensemble":
            members = {name: self.agent(name) for name in STRATEGY_CLASSES}
            agent = EnsembleStrategy(members, self.config)
        else:
            agent = STRATEGY_CLASSES[agent_type](self.config)

        snapshot = self.persistence.load(agent_type)
        if snapshot is not None and agent.import_state(snapshot):
            logger.info(
                "Restored %s agent: %d decisions, %d training examples",
                agent_type, agent.total_decisions, agent.total_training,
            )
        return agent

    def is_available(self, agent_type: str) -> bool:
        return agent_type in AGENT_TYPES and agent_type not in self._failures

    def loaded(self) -> list[str]:
        return list(self._agents)

    # ─── Operations ──────────────────────────────────────────────────────────

    def decide(
        self,
        agent_type: str,
        vector: FeatureVector,
        job_description: str | None = None,
        candidate_id: str | None = None,
    ) -> Decision:
        return self.agent(agent_type).decide(vector, job_description, candidate_id)

    def train(
        self,
        agent_type: str,
        vector: FeatureVector,
        action: str,
        outcome: bool,
        performance_rating: float | None = None,
        candidate_id: str | None = None,
    ) -> TrainingExample:
        example = self.agent(agent_type).train(vector, action, outcome, performance_rating, candidate_id)
        self.persist(agent_type)
        return example

    def batch_train(self, agent_type: str, outcomes: Iterable[dict]) -> list[TrainingExample]:
        examples = self.agent(agent_type).batch_train(outcomes)
        if examples:
            self.persist(agent_type)
        return examples

    def insights(self, agent_type: str) -> dict:
        return self.agent(agent_type).insights()

    def history(self, agent_type: str, limit: int = 20) -> dict:
        agent = self.agent(agent_type)
        return {
            "agentType": agent_type,
            "trainingHistory": agent.training_history(limit),
            "recentDecisions": agent.recent_decisions(limit),
        }

    def export_state(self, agent_type: str) -> dict:
        return self.agent(agent_type).export_state()

    def import_state(self, agent_type: str, snapshot) -> bool:
        imported = self.agent(agent_type).import_state(snapshot)
        if imported:
            self.persist(agent_type)
        return imported

    def reset(self, agent_type: str):
        self.agent(agent_type).reset()
        self.persist(agent_type)

    # ─── Persistence ─────────────────────────────────────────────────────────

    def persist(self, agent_type: str):
        """
        Best-effort snapshot write. Persisting the ensemble also persists its
        members, since outcomes are forwarded to them.
        """
        agent = self._agents.get(agent_type)
        if agent is None:
            return
        if isinstance(agent, EnsembleStrategy):
            for name in agent.members:
                self._write(name, agent.members[name].export_state())
        self._write(agent_type, agent.export_state())

    def _write(self, agent_type: str, snapshot: dict):
        if self.snapshot_async:
            try:
                from django_q.tasks import async_task
                async_task(
                    "screening.tasks.write_agent_snapshot",
                    agent_type,
                    snapshot,
                    task_name=f"snapshot-{agent_type}",
                    q_options={"timeout": 60},
                )
                return
            except Exception:
                logger.warning("Failed to queue %s snapshot write; writing inline", agent_type, exc_info=True)
        self.persistence.save(agent_type, snapshot)


def get_registry() -> AgentRegistry:
    """The registry owned by the screening app."""
    return apps.get_app_config("screening").get_registry()
