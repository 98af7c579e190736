"""
Agent configuration.

All tunables live in Django settings (environment-driven, see
hiring_engine/settings.py). AgentConfig is the immutable snapshot the agents
are built with, so tests can construct agents with their own parameters
without touching settings.
"""
from dataclasses import dataclass, replace

from django.conf import settings as django_settings

ALGORITHM_VERSIONS = {
    "custom": "3.0.0-ml",
    "intelligent": "4.0.0-deep-learning",
    "rl": "5.0.0-q-learning",
    "ensemble": "1.0.0-ensemble",
}


@dataclass(frozen=True)
class AgentConfig:
    # Q-learning
    learning_rate: float = 0.15
    discount_factor: float = 0.95
    exploration_rate: float = 0.05
    exploration_floor: float = 0.01
    exploration_decay: float = 0.995

    # Override policy (composite score, 0-100)
    force_hire_threshold: float = 80.0
    no_reject_threshold: float = 70.0
    strong_signal_threshold: float = 75.0

    # Score thresholds for the pattern / neural variants (0-100)
    hire_threshold: float = 75.0
    consider_threshold: float = 55.0

    max_decision_history: int = 500
    max_training_history: int = 1000

    random_seed: int | None = 42

    @classmethod
    def from_settings(cls) -> "AgentConfig":
        seed = str(getattr(django_settings, "AGENT_RANDOM_SEED", "42") or "").strip()
        return cls(
            learning_rate=django_settings.AGENT_LEARNING_RATE,
            discount_factor=django_settings.AGENT_DISCOUNT_FACTOR,
            exploration_rate=django_settings.AGENT_EXPLORATION_RATE,
            exploration_floor=django_settings.AGENT_EXPLORATION_FLOOR,
            exploration_decay=django_settings.AGENT_EXPLORATION_DECAY,
            force_hire_threshold=django_settings.AGENT_FORCE_HIRE_THRESHOLD,
            no_reject_threshold=django_settings.AGENT_NO_REJECT_THRESHOLD,
            strong_signal_threshold=django_settings.AGENT_STRONG_SIGNAL_THRESHOLD,
            hire_threshold=django_settings.AGENT_HIRE_THRESHOLD,
            consider_threshold=django_settings.AGENT_CONSIDER_THRESHOLD,
            max_decision_history=django_settings.AGENT_MAX_DECISION_HISTORY,
            max_training_history=django_settings.AGENT_MAX_TRAINING_HISTORY,
            random_seed=int(seed) if seed else None,
        )

    def with_overrides(self, **changes) -> "AgentConfig":
        return replace(self, **changes)
