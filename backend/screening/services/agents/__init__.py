from screening.services.agents.base import DecisionStrategy, apply_overrides
from screening.services.agents.ensemble import EnsembleStrategy
from screening.services.agents.neural import NeuralStrategy
from screening.services.agents.pattern import PatternStrategy
from screening.services.agents.q_learning import QLearningStrategy

# wire label -> standalone strategy class; "ensemble" is composed from these
STRATEGY_CLASSES = {
    "custom": PatternStrategy,
    "intelligent": NeuralStrategy,
    "rl": QLearningStrategy,
}

AGENT_TYPES = ("custom", "intelligent", "rl", "ensemble")
DEFAULT_AGENT_TYPE = "rl"

__all__ = [
    "DecisionStrategy", "apply_overrides",
    "PatternStrategy", "NeuralStrategy", "QLearningStrategy", "EnsembleStrategy",
    "STRATEGY_CLASSES", "AGENT_TYPES", "DEFAULT_AGENT_TYPE",
]
