from screening.models.agent_snapshot import AgentSnapshot
from screening.models.hiring_decision import HiringDecision
from screening.models.q_value import QValue

__all__ = ["AgentSnapshot", "HiringDecision", "QValue"]
