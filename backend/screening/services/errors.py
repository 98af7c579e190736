"""Exceptions raised by the decision agents."""


class AgentError(Exception):
    """Base class for hiring-agent errors."""


class FeatureValidationError(AgentError, ValueError):
    """A candidate feature payload is missing a field or holds a non-numeric value."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        detail = "; ".join(f"{name}: {msg}" for name, msg in errors.items())
        super().__init__(f"Invalid feature vector: {detail}")


class AgentUnavailableError(AgentError):
    """The requested agent variant failed to construct and cannot serve requests."""

    def __init__(self, agent_type: str, reason: str = ""):
        self.agent_type = agent_type
        self.reason = reason
        message = f"Agent '{agent_type}' is not available"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownAgentError(AgentError, KeyError):
    """No agent variant is registered under the given label."""

    def __str__(self):
        return f"Unknown agent type: {self.args[0]!r}"


class PersistenceError(AgentError):
    """A learned-state snapshot could not be read or written."""


class DecisionNotFoundError(AgentError, LookupError):
    """No recorded decision exists for one or more candidate ids."""

    def __init__(self, candidate_ids: list[str]):
        self.candidate_ids = candidate_ids
        super().__init__(f"No decision recorded for candidate(s): {', '.join(candidate_ids)}")


class AlreadyTrainedError(AgentError):
    """An outcome was already recorded for one or more candidates."""

    def __init__(self, candidate_ids: list[str]):
        self.candidate_ids = candidate_ids
        super().__init__(f"Outcome already recorded for candidate(s): {', '.join(candidate_ids)}")


class DuplicateCandidateError(AgentError):
    """A decision was already recorded under this candidate id."""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(f"A decision is already recorded for candidate {candidate_id!r}")
