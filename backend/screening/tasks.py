"""
Background tasks run by the django-q cluster.
"""
from screening.services.persistence import build_persistence_backend


def write_agent_snapshot(agent_type: str, snapshot: dict) -> str:
    """
    Write an agent snapshot through the configured backend.

    The snapshot is serialized by the enqueuing process, so the worker writes
    that process's state rather than its own. Returns a short status string
    for the task log.
    """
    saved = build_persistence_backend().save(agent_type, snapshot)
    return f"{agent_type}: {'saved' if saved else 'failed'}"
