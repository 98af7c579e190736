import uuid
from django.db import models


class AgentSnapshot(models.Model):
    """
    Learned state of one agent variant: counters, bounded histories and model
    parameters. Q-table cells live in QValue rows, not in the payload.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    agent_type = models.CharField(max_length=20, unique=True)
    payload = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "agent_snapshots"

    def __str__(self):
        return f"Snapshot({self.agent_type}) @ {self.updated_at}"
