import uuid
from django.db import models


class QValue(models.Model):
    """
    Q-table entry for one agent variant.
    Stores the learned value of a hiring action in a banded candidate state.

    State: band indices "t,e,ed,c,l,cu" (e.g., "8,4,3,8,8,8")
    Action: HIRE, CONSIDER or REJECT
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    agent_type = models.CharField(max_length=20, default="rl")
    state = models.CharField(max_length=100, db_index=True)
    action = models.CharField(max_length=20)
    q_value = models.FloatField(default=0.0)
    visit_count = models.IntegerField(default=0)
    total_reward = models.FloatField(default=0.0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "q_values"
        unique_together = ("agent_type", "state", "action")
        indexes = [
            models.Index(fields=["agent_type", "state"], name="idx_qvalue_agent_state"),
        ]

    def __str__(self):
        return f"Q[{self.agent_type}]({self.state}, {self.action}) = {self.q_value:.4f} (n={self.visit_count})"
