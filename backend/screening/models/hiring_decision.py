import uuid
from django.db import models


class HiringDecision(models.Model):
    """
    Audit row for one Decide call, keyed by candidate_id.

    The stored features are what a later Train call learns from, so an
    outcome always updates the state the decision was actually made in.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    candidate_id = models.CharField(max_length=100, unique=True)
    agent_type = models.CharField(max_length=20, db_index=True)

    # Inputs
    features = models.JSONField(default=dict)
    job_description = models.TextField(null=True, blank=True)

    # The decision
    state = models.CharField(max_length=100)
    decision = models.CharField(max_length=20)  # HIRE, CONSIDER, REJECT
    confidence = models.FloatField()
    q_value = models.FloatField(default=0.0)
    composite_score = models.FloatField(default=0.0)
    override = models.CharField(max_length=50, null=True, blank=True)
    reasoning = models.JSONField(default=list, blank=True)
    scores = models.JSONField(default=dict, blank=True)
    algorithm_version = models.CharField(max_length=50)

    # Realized outcome, filled in by Train
    outcome = models.BooleanField(null=True, blank=True)
    performance_rating = models.FloatField(null=True, blank=True)
    trained_by = models.CharField(max_length=20, null=True, blank=True)
    trained_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "hiring_decisions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["agent_type", "created_at"], name="idx_decision_agent_created"),
        ]

    def __str__(self):
        return f"{self.decision} ({self.confidence:.2f}) for candidate={self.candidate_id}"
