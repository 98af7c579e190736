"""
DRF serializers for API request/response validation.
Separates API contract from DB models.
"""
from rest_framework import serializers

from screening.models import HiringDecision
from screening.services.agents import AGENT_TYPES, DEFAULT_AGENT_TYPE
from screening.services.errors import FeatureValidationError
from screening.services.features import FeatureVector


class FeatureVectorField(serializers.Field):
    """JSON object of feature scores <-> FeatureVector."""

    default_error_messages = {
        "invalid": "Expected an object of named feature scores.",
    }

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            self.fail("invalid")
        try:
            return FeatureVector.from_mapping(data)
        except FeatureValidationError as exc:
            raise serializers.ValidationError(exc.errors)

    def to_representation(self, value):
        return value.to_dict()


# ─── Decide ──────────────────────────────────────────────────────────────────

class DecideRequestSerializer(serializers.Serializer):
    features = FeatureVectorField()
    job_description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    agent_type = serializers.ChoiceField(choices=AGENT_TYPES, default=DEFAULT_AGENT_TYPE)
    candidate_id = serializers.CharField(required=False, max_length=100)


# ─── Train ───────────────────────────────────────────────────────────────────

class TrainRequestSerializer(serializers.Serializer):
    """One realized outcome for a candidate decided earlier."""
    candidate_id = serializers.CharField(max_length=100)
    outcome = serializers.BooleanField()
    performance_rating = serializers.FloatField(required=False, allow_null=True, min_value=1, max_value=5)
    # Defaults to the agent that made the decision
    agent_type = serializers.ChoiceField(choices=AGENT_TYPES, required=False)


class BatchTrainRequestSerializer(serializers.Serializer):
    outcomes = TrainRequestSerializer(many=True, allow_empty=False)

    def validate_outcomes(self, value):
        ids = [item["candidate_id"] for item in value]
        duplicates = sorted({cid for cid in ids if ids.count(cid) > 1})
        if duplicates:
            raise serializers.ValidationError(f"Duplicate candidate_id(s): {', '.join(duplicates)}")
        return value


# ─── Audit ───────────────────────────────────────────────────────────────────

class HiringDecisionSerializer(serializers.ModelSerializer):
    class Meta:
        model = HiringDecision
        fields = [
            'id', 'candidate_id', 'agent_type', 'features', 'job_description',
            'state', 'decision', 'confidence', 'q_value', 'composite_score',
            'override', 'reasoning', 'scores', 'algorithm_version',
            'outcome', 'performance_rating', 'trained_by', 'trained_at',
            'created_at',
        ]
