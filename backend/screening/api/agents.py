"""
Agents API — decide, learn from outcomes, and inspect or move learned state.

Agent types: custom (pattern), intelligent (neural), rl (Q-learning), ensemble.
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from screening.models import HiringDecision
from screening.serializers import (
    BatchTrainRequestSerializer, DecideRequestSerializer,
    HiringDecisionSerializer, TrainRequestSerializer,
)
from screening.services.audit import record_decision, train_outcomes
from screening.services.errors import (
    AgentUnavailableError, AlreadyTrainedError, DecisionNotFoundError,
    DuplicateCandidateError, UnknownAgentError,
)
from screening.services.registry import get_registry


def _limit(request, default: int, maximum: int) -> int:
    try:
        return max(1, min(int(request.query_params.get("limit", default)), maximum))
    except (TypeError, ValueError):
        return default


class AgentAPIView(APIView):
    """Maps agent errors onto HTTP responses."""

    def handle_exception(self, exc):
        if isinstance(exc, UnknownAgentError):
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, AgentUnavailableError):
            return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        if isinstance(exc, DecisionNotFoundError):
            return Response(
                {"detail": str(exc), "candidate_ids": exc.candidate_ids},
                status=status.HTTP_404_NOT_FOUND,
            )
        if isinstance(exc, (AlreadyTrainedError, DuplicateCandidateError)):
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return super().handle_exception(exc)


class AgentDecideView(AgentAPIView):
    """Score a candidate and record the decision for later training."""

    def post(self, request):
        serializer = DecideRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        decision, _ = record_decision(
            get_registry(),
            data["agent_type"],
            data["features"],
            job_description=data.get("job_description"),
            candidate_id=data.get("candidate_id"),
        )
        return Response(decision.to_dict(), status=status.HTTP_201_CREATED)


class AgentTrainView(AgentAPIView):
    """Learn from the realized outcome of one decision, or a batch under "outcomes"."""

    def post(self, request):
        batch = isinstance(request.data, dict) and "outcomes" in request.data
        if batch:
            serializer = BatchTrainRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            outcomes = serializer.validated_data["outcomes"]
        else:
            serializer = TrainRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            outcomes = [serializer.validated_data]

        rows, insights = train_outcomes(get_registry(), outcomes)

        if batch:
            return Response({
                "message": f"Trained on {len(rows)} outcomes",
                "trained": len(rows),
                "insights": insights,
            })
        row = rows[0]
        return Response({
            "message": f"{row.trained_by} agent learned from candidate {row.candidate_id}",
            "trained": 1,
            "insights": insights[row.trained_by],
        })


class AgentInsightsView(AgentAPIView):
    def get(self, request, agent_type):
        return Response(get_registry().insights(agent_type))


class AgentHistoryView(AgentAPIView):
    """Recent training examples and decisions held in memory by an agent."""

    def get(self, request, agent_type):
        limit = _limit(request, 20, 200)
        return Response(get_registry().history(agent_type, limit))


class AgentExportView(AgentAPIView):
    def get(self, request, agent_type):
        return Response(get_registry().export_state(agent_type))


class AgentImportView(AgentAPIView):
    """Replace an agent's learned state with an exported snapshot."""

    def post(self, request, agent_type):
        registry = get_registry()
        if not registry.import_state(agent_type, request.data):
            return Response(
                {"detail": "Snapshot must be a JSON object as produced by the export endpoint"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response({
            "message": f"Imported learned state into {agent_type} agent",
            "insights": registry.insights(agent_type),
        })


class AgentResetView(AgentAPIView):
    def post(self, request, agent_type):
        registry = get_registry()
        registry.reset(agent_type)
        return Response({
            "message": f"Reset {agent_type} agent",
            "insights": registry.insights(agent_type),
        })


class DecisionListView(AgentAPIView):
    """Recorded decisions, newest first."""

    def get(self, request):
        limit = _limit(request, 20, 100)
        decisions = HiringDecision.objects.all()
        agent_type = request.query_params.get("agent_type")
        if agent_type:
            decisions = decisions.filter(agent_type=agent_type)
        return Response(HiringDecisionSerializer(decisions.order_by("-created_at")[:limit], many=True).data)


class DecisionDetailView(AgentAPIView):
    def get(self, request, candidate_id):
        try:
            decision = HiringDecision.objects.get(candidate_id=candidate_id)
        except HiringDecision.DoesNotExist:
            return Response({"detail": "Decision not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(HiringDecisionSerializer(decision).data)
