"""
Screening URL configuration.
"""
from django.urls import path
from screening.api import agents

urlpatterns = [
    # Decide / learn
    path('agents/decide', agents.AgentDecideView.as_view()),
    path('agents/train', agents.AgentTrainView.as_view()),

    # Decision audit trail
    path('agents/decisions', agents.DecisionListView.as_view()),
    path('agents/decisions/<str:candidate_id>', agents.DecisionDetailView.as_view()),

    # Learned state
    path('agents/<str:agent_type>/insights', agents.AgentInsightsView.as_view()),
    path('agents/<str:agent_type>/history', agents.AgentHistoryView.as_view()),
    path('agents/<str:agent_type>/export', agents.AgentExportView.as_view()),
    path('agents/<str:agent_type>/import', agents.AgentImportView.as_view()),
    path('agents/<str:agent_type>/reset', agents.AgentResetView.as_view()),
]
