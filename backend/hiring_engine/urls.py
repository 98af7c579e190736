"""
Root URL configuration for the Hiring Decision Engine.
"""
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    return JsonResponse({"status": "healthy"})


urlpatterns = [
    path('api/', include('screening.urls')),
    path('health', health_check),
]
