"""Shared test configuration.

Every test gets an isolated AgentRegistry with no persistence, installed on
the screening AppConfig so API views and management commands use it.
"""
import pytest
from django.apps import apps

from screening.services.config import AgentConfig
from screening.services.features import FeatureVector
from screening.services.persistence import NullPersistence
from screening.services.registry import AgentRegistry


STRONG_PROFILE = {
    "technical": 90, "experienceYears": 8, "educationLevel": 8,
    "communication": 85, "leadership": 80, "cultureFit": 85,
}

WEAK_PROFILE = {
    "technical": 20, "experienceYears": 0, "educationLevel": 2,
    "communication": 30, "leadership": 25, "cultureFit": 30,
}


@pytest.fixture
def strong_profile():
    return dict(STRONG_PROFILE)


@pytest.fixture
def weak_profile():
    return dict(WEAK_PROFILE)


@pytest.fixture
def config():
    """Default parameters with exploration disabled, so decisions are deterministic."""
    return AgentConfig(exploration_rate=0.0)


@pytest.fixture
def strong_vector():
    return FeatureVector.from_mapping(STRONG_PROFILE)


@pytest.fixture
def weak_vector():
    return FeatureVector.from_mapping(WEAK_PROFILE)


@pytest.fixture
def registry(config):
    return AgentRegistry(config=config, persistence=NullPersistence())


@pytest.fixture(autouse=True)
def _app_registry(registry):
    """Point the screening app at the test's registry."""
    app_config = apps.get_app_config("screening")
    previous = app_config.registry
    app_config.registry = registry
    yield
    app_config.registry = previous
