"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import qos_monitor``
resolves regardless of the working directory pytest chooses, resets the
profile registry around each test, and provides MongoDB fixtures backed by
``mongomock``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import mongomock
import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def reset_profile_registry():
    """Reset the profile registry before each test to avoid cross-test contamination."""
    from qos_monitor.domain.profiles import reset_profiles

    reset_profiles()
    yield
    reset_profiles()


@pytest.fixture
def mongo_client():
    """In-memory MongoDB client shared by every connection of one test."""
    return mongomock.MongoClient()


@pytest.fixture
def client_factory(mongo_client):
    """Client factory that always hands out the same in-memory client."""

    def factory(*_args, **_kwargs):
        return mongo_client

    return factory


@pytest.fixture
def manager(client_factory):
    from qos_monitor.config.models import MongoConfig
    from qos_monitor.storage import ConnectionManager

    mgr = ConnectionManager(
        MongoConfig(database="qos_test"), client_factory=client_factory
    )
    mgr.start()
    yield mgr
    mgr.stop()


@pytest.fixture
def log_store(manager):
    from qos_monitor.storage import LogStore

    return LogStore(manager)


@pytest.fixture
def rule_store(manager, log_store):
    from qos_monitor.storage import RuleStore

    return RuleStore(manager, log_store)


@pytest.fixture
def provider():
    from qos_monitor.domain.models import SystemIdentity

    return SystemIdentity(name="camera", group="video")


@pytest.fixture
def consumer():
    from qos_monitor.domain.models import SystemIdentity

    return SystemIdentity(name="display", group="hmi")


@pytest.fixture
def fttse_rule(provider, consumer):
    from qos_monitor.domain.models import Rule

    return Rule(
        profile_type="FTTSE",
        provider=provider,
        consumer=consumer,
        thresholds={"bandwidth": 100.0, "responseTime": 50.0, "delay": 10.0},
        soft_real_time=False,
        sample_window=5,
    )
