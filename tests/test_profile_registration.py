"""Test profile registration and logging functionality."""

from __future__ import annotations

import logging

import pytest

from qos_monitor.domain.models import Direction
from qos_monitor.domain.profiles import (
    Profile,
    all_profiles,
    apply_enabled_profiles,
    get,
    log_profile_status,
    register,
)
from qos_monitor.domain.profiles.fttse import FTTSE
from qos_monitor.errors import UnknownProfile


def test_fttse_registered_by_default():
    """Ensure the FTTSE profile is registered automatically."""
    profile = get("FTTSE")
    assert profile is FTTSE
    assert profile.required_parameters == ("bandwidth", "responseTime", "delay")


def test_fttse_direction_table():
    assert FTTSE.directions == {
        "bandwidth": Direction.MINIMUM,
        "responseTime": Direction.MAXIMUM,
        "delay": Direction.MAXIMUM,
    }


def test_get_unknown_profile_raises():
    with pytest.raises(UnknownProfile):
        get("does-not-exist")


def test_register_new_profile_is_used_for_decode():
    """A new profile only needs a parameter set and a direction table."""
    register(Profile(id="LOSS", directions={"packetLoss": Direction.MAXIMUM}))
    assert get("LOSS").decode({"packetLoss": "0.5", "bandwidth": "1"}) == {
        "packetLoss": 0.5
    }
    assert {p.id for p in all_profiles()} == {"FTTSE", "LOSS"}


def test_apply_enabled_profiles_filters_registry():
    register(Profile(id="LOSS", directions={"packetLoss": Direction.MAXIMUM}))
    result = apply_enabled_profiles({"FTTSE": True})
    assert result == {"kept": ["FTTSE"], "disabled": ["LOSS"]}
    with pytest.raises(UnknownProfile):
        get("LOSS")


def test_apply_enabled_profiles_empty_keeps_all():
    result = apply_enabled_profiles({})
    assert result == {"kept": ["FTTSE"], "disabled": []}


def test_log_profile_status_output(caplog):
    """Test that log_profile_status produces expected log messages."""
    with caplog.at_level(logging.INFO):
        log_profile_status()
    combined = " ".join(r.message for r in caplog.records if r.levelname == "INFO")
    assert "FTTSE" in combined
    assert "QoS profiles loaded" in combined


def test_log_profile_status_empty_registry(caplog):
    apply_enabled_profiles({"FTTSE": False})
    with caplog.at_level(logging.WARNING):
        log_profile_status()
    assert any("No QoS profiles registered" in r.message for r in caplog.records)
