"""Tests for the QoS monitor service facade."""

from __future__ import annotations

import logging

import pytest

from qos_monitor.domain.models import VerificationMode
from qos_monitor.errors import (
    DuplicateRule,
    InvalidParameter,
    MissingParameter,
    NoSamples,
    RuleNotFound,
    UnknownProfile,
)
from qos_monitor.server.app import QoSMonitor
from qos_monitor.server.models import AddRuleMessage, LogMessage


@pytest.fixture
def monitor(manager):
    mon = QoSMonitor(manager, default_sample_window=3)
    mon.start()
    yield mon
    mon.stop()


def _rule_message(provider, consumer, soft=False, window=None, **overrides):
    params = {"bandwidth": "100", "responseTime": "50", "delay": "10"}
    params.update(overrides)
    return AddRuleMessage(
        profile_type="FTTSE",
        provider=provider,
        consumer=consumer,
        parameters=params,
        soft_real_time=soft,
        sample_window=window,
    )


def _log_message(provider, consumer, ts, bandwidth="100", response_time="50", delay="10"):
    return LogMessage(
        profile_type="FTTSE",
        provider=provider,
        consumer=consumer,
        timestamp=ts,
        parameters={"bandwidth": bandwidth, "responseTime": response_time, "delay": delay},
    )


def test_start_and_stop_are_idempotent(manager):
    mon = QoSMonitor(manager)
    mon.start()
    mon.start()
    mon.stop()
    mon.stop()
    assert manager.started is False


def test_add_rule_decodes_and_stores(monitor, provider, consumer):
    rule = monitor.add_rule(_rule_message(provider, consumer, extra="ignored"))
    assert rule.thresholds == {"bandwidth": 100.0, "responseTime": 50.0, "delay": 10.0}
    assert rule.sample_window == 3
    assert monitor.find_rule(provider, consumer) == rule


def test_add_rule_uses_message_window(monitor, provider, consumer):
    rule = monitor.add_rule(_rule_message(provider, consumer, soft=True, window=7))
    assert rule.soft_real_time is True
    assert rule.sample_window == 7


def test_add_rule_replaces_by_default(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer))
    monitor.add_log(_log_message(provider, consumer, 1))
    monitor.add_rule(_rule_message(provider, consumer, delay="20"))
    assert monitor.find_rule(provider, consumer).thresholds["delay"] == 20.0
    assert monitor.logs.count_logs(provider, consumer) == 0


def test_add_rule_without_replace_rejects_duplicates(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer), replace=False)
    with pytest.raises(DuplicateRule):
        monitor.add_rule(_rule_message(provider, consumer), replace=False)


def test_add_rule_with_bad_parameters_stores_nothing(monitor, provider, consumer):
    msg = _rule_message(provider, consumer)
    del msg.parameters["delay"]
    with pytest.raises(MissingParameter):
        monitor.add_rule(msg)
    with pytest.raises(InvalidParameter):
        monitor.add_rule(_rule_message(provider, consumer, responseTime="abc"))
    assert monitor.find_rule(provider, consumer) is None


def test_add_rule_unknown_profile(monitor, provider, consumer):
    msg = _rule_message(provider, consumer).model_copy(update={"profile_type": "XYZ"})
    with pytest.raises(UnknownProfile):
        monitor.add_rule(msg)


def test_add_log_decodes_and_stores(monitor, provider, consumer):
    log = monitor.add_log(_log_message(provider, consumer, 42, bandwidth="80.5"))
    assert log.timestamp == 42
    assert log.parameters["bandwidth"] == 80.5
    assert monitor.logs.count_logs(provider, consumer) == 1


def test_verify_hard_real_time_uses_newest_sample(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer))
    monitor.add_log(_log_message(provider, consumer, 1, bandwidth="10"))
    monitor.add_log(_log_message(provider, consumer, 2, bandwidth="80"))
    report = monitor.verify(provider, consumer)
    assert report.mode is VerificationMode.HARD
    assert report.sample_count == 1
    assert [(v.parameter, v.observed) for v in report.violations] == [("bandwidth", 80.0)]


def test_verify_soft_real_time_averages_window(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer, soft=True, window=3))
    # Oldest sample falls outside the window of 3.
    for ts, rt in ((1, "500"), (2, "40"), (3, "60"), (4, "60")):
        monitor.add_log(_log_message(provider, consumer, ts, response_time=rt))
    report = monitor.verify(provider, consumer)
    assert report.mode is VerificationMode.SOFT
    assert report.sample_count == 3
    assert len(report.violations) == 1
    assert report.violations[0].parameter == "responseTime"
    assert report.violations[0].observed == pytest.approx(53.33, abs=0.01)


def test_verify_compliant_pair(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer))
    monitor.add_log(_log_message(provider, consumer, 1))
    report = monitor.verify(provider, consumer)
    assert report.compliant is True
    assert report.provider == provider


def test_verify_without_rule(monitor, provider, consumer):
    with pytest.raises(RuleNotFound):
        monitor.verify(provider, consumer)


def test_verify_without_samples(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer))
    with pytest.raises(NoSamples):
        monitor.verify(provider, consumer)


def test_remove_rule_drops_rule_and_history(monitor, provider, consumer):
    monitor.add_rule(_rule_message(provider, consumer))
    monitor.add_log(_log_message(provider, consumer, 1))
    monitor.remove_rule(provider, consumer)
    assert monitor.find_rule(provider, consumer) is None
    assert monitor.logs.count_logs(provider, consumer) == 0


def test_violations_are_logged_as_warnings(monitor, provider, consumer, caplog):
    monitor.add_rule(_rule_message(provider, consumer))
    monitor.add_log(_log_message(provider, consumer, 1, delay="99"))
    with caplog.at_level(logging.WARNING, logger="qos_monitor.server.app"):
        monitor.verify(provider, consumer)
    records = [r for r in caplog.records if r.message == "monitor.verified"]
    assert len(records) == 1
    assert records[0].violations == ["delay"]
    assert records[0].req_id
