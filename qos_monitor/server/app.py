"""QoS monitor service.

Wires inbound rule and log messages through the parameter codec into the
stores, and answers verification requests by reading the rule and the relevant
samples back and running the verification engine. All operations are
synchronous and block on the storage round-trip.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..domain import codec
from ..domain.models import (
    DEFAULT_SAMPLE_WINDOW,
    Log,
    Rule,
    SystemIdentity,
    ViolationReport,
)
from ..domain.verification import verify
from ..errors import NoSamples, RuleNotFound
from ..storage import ConnectionManager, LogStore, RuleStore
from ..utils.correlation import request_scope
from .models import AddRuleMessage, LogMessage

logger = logging.getLogger(__name__)


class QoSMonitor:
    """In-process QoS monitor facade.

    Parameters
    ----------
    manager: ConnectionManager
        Shared storage connection; started by :meth:`start`.
    default_sample_window: int
        Soft real-time window used when a rule message does not carry one.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        default_sample_window: int = DEFAULT_SAMPLE_WINDOW,
    ):
        self.manager = manager
        self.logs = LogStore(manager)
        self.rules = RuleStore(manager, self.logs)
        self.default_sample_window = default_sample_window

    def start(self) -> None:
        """Connect the storage backend. Idempotent.

        Raises
        ------
        ConnectionFailure
            If MongoDB is unreachable.
        """
        self.manager.start()
        logger.info("monitor.started")

    def stop(self) -> None:
        """Release the storage connection. Idempotent."""
        self.manager.stop()
        logger.info("monitor.stopped")

    def add_rule(self, message: AddRuleMessage, replace: bool = True) -> Rule:
        """Decode and store the rule carried by ``message``.

        With ``replace`` (the default) an existing rule for the pair and its
        log history are discarded first; otherwise an existing rule makes the
        insert fail with ``DuplicateRule``.
        """
        with request_scope() as req_id:
            thresholds = codec.decode(message.profile_type, message.parameters)
            rule = Rule(
                profile_type=message.profile_type,
                provider=message.provider,
                consumer=message.consumer,
                thresholds=thresholds,
                soft_real_time=message.soft_real_time,
                sample_window=message.sample_window or self.default_sample_window,
            )
            if replace:
                self.rules.replace_rule(rule)
            else:
                self.rules.insert_rule(rule)
            logger.info(
                "monitor.rule_added",
                extra={
                    "req_id": req_id,
                    "provider": str(rule.provider),
                    "consumer": str(rule.consumer),
                    "replace": replace,
                },
            )
            return rule

    def remove_rule(self, provider: SystemIdentity, consumer: SystemIdentity) -> None:
        """Delete the pair's rule and its whole log history."""
        with request_scope():
            self.rules.delete_rule(provider, consumer)

    def add_log(self, message: LogMessage) -> Log:
        """Decode and append the sample carried by ``message``."""
        with request_scope() as req_id:
            parameters = codec.decode(message.profile_type, message.parameters)
            log = Log(
                profile_type=message.profile_type,
                timestamp=message.timestamp,
                parameters=parameters,
            )
            self.logs.insert_log(log, message.provider, message.consumer)
            logger.debug(
                "monitor.log_added",
                extra={
                    "req_id": req_id,
                    "provider": str(message.provider),
                    "consumer": str(message.consumer),
                },
            )
            return log

    def find_rule(
        self, provider: SystemIdentity, consumer: SystemIdentity
    ) -> Optional[Rule]:
        return self.rules.find_rule(provider, consumer)

    def verify(
        self, provider: SystemIdentity, consumer: SystemIdentity
    ) -> ViolationReport:
        """Verify the pair's most recent samples against its rule.

        Hard real-time rules are checked against the newest sample only; soft
        real-time rules against the mean of the last ``sample_window`` samples
        (or fewer when the history is shorter).

        Raises
        ------
        RuleNotFound
            If no rule is registered for the pair.
        NoSamples
            If the pair has no stored samples.
        """
        with request_scope() as req_id:
            rule = self.rules.find_rule(provider, consumer)
            if rule is None:
                raise RuleNotFound(
                    f"No rule registered for {provider} -> {consumer}",
                    provider=str(provider),
                    consumer=str(consumer),
                )
            if not rule.soft_real_time:
                rule = rule.model_copy(update={"sample_window": 1})
            logs = self.logs.get_last_n_logs(rule)
            if not logs:
                raise NoSamples(
                    f"No samples stored for {provider} -> {consumer}",
                    provider=str(provider),
                    consumer=str(consumer),
                )
            report = verify(rule, [log.parameters for log in logs])
            log_fn = logger.info if report.compliant else logger.warning
            log_fn(
                "monitor.verified",
                extra={
                    "req_id": req_id,
                    "provider": str(provider),
                    "consumer": str(consumer),
                    "mode": report.mode.value,
                    "samples": report.sample_count,
                    "violations": [v.parameter for v in report.violations],
                },
            )
            return report
