"""SLA verification engine.

Compares observed samples against a rule's thresholds:

- one sample: hard real-time mode, the sample's values are compared directly;
- several samples: soft real-time mode, each parameter's arithmetic mean is
  compared instead.

Which parameters are checked and in which direction comes from the rule's QoS
profile; the control flow here is the same for every profile. Only parameters
for which the rule declares a threshold are evaluated.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..errors import MissingParameter, NoSamples
from .models import (
    Direction,
    ParameterSet,
    Rule,
    VerificationMode,
    Violation,
    ViolationReport,
)
from .utils.aggregation import mean_by_parameter

logger = logging.getLogger(__name__)


def evaluate(
    profile_type: str,
    directions: Mapping[str, Direction],
    rule: Rule,
    samples: Sequence[ParameterSet],
) -> ViolationReport:
    """Evaluate ``samples`` against ``rule`` using a direction table.

    Parameters
    ----------
    profile_type: str
        Identifier recorded on the resulting report.
    directions: Mapping[str, Direction]
        Parameter name to violation direction, in evaluation order.
    rule: Rule
        Rule holding the agreed thresholds.
    samples: Sequence[ParameterSet]
        Decoded samples, newest first. Must not be empty.

    Raises
    ------
    NoSamples
        If ``samples`` is empty.
    MissingParameter
        If a sample lacks a parameter the rule declares a threshold for.
    """
    if not samples:
        raise NoSamples(
            "Verification requires at least one sample",
            profile_type=profile_type,
        )

    checked = [name for name in directions if name in rule.thresholds]
    try:
        if len(samples) == 1:
            mode = VerificationMode.HARD
            observed = {name: samples[0][name] for name in checked}
        else:
            mode = VerificationMode.SOFT
            observed = mean_by_parameter(samples, checked)
    except KeyError as exc:
        raise MissingParameter(str(exc.args[0])) from exc

    violations = []
    for name in checked:
        threshold = rule.thresholds[name]
        if directions[name].violated(threshold, observed[name]):
            violations.append(
                Violation(parameter=name, threshold=threshold, observed=observed[name])
            )

    logger.debug(
        "verification.evaluated",
        extra={
            "profile_type": profile_type,
            "mode": mode.value,
            "samples": len(samples),
            "violations": [v.parameter for v in violations],
        },
    )
    return ViolationReport(
        profile_type=profile_type,
        mode=mode,
        sample_count=len(samples),
        violations=violations,
        provider=rule.provider,
        consumer=rule.consumer,
    )


def verify(rule: Rule, samples: Sequence[ParameterSet]) -> ViolationReport:
    """Verify ``samples`` against ``rule`` with the rule's registered profile.

    Raises
    ------
    UnknownProfile
        If ``rule.profile_type`` is not registered.
    NoSamples
        If ``samples`` is empty.
    """
    from .profiles import get as get_profile  # noqa: PLC0415

    return get_profile(rule.profile_type).verify(rule, samples)
