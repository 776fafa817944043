"""MongoDB document layout for rules and logs.

Rules live in a single collection, one document per ordered identity pair.
Logs live in one collection per pair, named by concatenating the four identity
fields. Field names are camelCase to stay compatible with documents written by
other QoS monitor deployments.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..domain.models import DEFAULT_SAMPLE_WINDOW, Log, Rule, SystemIdentity

PROFILE_TYPE = "profileType"
PROVIDER_SYSTEM_NAME = "providerName"
PROVIDER_SYSTEM_GROUP = "providerGroup"
CONSUMER_SYSTEM_NAME = "consumerName"
CONSUMER_SYSTEM_GROUP = "consumerGroup"
THRESHOLDS = "thresholds"
SOFT_REAL_TIME = "softRealTime"
SAMPLE_WINDOW = "sampleWindow"
TIMESTAMP = "timestamp"
PARAMETERS = "parameters"

IDENTITY_FIELDS = (
    PROVIDER_SYSTEM_NAME,
    PROVIDER_SYSTEM_GROUP,
    CONSUMER_SYSTEM_NAME,
    CONSUMER_SYSTEM_GROUP,
)


def log_collection_name(provider: SystemIdentity, consumer: SystemIdentity) -> str:
    """Return the name of the log collection for an ordered pair.

    The name is the plain concatenation of provider name, provider group,
    consumer name and consumer group. Distinct pairs whose concatenations
    coincide (e.g., ``("ab", "c")`` and ``("a", "bc")``) share a collection.
    """
    return provider.name + provider.group + consumer.name + consumer.group


def pair_filter(provider: SystemIdentity, consumer: SystemIdentity) -> Dict[str, str]:
    """Equality filter on all four identity fields of a rule document."""
    return {
        PROVIDER_SYSTEM_NAME: provider.name,
        PROVIDER_SYSTEM_GROUP: provider.group,
        CONSUMER_SYSTEM_NAME: consumer.name,
        CONSUMER_SYSTEM_GROUP: consumer.group,
    }


def rule_to_document(rule: Rule) -> Dict[str, Any]:
    doc: Dict[str, Any] = {PROFILE_TYPE: rule.profile_type}
    doc.update(pair_filter(rule.provider, rule.consumer))
    doc[THRESHOLDS] = dict(rule.thresholds)
    doc[SOFT_REAL_TIME] = rule.soft_real_time
    doc[SAMPLE_WINDOW] = rule.sample_window
    return doc


def rule_from_document(doc: Mapping[str, Any]) -> Rule:
    return Rule(
        profile_type=doc[PROFILE_TYPE],
        provider=SystemIdentity(
            name=doc[PROVIDER_SYSTEM_NAME], group=doc[PROVIDER_SYSTEM_GROUP]
        ),
        consumer=SystemIdentity(
            name=doc[CONSUMER_SYSTEM_NAME], group=doc[CONSUMER_SYSTEM_GROUP]
        ),
        thresholds=doc.get(THRESHOLDS) or {},
        soft_real_time=doc.get(SOFT_REAL_TIME, False),
        sample_window=doc.get(SAMPLE_WINDOW, DEFAULT_SAMPLE_WINDOW),
    )


def log_to_document(log: Log) -> Dict[str, Any]:
    return {
        PROFILE_TYPE: log.profile_type,
        TIMESTAMP: log.timestamp,
        PARAMETERS: dict(log.parameters),
    }


def log_from_document(doc: Mapping[str, Any]) -> Log:
    return Log(
        profile_type=doc[PROFILE_TYPE],
        timestamp=doc[TIMESTAMP],
        parameters=doc.get(PARAMETERS) or {},
    )
