"""Rule persistence.

One rule document exists per ordered (provider, consumer) pair. Deleting a
rule also drops the pair's log collection, so a pair's history never outlives
its contract.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Optional, Tuple

from pymongo import errors as mongo_errors

from ..domain.models import Rule, SystemIdentity
from ..errors import DuplicateRule, StorageError, WriteConflict
from .connection import ConnectionManager
from .documents import pair_filter, rule_from_document, rule_to_document
from .logs import LogStore

logger = logging.getLogger(__name__)

_Pair = Tuple[SystemIdentity, SystemIdentity]


class RuleStore:
    """Stores and retrieves :class:`Rule` documents.

    Parameters
    ----------
    manager: ConnectionManager
        Shared connection manager; handles are acquired per operation.
    logs: LogStore, optional
        Log store used to cascade deletions. Defaults to a store on the same
        manager.
    """

    def __init__(self, manager: ConnectionManager, logs: Optional[LogStore] = None):
        self._manager = manager
        self._logs = logs or LogStore(manager)
        # Entries live only while a replace of the pair holds a reference.
        self._pair_locks: weakref.WeakValueDictionary[_Pair, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._pair_locks_guard = threading.Lock()

    def insert_rule(self, rule: Rule) -> None:
        """Insert ``rule``.

        Raises
        ------
        DuplicateRule
            If a rule already exists for the rule's pair.
        WriteConflict
            If the majority write concern could not be satisfied.
        StorageError
            On any other driver failure.
        """
        try:
            self._manager.rule_collection().insert_one(rule_to_document(rule))
        except mongo_errors.DuplicateKeyError as exc:
            raise DuplicateRule(
                f"A rule already exists for {rule.provider} -> {rule.consumer}",
                provider=str(rule.provider),
                consumer=str(rule.consumer),
            ) from exc
        except mongo_errors.WriteConcernError as exc:
            logger.error(
                "rules.write_concern_failed",
                extra={"provider": str(rule.provider), "consumer": str(rule.consumer)},
            )
            raise WriteConflict(
                f"Rule write not acknowledged by a majority: {exc}",
                provider=str(rule.provider),
                consumer=str(rule.consumer),
            ) from exc
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Rule insert failed: {exc}") from exc
        logger.info(
            "rules.inserted",
            extra={
                "provider": str(rule.provider),
                "consumer": str(rule.consumer),
                "profile_type": rule.profile_type,
            },
        )

    def find_rule(
        self, provider: SystemIdentity, consumer: SystemIdentity
    ) -> Optional[Rule]:
        """Return the rule for the exact ordered pair, or None."""
        try:
            doc = self._manager.rule_collection().find_one(
                pair_filter(provider, consumer), projection={"_id": False}
            )
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Rule lookup failed: {exc}") from exc
        if doc is None:
            return None
        return rule_from_document(doc)

    def exists_rule(self, provider: SystemIdentity, consumer: SystemIdentity) -> bool:
        return self.find_rule(provider, consumer) is not None

    def replace_rule(self, rule: Rule) -> None:
        """Delete any rule and log history for the pair, then insert ``rule``.

        Not atomic: a concurrent reader may find no rule for the pair between
        the delete and the insert. Replaces of the same pair issued through
        this store are serialized.
        """
        with self._lock_for(rule.provider, rule.consumer):
            self.delete_rule(rule.provider, rule.consumer)
            self.insert_rule(rule)

    def delete_rule(self, provider: SystemIdentity, consumer: SystemIdentity) -> None:
        """Delete the pair's rule and drop its log collection. Idempotent."""
        try:
            deleted = self._manager.rule_collection().find_one_and_delete(
                pair_filter(provider, consumer)
            )
        except mongo_errors.WriteConcernError as exc:
            raise WriteConflict(
                f"Rule delete not acknowledged by a majority: {exc}",
                provider=str(provider),
                consumer=str(consumer),
            ) from exc
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Rule delete failed: {exc}") from exc
        self._logs.delete_collection(provider, consumer)
        logger.info(
            "rules.deleted",
            extra={
                "provider": str(provider),
                "consumer": str(consumer),
                "existed": deleted is not None,
            },
        )

    def _lock_for(
        self, provider: SystemIdentity, consumer: SystemIdentity
    ) -> threading.Lock:
        key = (provider, consumer)
        with self._pair_locks_guard:
            lock = self._pair_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._pair_locks[key] = lock
            return lock
