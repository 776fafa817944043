"""Log persistence, partitioned per identity pair.

Each ordered (provider, consumer) pair stores its samples in a dedicated
collection named by :func:`~qos_monitor.storage.documents.log_collection_name`.
Collections are created implicitly by the first insert and dropped as a whole.
"""

from __future__ import annotations

import logging
from typing import List

from pymongo import DESCENDING
from pymongo import errors as mongo_errors

from ..domain.models import Log, Rule, SystemIdentity
from ..errors import StorageError, WriteConflict
from .connection import ConnectionManager
from .documents import TIMESTAMP, log_collection_name, log_from_document, log_to_document

logger = logging.getLogger(__name__)


class LogStore:
    """Appends, reads and drops per-pair log collections."""

    def __init__(self, manager: ConnectionManager):
        self._manager = manager

    def insert_log(
        self, log: Log, provider: SystemIdentity, consumer: SystemIdentity
    ) -> None:
        """Append ``log`` to the pair's collection.

        Raises
        ------
        WriteConflict
            If the majority write concern could not be satisfied.
        StorageError
            On any other driver failure.
        """
        name = log_collection_name(provider, consumer)
        try:
            self._manager.log_collection(name).insert_one(log_to_document(log))
        except mongo_errors.WriteConcernError as exc:
            logger.error("logs.write_concern_failed", extra={"collection": name})
            raise WriteConflict(
                f"Log write not acknowledged by a majority: {exc}", collection=name
            ) from exc
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Log insert failed: {exc}", collection=name) from exc
        logger.debug(
            "logs.inserted", extra={"collection": name, "timestamp": log.timestamp}
        )

    def get_last_n_logs(self, rule: Rule) -> List[Log]:
        """Return up to ``rule.sample_window`` logs, newest first.

        Fewer logs are returned when the history is shorter; an unknown pair
        yields an empty list.
        """
        name = log_collection_name(rule.provider, rule.consumer)
        try:
            cursor = (
                self._manager.log_collection(name)
                .find({}, projection={"_id": False})
                .sort(TIMESTAMP, DESCENDING)
                .limit(rule.sample_window)
            )
            return [log_from_document(doc) for doc in cursor]
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Log read failed: {exc}", collection=name) from exc

    def count_logs(self, provider: SystemIdentity, consumer: SystemIdentity) -> int:
        """Return the number of stored logs for the pair."""
        name = log_collection_name(provider, consumer)
        try:
            return self._manager.log_collection(name).count_documents({})
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Log count failed: {exc}", collection=name) from exc

    def delete_collection(
        self, provider: SystemIdentity, consumer: SystemIdentity
    ) -> None:
        """Drop the pair's whole log collection. Dropping a missing one is a no-op."""
        name = log_collection_name(provider, consumer)
        try:
            self._manager.log_collection(name).drop()
        except mongo_errors.PyMongoError as exc:
            raise StorageError(f"Log collection drop failed: {exc}", collection=name) from exc
        logger.info("logs.collection_dropped", extra={"collection": name})
