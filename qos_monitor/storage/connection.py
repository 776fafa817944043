"""MongoDB connection lifecycle shared by the rule and log stores.

A single :class:`ConnectionManager` is constructed at process start and handed
to :class:`~qos_monitor.storage.rules.RuleStore` and
:class:`~qos_monitor.storage.logs.LogStore`. The stores never hold on to
collection handles themselves; they ask the manager on every operation so a
:meth:`ConnectionManager.restart` with new settings takes effect immediately.

The database handle, and so every collection handed out, is configured for
majority write and read concern: a write returns only once a majority of the
replica set acknowledged it, and a read only observes majority-committed data.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, cast

from pymongo import ASCENDING, MongoClient
from pymongo import errors as mongo_errors
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from ..config.models import MongoConfig
from ..errors import ConnectionFailure
from .documents import IDENTITY_FIELDS

logger = logging.getLogger(__name__)

MAJORITY = "majority"
RULE_PAIR_INDEX = "rule_pair_unique"


class ConnectionManager:
    """Owns the MongoDB client and the cached database/collection handles.

    Parameters
    ----------
    config: MongoConfig
        Connection settings used by :meth:`start` when none are given.
    client_factory: Callable[..., Any]
        Builds the client from a connection string and driver keyword
        options. Defaults to :class:`pymongo.MongoClient`; tests pass a
        ``mongomock`` client.
    """

    def __init__(
        self,
        config: Optional[MongoConfig] = None,
        client_factory: Callable[..., Any] = MongoClient,
    ) -> None:
        self._config = config or MongoConfig()
        self._client_factory = client_factory
        self._lock = threading.RLock()
        self._client: Any = None
        self._database: Optional[Database] = None
        self._rules: Optional[Collection] = None

    @property
    def config(self) -> MongoConfig:
        return self._config

    @property
    def started(self) -> bool:
        return self._client is not None

    def start(self, config: Optional[MongoConfig] = None) -> None:
        """Connect to MongoDB.

        Idempotent: when already started the call is a no-op and ``config`` is
        ignored; use :meth:`restart` to switch settings.

        Raises
        ------
        ConnectionFailure
            If the client cannot be created or the server does not answer a
            ``server_info`` round-trip. Not retried.
        """
        with self._lock:
            if self._client is not None:
                logger.debug("mongodb.start no-op: already started")
                return
            if config is not None:
                self._config = config
            cfg = self._config
            client = None
            try:
                client = self._client_factory(
                    cfg.connection_string,
                    serverSelectionTimeoutMS=cfg.server_selection_timeout_ms,
                    connectTimeoutMS=cfg.connect_timeout_ms,
                    maxPoolSize=cfg.max_pool_size,
                )
                client.server_info()
            except mongo_errors.PyMongoError as exc:
                if client is not None:
                    client.close()
                logger.error(
                    "mongodb.connect_failed",
                    extra={"database": cfg.database, "error": str(exc)},
                )
                raise ConnectionFailure(
                    f"Cannot connect to MongoDB: {exc}", database=cfg.database
                ) from exc
            self._client = client
            self._database = client.get_database(
                cfg.database,
                write_concern=WriteConcern(w=MAJORITY),
                read_concern=ReadConcern(MAJORITY),
            )
            logger.info("mongodb.started", extra={"database": cfg.database})

    def stop(self) -> None:
        """Close the client and drop every cached handle. Idempotent."""
        with self._lock:
            if self._client is None:
                logger.debug("mongodb.stop no-op: not started")
                return
            self._rules = None
            self._database = None
            client, self._client = self._client, None
            client.close()
            logger.info("mongodb.stopped")

    def restart(self, config: Optional[MongoConfig] = None) -> None:
        """Stop, then start with ``config`` (or the current settings)."""
        with self._lock:
            self.stop()
            self.start(config)

    def database(self) -> Database:
        """Return the database handle, starting the manager if needed."""
        with self._lock:
            if self._database is None:
                self.start()
            return cast(Database, self._database)

    def rule_collection(self) -> Collection:
        """Return the rules collection handle.

        On first acquisition after a start the unique index on the four
        identity fields is ensured, so at most one rule exists per pair.
        """
        with self._lock:
            if self._rules is None:
                rules = self._collection(self._config.rules_collection)
                rules.create_index(
                    [(name, ASCENDING) for name in IDENTITY_FIELDS],
                    unique=True,
                    name=RULE_PAIR_INDEX,
                )
                self._rules = rules
            return self._rules

    def log_collection(self, name: str) -> Collection:
        """Return the handle of a per-pair log collection."""
        return self._collection(name)

    def _collection(self, name: str) -> Collection:
        # Inherits the database write and read concern.
        return self.database().get_collection(name)
