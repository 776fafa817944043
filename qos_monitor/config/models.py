"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration. JSON parsing prefers `orjson` when available for speed, but
falls back to the Python standard library's `json` module so `orjson` stays an
optional extra.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.models import DEFAULT_SAMPLE_WINDOW


class MongoConfig(BaseModel):
    """Connection settings for the MongoDB replica set.

    Attributes
    ----------
    connection_string: str
        MongoDB connection URI (e.g., "mongodb://db1,db2,db3/?replicaSet=rs0").
    database: str
        Name of the database holding the rule and log collections.
    rules_collection: str
        Name of the collection holding one document per rule.
    server_selection_timeout_ms: int
        How long the driver waits for a suitable server before failing.
    connect_timeout_ms: int
        Socket connect timeout.
    max_pool_size: int
        Upper bound of the driver connection pool shared by all operations.
    """

    connection_string: str = Field(
        "mongodb://localhost:27017", description="MongoDB connection URI"
    )
    database: str = Field("qos_monitor", min_length=1)
    rules_collection: str = Field("qos_rules", min_length=1)
    server_selection_timeout_ms: int = Field(5000, ge=1)
    connect_timeout_ms: int = Field(5000, ge=1)
    max_pool_size: int = Field(100, ge=1)


class AppConfig(BaseModel):
    """Top-level application configuration.

    Attributes
    ----------
    mongodb: MongoConfig
        Storage connection settings.
    enabled_profiles: Dict[str, bool]
        Feature flags for QoS profiles by identifier. Empty keeps every
        registered profile.
    default_sample_window: int
        Number of samples averaged in soft real-time mode when a rule message
        does not specify its own window.
    """

    mongodb: MongoConfig = Field(default_factory=MongoConfig)
    enabled_profiles: Dict[str, bool] = Field(default_factory=dict)
    default_sample_window: int = Field(DEFAULT_SAMPLE_WINDOW, ge=1)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load application config from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return AppConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    config_path: Optional[str]
        Path to the JSON application config file.
    mongodb_uri: Optional[str]
        Overrides ``mongodb.connection_string`` from the config file.
    mongodb_database: Optional[str]
        Overrides ``mongodb.database`` from the config file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="QOS_MONITOR_")

    log_level: str = Field("INFO")
    config_path: Optional[str] = None
    mongodb_uri: Optional[str] = None
    mongodb_database: Optional[str] = None

    def apply(self, cfg: AppConfig) -> AppConfig:
        """Return a copy of ``cfg`` with environment overrides applied."""
        updates: Dict[str, Any] = {}
        if self.mongodb_uri:
            updates["connection_string"] = self.mongodb_uri
        if self.mongodb_database:
            updates["database"] = self.mongodb_database
        if not updates:
            return cfg
        return cfg.model_copy(
            update={"mongodb": cfg.mongodb.model_copy(update=updates)}
        )
