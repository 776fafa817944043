"""MongoDB-backed persistence for rules and logs."""

from .connection import ConnectionManager
from .logs import LogStore
from .rules import RuleStore

__all__ = ["ConnectionManager", "LogStore", "RuleStore"]
