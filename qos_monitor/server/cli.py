"""Command-line interface for administering the QoS monitor store.

Loads application configuration, connects to MongoDB, and runs one
administrative command against the rule and log collections. Results are
printed as JSON on stdout; failures print a structured error and exit
non-zero.

Usage
-----
    qos-monitor --config config.json ping
    qos-monitor rule show --provider cam:video --consumer hmi:ui
    qos-monitor logs drop --provider cam:video --consumer hmi:ui
    qos-monitor verify --provider cam:video --consumer hmi:ui
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from pymongo import MongoClient

from ..config.models import AppConfig, EnvSettings
from ..domain.models import SystemIdentity
from ..domain.profiles import apply_enabled_profiles, log_profile_status
from ..errors import ConnectionFailure, QoSMonitorError
from ..observability import setup_logging
from ..storage import ConnectionManager
from .app import QoSMonitor

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CONNECTION_FAILURE = 2


def load_config(config_path: Optional[str], env: EnvSettings) -> AppConfig:
    """Build the effective config from the optional JSON file and environment."""
    path = config_path or env.config_path
    cfg = AppConfig.load(Path(path)) if path else AppConfig()
    return env.apply(cfg)


def build_monitor(
    cfg: AppConfig, client_factory: Callable[..., Any] = MongoClient
) -> QoSMonitor:
    """Apply profile filtering and build a monitor for ``cfg`` (not started)."""
    apply_enabled_profiles(cfg.enabled_profiles)
    log_profile_status()
    manager = ConnectionManager(cfg.mongodb, client_factory=client_factory)
    return QoSMonitor(manager, default_sample_window=cfg.default_sample_window)


def _identity(text: str) -> SystemIdentity:
    try:
        return SystemIdentity.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _add_pair_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--provider", required=True, type=_identity, help="Provider as NAME:GROUP"
    )
    parser.add_argument(
        "--consumer", required=True, type=_identity, help="Consumer as NAME:GROUP"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qos-monitor", description="QoS monitor store administration"
    )
    parser.add_argument("--config", help="Path to JSON app config")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("ping", help="Check that MongoDB is reachable")

    rule = sub.add_parser("rule", help="Inspect or delete rules")
    rule_sub = rule.add_subparsers(dest="action", required=True)
    _add_pair_arguments(rule_sub.add_parser("show", help="Print the pair's rule"))
    _add_pair_arguments(
        rule_sub.add_parser("delete", help="Delete the pair's rule and its logs")
    )

    logs = sub.add_parser("logs", help="Inspect or drop log collections")
    logs_sub = logs.add_subparsers(dest="action", required=True)
    _add_pair_arguments(logs_sub.add_parser("count", help="Count the pair's logs"))
    _add_pair_arguments(
        logs_sub.add_parser("drop", help="Drop the pair's whole log collection")
    )

    _add_pair_arguments(
        sub.add_parser("verify", help="Verify the pair's latest samples")
    )
    return parser


def run_command(monitor: QoSMonitor, args: argparse.Namespace) -> Any:
    """Execute the parsed command and return a JSON-serializable result."""
    if args.command == "ping":
        return {"status": "ok", "database": monitor.manager.config.database}
    if args.command == "rule":
        if args.action == "show":
            rule = monitor.find_rule(args.provider, args.consumer)
            return rule.model_dump(mode="json") if rule is not None else None
        monitor.remove_rule(args.provider, args.consumer)
        return {"deleted": True}
    if args.command == "logs":
        if args.action == "count":
            return {"count": monitor.logs.count_logs(args.provider, args.consumer)}
        monitor.logs.delete_collection(args.provider, args.consumer)
        return {"dropped": True}
    report = monitor.verify(args.provider, args.consumer)
    payload = report.model_dump(mode="json")
    payload["compliant"] = report.compliant
    return payload


def main(
    argv: Optional[List[str]] = None,
    client_factory: Callable[..., Any] = MongoClient,
) -> int:
    """CLI entrypoint. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env = EnvSettings()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env.log_level)
    setup_logging(effective_level)

    try:
        cfg = load_config(args.config, env)
        monitor = build_monitor(cfg, client_factory=client_factory)
        monitor.start()
    except ConnectionFailure as exc:
        print(exc.to_details().model_dump_json(), file=sys.stderr)
        return EXIT_CONNECTION_FAILURE
    try:
        result = run_command(monitor, args)
    except QoSMonitorError as exc:
        print(exc.to_details().model_dump_json(), file=sys.stderr)
        return EXIT_ERROR
    finally:
        monitor.stop()
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
