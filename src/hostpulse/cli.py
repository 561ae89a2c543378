"""CLI interface for hostpulse."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys

from . import __version__
from .config import load_config, validate_config
from .errors import CollectionError, ConfigurationError

logger = logging.getLogger(__name__)


def _cmd_run(args: argparse.Namespace) -> int:
    """Run the collect-and-send loop."""
    try:
        cfg = validate_config(load_config(args.config))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    from .agent import CycleOutcome, ReportingAgent
    from .collector.manager import CollectorManager
    from .exporter.http import HttpExporter

    try:
        manager = CollectorManager.from_config(cfg)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    exporter = HttpExporter(cfg.endpoint)
    agent = ReportingAgent(manager, exporter, interval_seconds=cfg.sampling.interval_seconds)

    if args.once:
        try:
            outcome = agent.run_once()
        finally:
            exporter.shutdown()
        return 0 if outcome is CycleOutcome.SENT else 2

    def _handle_signal(sig: int, _frame: object) -> None:
        logger.info("Received signal %d, stopping", sig)
        agent.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        agent.run()
    finally:
        exporter.shutdown()
    return 0


def _cmd_sample(args: argparse.Namespace) -> int:
    """Collect one snapshot and print it without sending."""
    from .collector.manager import CollectorManager

    try:
        cfg = load_config(args.config)
        manager = CollectorManager.from_config(cfg)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    try:
        snapshot = manager.collect_once()
    except CollectionError as exc:
        logger.error("Collection error: %s", exc)
        return 2

    record = snapshot.to_payload()
    record["temperature_available"] = snapshot.temperature_available
    print(json.dumps(record, indent=2))
    return 0


def _cmd_version(_args: argparse.Namespace) -> int:
    print(f"hostpulse {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostpulse",
        description="Sample host CPU, memory and temperature and push them to a collector",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to hostpulse.yaml")
    parser.add_argument("--log-level", default=None, help="Logging level (default: from config, INFO)")
    sub = parser.add_subparsers(dest="command")

    # run
    run_p = sub.add_parser("run", help="Start the reporting loop")
    run_p.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    run_p.set_defaults(func=_cmd_run)

    # sample
    sample_p = sub.add_parser("sample", help="Print one snapshot without sending it")
    sample_p.set_defaults(func=_cmd_sample)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    return parser


def _resolve_log_level(args: argparse.Namespace) -> int:
    name = args.log_level
    if name is None:
        try:
            name = load_config(args.config).log_level
        except ConfigurationError:
            name = "INFO"
    return getattr(logging, str(name).upper(), logging.INFO)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the hostpulse CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=_resolve_log_level(args),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
