#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler


def _repo_root() -> Path:
    return Path.cwd().resolve()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
    )
    logging.getLogger("trustdecay").setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trustdecay",
        description="Trust-decaying data retention simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    run_p = subparsers.add_parser("run", help="Run a simulation")
    run_p.add_argument("--config", "-c", type=Path, help="YAML config file")
    run_p.add_argument("--objects", "-n", type=int, help="Number of data objects")
    run_p.add_argument("--duration", "-d", type=int, help="Number of ticks")
    run_p.add_argument("--output", "-o", help="Evidence CSV path (empty string disables)")
    run_p.add_argument("--changed-only", action="store_true", help="Log only action changes")
    run_p.add_argument("--seed", type=int, help="Population seed (workload uses seed + 1)")
    run_p.add_argument("--json", action="store_true", help="JSON output")
    run_p.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    config_p = subparsers.add_parser("config", help="View configuration")
    config_p.add_argument("action", choices=["show", "get", "init"], default="show", nargs="?")
    config_p.add_argument("key", nargs="?", help="Key for 'get', target file for 'init'")
    config_p.add_argument("--config", "-c", type=Path, help="YAML config file")
    config_p.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers.add_parser("version", help="Show version")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv(_repo_root() / ".env")
    _configure_logging(getattr(args, "verbose", False))

    if args.command is None:
        parser.print_help()
        return 0

    from trustdecay.cli.commands import config, run

    if args.command == "run":
        return run.run(
            config_path=args.config,
            objects=args.objects,
            duration=args.duration,
            output=args.output,
            changed_only=args.changed_only,
            seed=args.seed,
            json_output=args.json,
        )
    elif args.command == "config":
        return config.run(args.action, args.key, config_path=args.config)
    elif args.command == "version":
        from trustdecay import __version__
        print(f"trustdecay {__version__}")
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
