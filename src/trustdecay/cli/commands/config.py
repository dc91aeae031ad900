#!/usr/bin/env python
"""
Config command - View the effective configuration or write a starter file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from trustdecay.cli.formatting.output import ConsoleOutput
from trustdecay.config import ConfigError, SimulationConfig, load_config
from trustdecay.config.defaults import CONFIG_FILENAME


def run(
    action: str = "show",
    key: Optional[str] = None,
    config_path: Optional[Path] = None,
    console: Optional[ConsoleOutput] = None,
) -> int:
    """Run the config command."""
    console = console or ConsoleOutput()

    if action == "init":
        target = Path(key) if key else Path.cwd() / CONFIG_FILENAME
        if target.exists():
            console.print_warning(f"{target} already exists, not overwriting")
            return 1
        SimulationConfig().save(target)
        console.print_success(f"Wrote default configuration to {target}")
        return 0

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print_error(str(e))
        return 1

    if action == "show":
        source = str(config_path) if config_path else "defaults + environment"
        console.print_mapping(f"Effective configuration ({source})", config.to_dict())
        return 0

    if action == "get":
        if not key:
            console.print("[yellow]Usage: trustdecay config get <key>[/yellow]")
            return 1
        data = config.to_dict()
        if key not in data:
            console.print_error(f"Unknown config key: {key}")
            return 1
        console.print(f"{key} = {data[key]}")
        return 0

    return 0
