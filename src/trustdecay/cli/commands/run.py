#!/usr/bin/env python
"""
Run command - simulate a full retention run and report metrics.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from trustdecay.cli.formatting.output import ConsoleOutput
from trustdecay.config import ConfigError, load_config
from trustdecay.retention.orchestrator import SimulationAborted, create_simulation

logger = logging.getLogger(__name__)


def run(
    config_path: Optional[Path] = None,
    objects: Optional[int] = None,
    duration: Optional[int] = None,
    output: Optional[str] = None,
    changed_only: bool = False,
    seed: Optional[int] = None,
    json_output: bool = False,
    console: Optional[ConsoleOutput] = None,
) -> int:
    """Run the simulation command."""
    console = console or ConsoleOutput()

    overrides = {
        "num_objects": objects,
        "duration": duration,
        "evidence_path": output,
        "log_changed_only": True if changed_only else None,
    }
    if seed is not None:
        overrides["seed_population"] = seed
        overrides["seed_workload"] = seed + 1

    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        console.print_error(str(e))
        return 1

    evaluated = max(0, config.duration - config.grace_period)
    try:
        if json_output:
            result = create_simulation(config).run()
        else:
            with console.progress() as progress:
                task = progress.add_task("Simulating", total=evaluated)
                orchestrator = create_simulation(
                    config, on_tick=lambda now, records: progress.advance(task)
                )
                result = orchestrator.run()
    except SimulationAborted as e:
        console.print_error(f"Simulation aborted: {e}")
        return 1

    if json_output:
        payload = result.summary.to_dict()
        payload["records_emitted"] = result.records_emitted
        payload["events_applied"] = result.events_applied
        payload["evidence_path"] = config.evidence_path
        print(json.dumps(payload, indent=2))
        return 0

    console.print_summary(result.summary)
    if config.evidence_path:
        console.print_dim(f"Evidence log: {config.evidence_path}")
    console.print_success(
        f"{result.ticks_evaluated} ticks evaluated, {result.records_emitted} decisions recorded"
    )
    return 0
