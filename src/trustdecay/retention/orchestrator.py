"""
TickOrchestrator - Drives the retention pipeline over a discrete timeline.

Per tick:
    events -> monitor -> (live objects) risk -> trust -> convergence
    -> relevance -> decision -> evidence log -> metrics

Objects are evaluated one at a time in ascending id order. Events are
delivered at their own tick even before the first evaluation tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from trustdecay.analysis.metrics import MetricsCollector, RunSummary
from trustdecay.config.settings import SimulationConfig
from trustdecay.workload import WorkloadGenerator, build_population

from .analyzer import RiskAnalyzer
from .auditor import EvidenceLogError, EvidenceLogger
from .controller import RetentionDecisionController
from .decay import TrustDecayEngine
from .models import AccessEvent, DecisionRecord, TrackedObject
from .monitor import AccessMonitor
from .predictor import RelevancePredictor

logger = logging.getLogger(__name__)


class SimulationAborted(RuntimeError):
    """The run hit an unrecoverable error and stopped."""
    pass


@dataclass
class SimulationResult:
    """Outcome of a completed run."""
    summary: RunSummary
    ticks_evaluated: int
    records_emitted: int
    events_applied: int
    records: List[DecisionRecord] = field(default_factory=list)


class TickOrchestrator:
    """
    Single entry point for running a simulation.

    Collaborators are injectable; anything omitted is built from ``config``.
    """

    def __init__(
        self,
        objects: Iterable[TrackedObject],
        schedule: Mapping[int, Sequence[AccessEvent]],
        config: Optional[SimulationConfig] = None,
        predictor: Optional[RelevancePredictor] = None,
        evidence: Optional[EvidenceLogger] = None,
        metrics: Optional[MetricsCollector] = None,
        monitor: Optional[AccessMonitor] = None,
        analyzer: Optional[RiskAnalyzer] = None,
        decay: Optional[TrustDecayEngine] = None,
        controller: Optional[RetentionDecisionController] = None,
        first_tick: Optional[int] = None,
        keep_records: bool = False,
        on_tick: Optional[Callable[[int, List[DecisionRecord]], None]] = None,
    ):
        self.config = config or SimulationConfig()
        settings = self.config.to_dict()

        self.objects: List[TrackedObject] = sorted(objects, key=lambda o: o.id)
        self._by_id: Dict[int, TrackedObject] = {o.id: o for o in self.objects}
        self.schedule = schedule

        self.monitor = monitor or AccessMonitor(self.config.request_score_threshold)
        self.analyzer = analyzer or RiskAnalyzer(settings)
        self.decay = decay or TrustDecayEngine(settings)
        self.predictor = predictor or RelevancePredictor(settings)
        self.controller = controller or RetentionDecisionController(settings)
        self.evidence = evidence
        self.metrics = metrics or MetricsCollector(
            len(self.objects), self.config.duration - self.config.grace_period
        )

        self.first_tick = self.config.grace_period if first_tick is None else first_tick
        self.keep_records = keep_records
        self.on_tick = on_tick

        self.records: List[DecisionRecord] = []
        self.ticks_evaluated = 0
        self.records_emitted = 0
        self.events_applied = 0

    def get(self, object_id: int) -> Optional[TrackedObject]:
        return self._by_id.get(object_id)

    def deliver(self, now: int) -> int:
        """Feed this tick's access events to the monitor."""
        events = self.schedule.get(now, ())
        applied = self.monitor.ingest(self._by_id, events)
        self.events_applied += applied
        return applied

    def evaluate(self, obj: TrackedObject, now: int) -> DecisionRecord:
        """Run the scoring pipeline and decision for one object."""
        if obj.is_deleted:
            predicted = 0.0
        else:
            self.analyzer.update_risk(obj, now)
            self.decay.update_trust(obj, now)
            obj.trust_history.observe(obj.trust, now)
            predicted = self.predictor.predict(obj)

        decision = self.controller.decide(obj, predicted, now)
        return DecisionRecord.capture(now, obj, predicted, decision)

    def step(self, now: int) -> List[DecisionRecord]:
        """
        Evaluate every object at ``now``.

        Events for ``now`` are expected to be delivered already.
        """
        records = []
        for obj in self.objects:
            record = self.evaluate(obj, now)
            if self.evidence is not None:
                self.evidence.log(record)
            records.append(record)

        self.metrics.on_tick(self.objects)
        self.ticks_evaluated += 1
        self.records_emitted += len(records)

        if self.evidence is not None and now % self.config.flush_every == 0:
            self.evidence.flush()
        if self.keep_records:
            self.records.extend(records)
        if self.on_tick is not None:
            self.on_tick(now, records)
        return records

    def run(self) -> SimulationResult:
        """
        Run every tick from 0 to ``duration - 1``.

        Raises:
            SimulationAborted: If the evidence log fails
        """
        if not self.predictor.is_trained:
            self.predictor.train_synthetic()

        logger.info(
            f"Starting run: {len(self.objects)} objects, ticks "
            f"{self.first_tick}..{self.config.duration - 1}"
        )

        try:
            for now in range(self.config.duration):
                self.deliver(now)
                if now >= self.first_tick:
                    self.step(now)
        except EvidenceLogError as e:
            logger.error(f"Run aborted: {e}")
            self._close_after_failure()
            raise SimulationAborted(str(e)) from e

        if self.evidence is not None:
            try:
                self.evidence.close()
            except EvidenceLogError as e:
                logger.error(f"Run aborted: {e}")
                raise SimulationAborted(str(e)) from e

        summary = self.metrics.summarize(self.objects)
        logger.info(
            f"Run complete: {self.ticks_evaluated} ticks, {self.records_emitted} records"
        )
        return SimulationResult(
            summary=summary,
            ticks_evaluated=self.ticks_evaluated,
            records_emitted=self.records_emitted,
            events_applied=self.events_applied,
            records=self.records,
        )

    def _close_after_failure(self) -> None:
        if self.evidence is None:
            return
        try:
            self.evidence.close()
        except EvidenceLogError as e:
            logger.warning(f"Evidence log could not be closed: {e}")


def create_simulation(
    config: SimulationConfig,
    evidence_path: Optional[Path] = None,
    **kwargs,
) -> TickOrchestrator:
    """
    Build a ready-to-run orchestrator from configuration.

    Generates the population and workload from the configured seeds and
    opens the evidence log at ``evidence_path`` (or ``config.evidence_path``;
    an empty path disables logging).
    """
    config.validate()

    objects, profiles = build_population(
        config.num_objects,
        seed=config.seed_population,
        window_size=config.window_size,
        burst_span=config.burst_span,
        burst_min_events=config.burst_min_events,
        convergence_band=config.convergence_band,
    )
    schedule = WorkloadGenerator(
        objects, profiles, config.duration, seed=config.seed_workload
    ).generate()

    path = evidence_path if evidence_path is not None else config.evidence_path
    evidence = None
    if path:
        evidence = EvidenceLogger(Path(path), changed_only=config.log_changed_only)

    return TickOrchestrator(objects, schedule, config=config, evidence=evidence, **kwargs)
