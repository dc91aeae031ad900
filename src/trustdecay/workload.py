"""Synthetic population and access workload.

Objects are split into access profiles:

- HOT (15%): a legitimate access with probability 0.25 every tick
- WARM (25%): every 5th tick, with probability 0.18
- COLD (60%): probability 0.01 per tick

Sensitive objects also see rare background suspicious attempts, and every
30 ticks a batch of sensitive objects is hit by an attack burst (two
suspicious events on each of three consecutive ticks).

Everything is drawn from seeded numpy generators so a given seed always
produces the same population and event schedule.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from trustdecay.config.defaults import (
    ACCESS_WINDOW_SIZE,
    ATTACK_EVENTS_PER_TICK,
    ATTACK_MAX_TARGETS,
    ATTACK_PERIOD,
    ATTACK_SPAN,
    BURST_MIN_EVENTS,
    BURST_SPAN,
    COLD_ACCESS_PROBABILITY,
    CONVERGENCE_BAND,
    HOT_ACCESS_PROBABILITY,
    KEEP_LABEL_VALUE_THRESHOLD,
    PROFILE_HOT_FRACTION,
    PROFILE_WARM_FRACTION,
    SEED_POPULATION,
    SEED_WORKLOAD,
    SENSITIVITY_SHARE_FINANCIAL,
    SENSITIVITY_SHARE_NON_SENSITIVE,
    SENSITIVITY_SHARE_PII,
    SUSPICIOUS_NOISE_PROBABILITY,
    TRUST_INIT_MAX,
    TRUST_INIT_MIN,
    WARM_ACCESS_PERIOD,
    WARM_ACCESS_PROBABILITY,
)
from trustdecay.retention.models import (
    AccessEvent,
    Role,
    Sensitivity,
    Tier,
    TrackedObject,
    TrustHistory,
)
from trustdecay.sliding_window import AccessStats

logger = logging.getLogger(__name__)

# Producer-side score gate for SERVICE requests
SERVICE_SCORE_GATE = 0.65

EventSchedule = Dict[int, List[AccessEvent]]


class Profile(str, Enum):
    """Access profile of an object."""
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


def sample_sensitivity(u: float) -> Sensitivity:
    """Map a uniform draw onto the sensitivity mix."""
    if u < SENSITIVITY_SHARE_NON_SENSITIVE:
        return Sensitivity.NON_SENSITIVE
    if u < SENSITIVITY_SHARE_NON_SENSITIVE + SENSITIVITY_SHARE_PII:
        return Sensitivity.PII
    if u < SENSITIVITY_SHARE_NON_SENSITIVE + SENSITIVITY_SHARE_PII + SENSITIVITY_SHARE_FINANCIAL:
        return Sensitivity.FINANCIAL
    return Sensitivity.HEALTH


def assign_profiles(rng: np.random.Generator, num_objects: int) -> list[Profile]:
    profiles = []
    for u in rng.random(num_objects):
        if u < PROFILE_HOT_FRACTION:
            profiles.append(Profile.HOT)
        elif u < PROFILE_HOT_FRACTION + PROFILE_WARM_FRACTION:
            profiles.append(Profile.WARM)
        else:
            profiles.append(Profile.COLD)
    return profiles


def build_population(
    num_objects: int,
    seed: int = SEED_POPULATION,
    window_size: int = ACCESS_WINDOW_SIZE,
    burst_span: int = BURST_SPAN,
    burst_min_events: int = BURST_MIN_EVENTS,
    convergence_band: float = CONVERGENCE_BAND,
) -> tuple[list[TrackedObject], list[Profile]]:
    """
    Create the initial object population.

    Draw order: one profile uniform per object, then per object
    sensitivity, business value and initial trust.

    Returns:
        (objects, profiles), both indexed by object id
    """
    rng = np.random.default_rng(seed)
    profiles = assign_profiles(rng, num_objects)

    objects = []
    for object_id in range(num_objects):
        sensitivity = sample_sensitivity(rng.random())
        business_value = float(rng.random())
        keep = business_value > KEEP_LABEL_VALUE_THRESHOLD or profiles[object_id] == Profile.HOT
        trust = TRUST_INIT_MIN + (TRUST_INIT_MAX - TRUST_INIT_MIN) * float(rng.random())

        objects.append(TrackedObject(
            id=object_id,
            sensitivity=sensitivity,
            trust=trust,
            base_business_value=business_value,
            keep_label=keep,
            tier=Tier.HOT,
            created_at=0,
            last_access_time=0,
            access_stats=AccessStats(window_size, burst_span, burst_min_events),
            trust_history=TrustHistory(band=convergence_band),
        ))
    return objects, profiles


def producer_legitimacy(role: Role, obj: TrackedObject, request_score: float) -> bool:
    """Legitimacy as judged by the producer of the request."""
    s = obj.sensitivity
    if role == Role.ADMIN:
        return True
    if role == Role.ANALYST:
        return s == Sensitivity.NON_SENSITIVE or obj.anonymized
    if role == Role.USER:
        return s == Sensitivity.NON_SENSITIVE
    if role == Role.SERVICE:
        return s in (Sensitivity.NON_SENSITIVE, Sensitivity.PII) and request_score >= SERVICE_SCORE_GATE
    return False


class WorkloadGenerator:
    """Pre-compute the per-tick access schedule for a run."""

    def __init__(
        self,
        objects: Sequence[TrackedObject],
        profiles: Sequence[Profile],
        duration: int,
        seed: int = SEED_WORKLOAD,
    ):
        if len(objects) != len(profiles):
            raise ValueError("objects and profiles must have the same length")
        self.objects = list(objects)
        self.profiles = list(profiles)
        self.duration = duration
        self.rng = np.random.default_rng(seed)
        self.sensitive_ids = tuple(
            o.id for o in self.objects if o.sensitivity != Sensitivity.NON_SENSITIVE
        )

    def generate(self) -> EventSchedule:
        """
        Build the event schedule.

        Per tick the generator draws one access uniform and one noise
        uniform per object (vectorised, in id order), then role and score
        draws for each produced event, then the attack-burst draws.
        """
        schedule: EventSchedule = {t: [] for t in range(self.duration)}

        for t in range(self.duration):
            access_u = self.rng.random(len(self.objects))
            noise_u = self.rng.random(len(self.objects))

            for obj, profile, u, noise in zip(self.objects, self.profiles, access_u, noise_u):
                if self._accessed(profile, t, u):
                    schedule[t].append(self._legit_event(t, obj))
                if noise < SUSPICIOUS_NOISE_PROBABILITY and obj.sensitivity != Sensitivity.NON_SENSITIVE:
                    schedule[t].append(self._suspicious_event(t, obj))

            if t > 0 and t % ATTACK_PERIOD == 0 and self.sensitive_ids:
                self._attack(schedule, t)

        total = sum(len(events) for events in schedule.values())
        logger.info(f"Generated {total} access events over {self.duration} ticks")
        return schedule

    @staticmethod
    def _accessed(profile: Profile, t: int, u: float) -> bool:
        if profile == Profile.HOT:
            return u < HOT_ACCESS_PROBABILITY
        if profile == Profile.WARM:
            return t % WARM_ACCESS_PERIOD == 0 and u < WARM_ACCESS_PROBABILITY
        return u < COLD_ACCESS_PROBABILITY

    def _attack(self, schedule: EventSchedule, t: int) -> None:
        targets = min(ATTACK_MAX_TARGETS, len(self.sensitive_ids))
        for _ in range(targets):
            obj = self.objects[self.sensitive_ids[int(self.rng.integers(len(self.sensitive_ids)))]]
            for dt in range(ATTACK_SPAN):
                tt = t + dt
                if tt >= self.duration:
                    continue
                for _ in range(ATTACK_EVENTS_PER_TICK):
                    schedule[tt].append(self._suspicious_event(tt, obj))

    def _legit_event(self, t: int, obj: TrackedObject) -> AccessEvent:
        role = self._pick_legit_role(obj)
        score = 0.70 + 0.30 * float(self.rng.random())
        return AccessEvent(t, obj.id, role, producer_legitimacy(role, obj, score), score)

    def _suspicious_event(self, t: int, obj: TrackedObject) -> AccessEvent:
        role = self._pick_suspicious_role(obj)
        score = 0.05 + 0.45 * float(self.rng.random())
        return AccessEvent(t, obj.id, role, producer_legitimacy(role, obj, score), score)

    def _pick_legit_role(self, obj: TrackedObject) -> Role:
        # usually a role the sensitivity rules allow
        if obj.sensitivity == Sensitivity.NON_SENSITIVE:
            u = self.rng.random()
            if u < 0.55:
                return Role.USER
            if u < 0.75:
                return Role.ANALYST
            if u < 0.92:
                return Role.SERVICE
            return Role.ADMIN
        if obj.sensitivity == Sensitivity.PII:
            return Role.SERVICE if self.rng.random() < 0.80 else Role.ADMIN
        return Role.ADMIN

    def _pick_suspicious_role(self, obj: TrackedObject) -> Role:
        # roles that violate policy for the object's class
        if obj.sensitivity == Sensitivity.NON_SENSITIVE:
            return Role.SERVICE if self.rng.random() < 0.7 else Role.USER
        u = self.rng.random()
        if u < 0.50:
            return Role.USER
        if u < 0.85:
            return Role.ANALYST
        return Role.SERVICE


def generate_workload(
    objects: Sequence[TrackedObject],
    profiles: Sequence[Profile],
    duration: int,
    seed: Optional[int] = None,
) -> EventSchedule:
    """Convenience wrapper around WorkloadGenerator."""
    return WorkloadGenerator(
        objects, profiles, duration, seed=SEED_WORKLOAD if seed is None else seed
    ).generate()
