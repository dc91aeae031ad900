"""
TrustDecayEngine - Per-tick trust update.

    trust' = clamp(trust
                   - decay_rate * inactivity
                   + reinforcement_rate * legit_rate
                   - risk_weight * risk
                   - anomaly_weight * anomaly, 0, 1)

    inactivity = min(1, max(0, now - last_access) / half_life)

Risk and anomaly must be refreshed before this runs.
"""

from __future__ import annotations

from typing import Dict, Optional

from trustdecay.config.defaults import (
    ANOMALY_PENALTY_WEIGHT,
    DECAY_RATE,
    REINFORCEMENT_RATE,
    RISK_PENALTY_WEIGHT,
    TRUST_HALF_LIFE,
)
from trustdecay.utils.numeric import clamp_unit

from .models import TrackedObject


class TrustDecayEngine:
    """Apply inactivity decay, legitimate-use reinforcement and risk penalties."""

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

        self.half_life = self.config.get("half_life", TRUST_HALF_LIFE)
        self.decay_rate = self.config.get("decay_rate", DECAY_RATE)
        self.reinforcement_rate = self.config.get("reinforcement_rate", REINFORCEMENT_RATE)
        self.risk_weight = self.config.get("risk_weight", RISK_PENALTY_WEIGHT)
        self.anomaly_weight = self.config.get("anomaly_weight", ANOMALY_PENALTY_WEIGHT)

    def inactivity_factor(self, obj: TrackedObject, now: int) -> float:
        idle = max(0, now - obj.last_access_time)
        return min(1.0, idle / self.half_life)

    def compute(self, obj: TrackedObject, now: int) -> float:
        """Return the updated trust without mutating the object."""
        updated = (
            obj.trust
            - self.decay_rate * self.inactivity_factor(obj, now)
            + self.reinforcement_rate * obj.access_stats.legit_rate()
            - self.risk_weight * obj.risk_stats.risk
            - self.anomaly_weight * obj.risk_stats.anomaly_score
        )
        return clamp_unit(updated)

    def update_trust(self, obj: TrackedObject, now: int) -> float:
        obj.set_trust(self.compute(obj, now))
        return obj.trust
