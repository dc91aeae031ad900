"""
Numeric helpers shared by the scoring pipeline.

Usage:
    from trustdecay.utils.numeric import clamp, stable_sigmoid

    trust = clamp(trust - penalty, 0.0, 1.0)
    p = stable_sigmoid(z)
"""

from __future__ import annotations

import math


def clamp(value: float, lo: float, hi: float) -> float:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1]."""
    return clamp(value, 0.0, 1.0)


def stable_sigmoid(z: float) -> float:
    """Logistic function without overflow for large |z|."""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    ez = math.exp(z)
    return ez / (1.0 + ez)
