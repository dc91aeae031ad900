"""
Simulation configuration - every tunable of a run in one dataclass.

Values come from, in increasing priority: the constants in
``trustdecay.config.defaults``, a YAML file (``simulation:`` section),
``TRUSTDECAY_*`` environment variables, and explicit overrides.
"""
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from trustdecay.config import defaults

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid simulation configuration."""
    pass


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""

    # Access window / monitoring
    window_size: int = defaults.ACCESS_WINDOW_SIZE
    burst_span: int = defaults.BURST_SPAN
    burst_min_events: int = defaults.BURST_MIN_EVENTS
    request_score_threshold: float = defaults.REQUEST_SCORE_THRESHOLD

    # Lifecycle windows
    grace_period: int = defaults.GRACE_PERIOD
    cold_start_window: int = defaults.COLD_START_WINDOW

    # Risk
    risk_suspicious_limit: float = defaults.RISK_SUSPICIOUS_RATE_LIMIT
    risk_suspicious_penalty: float = defaults.RISK_SUSPICIOUS_PENALTY
    risk_burst_penalty: float = defaults.RISK_BURST_PENALTY
    risk_high_flag: float = defaults.RISK_HIGH_FLAG
    anonymize_risk_reduction: float = defaults.ANONYMIZE_RISK_REDUCTION

    # Trust decay
    half_life: int = defaults.TRUST_HALF_LIFE
    decay_rate: float = defaults.DECAY_RATE
    reinforcement_rate: float = defaults.REINFORCEMENT_RATE
    risk_weight: float = defaults.RISK_PENALTY_WEIGHT
    anomaly_weight: float = defaults.ANOMALY_PENALTY_WEIGHT
    convergence_band: float = defaults.CONVERGENCE_BAND

    # Decision thresholds
    t_high: float = defaults.THRESHOLD_T_HIGH
    t_mid: float = defaults.THRESHOLD_T_MID
    r_high: float = defaults.THRESHOLD_R_HIGH
    r_mid: float = defaults.THRESHOLD_R_MID
    p_low: float = defaults.THRESHOLD_P_LOW
    p_mid: float = defaults.THRESHOLD_P_MID

    # Relevance model
    ml_samples: int = defaults.ML_TRAIN_SAMPLES
    ml_epochs: int = defaults.ML_EPOCHS
    ml_learning_rate: float = defaults.ML_LEARNING_RATE
    ml_l2: float = defaults.ML_L2
    ml_max_step: float = defaults.ML_MAX_STEP

    # Simulation
    num_objects: int = defaults.NUM_OBJECTS
    duration: int = defaults.SIM_DURATION
    tick_interval: int = defaults.TICK_INTERVAL

    # Seeds
    seed_population: int = defaults.SEED_POPULATION
    seed_workload: int = defaults.SEED_WORKLOAD
    seed_model_init: int = defaults.SEED_MODEL_INIT
    seed_model_train: int = defaults.SEED_MODEL_TRAIN

    # Evidence log
    evidence_path: str = defaults.EVIDENCE_CSV_FILENAME
    log_changed_only: bool = defaults.EVIDENCE_LOG_CHANGED_ONLY
    flush_every: int = defaults.EVIDENCE_FLUSH_EVERY

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        """Create config from dict, ignoring unknown keys."""
        unknown = sorted(k for k in data if k not in cls.__dataclass_fields__)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_dict(self) -> dict:
        """Convert config to dict."""
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> "SimulationConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(
        cls,
        base: Optional["SimulationConfig"] = None,
        environ: Optional[dict] = None,
    ) -> "SimulationConfig":
        """Overlay ``TRUSTDECAY_<FIELD>`` environment variables onto ``base``."""
        base = base or cls()
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for f in fields(cls):
            key = defaults.ENV_PREFIX + f.name.upper()
            if key not in environ:
                continue
            overrides[f.name] = _coerce(f.name, environ[key], getattr(base, f.name))
        return replace(base, **overrides)

    @classmethod
    def load(cls, path: Path) -> "SimulationConfig":
        """Load config from the ``simulation`` section of a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        section = data.get("simulation", data)
        if not isinstance(section, dict):
            raise ConfigError(f"'simulation' section in {path} must be a mapping")
        return cls.from_dict(section)

    def save(self, path: Path) -> None:
        """Write config to a YAML file under the ``simulation`` key."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump({"simulation": self.to_dict()}, f, default_flow_style=False)

    def validate(self) -> "SimulationConfig":
        """
        Check the configuration, raising ConfigError on the first problem.

        Returns self so calls can be chained.
        """
        for f in fields(self):
            _check_type(f.name, getattr(self, f.name), f.default)

        positive = (
            "window_size",
            "burst_span",
            "burst_min_events",
            "half_life",
            "ml_samples",
            "ml_epochs",
            "num_objects",
            "duration",
            "flush_every",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

        for name in ("grace_period", "cold_start_window"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

        if self.tick_interval != 1:
            raise ConfigError(f"tick_interval is fixed at 1, got {self.tick_interval}")

        unit = (
            "request_score_threshold",
            "risk_high_flag",
            "t_high",
            "t_mid",
            "r_high",
            "r_mid",
            "p_low",
            "p_mid",
        )
        for name in unit:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")

        if self.t_mid > self.t_high:
            raise ConfigError(f"t_mid ({self.t_mid}) must not exceed t_high ({self.t_high})")
        if self.r_mid > self.r_high:
            raise ConfigError(f"r_mid ({self.r_mid}) must not exceed r_high ({self.r_high})")
        if self.p_low > self.p_mid:
            raise ConfigError(f"p_low ({self.p_low}) must not exceed p_mid ({self.p_mid})")

        non_negative = (
            "decay_rate",
            "reinforcement_rate",
            "risk_weight",
            "anomaly_weight",
            "convergence_band",
            "ml_learning_rate",
            "ml_l2",
            "ml_max_step",
        )
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

        return self


def _check_type(name: str, value: Any, default: Any) -> None:
    """Raise ConfigError if ``value`` does not match the type of ``default``."""
    if isinstance(default, bool):
        ok = isinstance(value, bool)
    elif isinstance(default, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(default, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, type(default))
    if not ok:
        raise ConfigError(
            f"{name} must be of type {type(default).__name__}, got {value!r}"
        )


def _coerce(name: str, raw: str, current: Any) -> Any:
    """Convert an environment string to the type of the current value."""
    raw = raw.strip()
    if isinstance(current, bool):
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{name}: expected a boolean, got {raw!r}")
    try:
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name}: cannot parse {raw!r}") from e
    return raw


def load_config(
    path: Optional[Path] = None,
    environ: Optional[dict] = None,
    **overrides: Any,
) -> SimulationConfig:
    """
    Build the effective configuration and validate it.

    Args:
        path: Optional YAML file; defaults are used when omitted
        environ: Environment mapping (default: os.environ)
        **overrides: Explicit values, e.g. from command-line flags

    Raises:
        ConfigError: If any value is invalid
    """
    config = SimulationConfig.load(path) if path else SimulationConfig()
    config = SimulationConfig.from_env(config, environ)
    return config.with_overrides(**overrides).validate()
