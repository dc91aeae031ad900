"""Default configuration values for the retention simulator.

This module centralizes all hard-coded magic numbers (window sizes,
decay weights, decision thresholds, ML hyperparameters, seeds, etc.)
into a single location. All modules should import these constants
instead of hard-coding values.

Usage:
    from trustdecay.config.defaults import (
        ACCESS_WINDOW_SIZE,
        DECAY_RATE,
        THRESHOLD_T_HIGH,
    )
"""

from __future__ import annotations

# =============================================================================
# Access Window Defaults
# =============================================================================

ACCESS_WINDOW_SIZE = 20

# Burst detection: >= BURST_MIN_EVENTS suspicious within BURST_SPAN ticks
BURST_SPAN = 3
BURST_MIN_EVENTS = 5

# Monitoring: requests scored below this are suspicious even if the role is allowed
REQUEST_SCORE_THRESHOLD = 0.55


# =============================================================================
# Lifecycle Windows
# =============================================================================

GRACE_PERIOD = 5
COLD_START_WINDOW = 20


# =============================================================================
# Risk Defaults
# =============================================================================

RISK_BASE_NON_SENSITIVE = 0.10
RISK_BASE_PII = 0.60
RISK_BASE_FINANCIAL = 0.70
RISK_BASE_HEALTH = 0.80

RISK_SUSPICIOUS_RATE_LIMIT = 0.20
RISK_SUSPICIOUS_PENALTY = 0.15
RISK_BURST_PENALTY = 0.15

# high_risk_flag is raised at or above this value
RISK_HIGH_FLAG = 0.70

# Risk reduction applied when an object gets anonymized
ANONYMIZE_RISK_REDUCTION = 0.20


# =============================================================================
# Trust Decay Defaults
# =============================================================================

TRUST_HALF_LIFE = 30
DECAY_RATE = 0.03
REINFORCEMENT_RATE = 0.10
RISK_PENALTY_WEIGHT = 0.12
ANOMALY_PENALTY_WEIGHT = 0.20

# Initial trust is drawn uniformly from [TRUST_INIT_MIN, TRUST_INIT_MAX]
TRUST_INIT_MIN = 0.55
TRUST_INIT_MAX = 0.80

# Convergence: last N trust values within a band of this width
CONVERGENCE_HISTORY = 10
CONVERGENCE_BAND = 0.04


# =============================================================================
# Retention Decision Thresholds
# =============================================================================

THRESHOLD_T_HIGH = 0.75
THRESHOLD_T_MID = 0.40
THRESHOLD_R_HIGH = 0.70
THRESHOLD_R_MID = 0.50
THRESHOLD_P_LOW = 0.30
THRESHOLD_P_MID = 0.50


# =============================================================================
# Relevance Model Defaults
# =============================================================================

ML_TRAIN_SAMPLES = 50_000
ML_EPOCHS = 200
ML_LEARNING_RATE = 0.01
ML_L2 = 1e-4
ML_MAX_STEP = 0.1  # per-weight, per-epoch update clip
ML_INIT_SCALE = 0.02  # weights start in [-0.01, 0.01)

# Predictions never leave [ML_PROBA_MIN, ML_PROBA_MAX]
ML_PROBA_MIN = 0.01
ML_PROBA_MAX = 0.99

# Numeric sensitivity encoding used as a model feature
SENSITIVITY_CODE_NON_SENSITIVE = 0.0
SENSITIVITY_CODE_PII = 0.4
SENSITIVITY_CODE_FINANCIAL = 0.7
SENSITIVITY_CODE_HEALTH = 1.0


# =============================================================================
# Workload Defaults
# =============================================================================

PROFILE_HOT_FRACTION = 0.15
PROFILE_WARM_FRACTION = 0.25
PROFILE_COLD_FRACTION = 0.60

# Per-tick access probability by profile
HOT_ACCESS_PROBABILITY = 0.25
WARM_ACCESS_PROBABILITY = 0.18
WARM_ACCESS_PERIOD = 5
COLD_ACCESS_PROBABILITY = 0.01

# Background suspicious noise on sensitive objects
SUSPICIOUS_NOISE_PROBABILITY = 0.0015

# Attack bursts
ATTACK_PERIOD = 30
ATTACK_MAX_TARGETS = 40
ATTACK_EVENTS_PER_TICK = 2
ATTACK_SPAN = 3

# Sensitivity mix (cumulative thresholds: 55% / 25% / 12% / 8%)
SENSITIVITY_SHARE_NON_SENSITIVE = 0.55
SENSITIVITY_SHARE_PII = 0.25
SENSITIVITY_SHARE_FINANCIAL = 0.12
SENSITIVITY_SHARE_HEALTH = 0.08

# Ground truth: keep if business value exceeds this (or HOT profile)
KEEP_LABEL_VALUE_THRESHOLD = 0.60


# =============================================================================
# Seeds
# =============================================================================

SEED_POPULATION = 7
SEED_WORKLOAD = 99
SEED_MODEL_INIT = 42
SEED_MODEL_TRAIN = 123


# =============================================================================
# Simulation Defaults
# =============================================================================

NUM_OBJECTS = 10_000
SIM_DURATION = 300
TICK_INTERVAL = 1


# =============================================================================
# Evidence Log Defaults
# =============================================================================

EVIDENCE_CSV_FILENAME = "trustsim_audit.csv"
EVIDENCE_LOG_CHANGED_ONLY = False
EVIDENCE_FLUSH_EVERY = 10


# =============================================================================
# Metrics Defaults
# =============================================================================

STORAGE_COST_HOT = 1.0
STORAGE_COST_COLD = 0.2
STORAGE_COST_DELETED = 0.0


# =============================================================================
# File Names
# =============================================================================

CONFIG_FILENAME = "trustdecay.yaml"
ENV_PREFIX = "TRUSTDECAY_"
