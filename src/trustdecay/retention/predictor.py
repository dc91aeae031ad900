"""
RelevancePredictor - Logistic regression over nine fixed features.

Features (in order):
    [1, business_value, access_rate, legit_rate, suspicious_rate,
     trust, sensitivity_code, anomaly_score, risk]

Every non-bias feature lives in [0, 1] and is mapped to [-1, 1] with
``(v - 0.5) * 2`` before use, both when training and when predicting.

Training is a single full-batch gradient descent over synthetic samples.
Sample generation draws an (N, 8) uniform matrix from a PCG64 generator;
column k of row i is the k-th uniform consumed by sample i:

    0  business value
    1  access-rate mixture selector (20% high / 50% medium / 30% low)
    2  access-rate magnitude within the selected band
    3  legit factor
    4  suspicious noise
    5  trust noise
    6  sensitivity selector (55% / 25% / 12% / 8%)
    7  burst Bernoulli draw
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from trustdecay.config.defaults import (
    ML_EPOCHS,
    ML_INIT_SCALE,
    ML_L2,
    ML_LEARNING_RATE,
    ML_MAX_STEP,
    ML_PROBA_MAX,
    ML_PROBA_MIN,
    ML_TRAIN_SAMPLES,
    RISK_BASE_FINANCIAL,
    RISK_BASE_HEALTH,
    RISK_BASE_NON_SENSITIVE,
    RISK_BASE_PII,
    RISK_BURST_PENALTY,
    RISK_SUSPICIOUS_PENALTY,
    RISK_SUSPICIOUS_RATE_LIMIT,
    SEED_MODEL_INIT,
    SEED_MODEL_TRAIN,
    SENSITIVITY_CODE_FINANCIAL,
    SENSITIVITY_CODE_HEALTH,
    SENSITIVITY_CODE_NON_SENSITIVE,
    SENSITIVITY_CODE_PII,
)
from trustdecay.utils.numeric import clamp, stable_sigmoid

from .models import TrackedObject

logger = logging.getLogger(__name__)

FEATURE_NAMES = (
    "bias",
    "business_value",
    "access_rate",
    "legit_rate",
    "suspicious_rate",
    "trust",
    "sensitivity",
    "anomaly_score",
    "risk",
)
DIM = len(FEATURE_NAMES)

# Cumulative sensitivity thresholds and the matching (code, base risk) pairs
_SENSITIVITY_CUTS = np.array([0.55, 0.80, 0.92])
_SENSITIVITY_CODES = np.array([
    SENSITIVITY_CODE_NON_SENSITIVE,
    SENSITIVITY_CODE_PII,
    SENSITIVITY_CODE_FINANCIAL,
    SENSITIVITY_CODE_HEALTH,
])
_SENSITIVITY_BASE_RISK = np.array([
    RISK_BASE_NON_SENSITIVE,
    RISK_BASE_PII,
    RISK_BASE_FINANCIAL,
    RISK_BASE_HEALTH,
])


@dataclass
class TrainingReport:
    """Summary of a training run."""
    samples: int
    epochs: int
    positive_rate: float
    final_loss: float
    accuracy: float
    weights: list[float]


def rescale(features: np.ndarray) -> np.ndarray:
    """Map non-bias columns from [0, 1] to [-1, 1]; returns a new array."""
    out = np.array(features, dtype=np.float64, copy=True)
    out[..., 1:] = (out[..., 1:] - 0.5) * 2.0
    return out


def _sigmoid(z: np.ndarray) -> np.ndarray:
    e = np.exp(-np.abs(z))
    return np.where(z >= 0, 1.0 / (1.0 + e), e / (1.0 + e))


def synthesize_samples(n: int, seed: int = SEED_MODEL_TRAIN) -> tuple[np.ndarray, np.ndarray]:
    """
    Generate labelled synthetic training data.

    Args:
        n: Number of samples
        seed: Seed for numpy's PCG64 generator

    Returns:
        (features, labels): raw (unscaled) (n, 9) features and 0/1 labels
    """
    rng = np.random.default_rng(seed)
    u = rng.random((n, 8))

    business_value = u[:, 0]

    mix = u[:, 1]
    access_rate = np.where(
        mix < 0.2,
        0.6 + 0.4 * u[:, 2],
        np.where(mix < 0.7, 0.2 + 0.5 * u[:, 2], 0.25 * u[:, 2]),
    )

    legit_rate = np.clip(access_rate * (0.6 + 0.4 * u[:, 3]), 0.0, 1.0)
    suspicious_rate = np.clip(
        access_rate - legit_rate + 0.2 * u[:, 4] * (1.0 - legit_rate), 0.0, 1.0
    )
    trust = np.clip(
        0.5 + 0.4 * legit_rate - 0.6 * suspicious_rate + 0.1 * (u[:, 5] - 0.5),
        0.0,
        1.0,
    )

    sensitivity_idx = np.searchsorted(_SENSITIVITY_CUTS, u[:, 6], side="right")
    sensitivity_code = _SENSITIVITY_CODES[sensitivity_idx]

    burst_probability = np.where(suspicious_rate > 0.25, 0.25, 0.05)
    burst = (u[:, 7] < burst_probability).astype(np.float64)
    anomaly = np.clip(0.5 * suspicious_rate + 0.5 * burst, 0.0, 1.0)
    risk = (
        _SENSITIVITY_BASE_RISK[sensitivity_idx]
        + np.where(suspicious_rate > RISK_SUSPICIOUS_RATE_LIMIT, RISK_SUSPICIOUS_PENALTY, 0.0)
        + burst * RISK_BURST_PENALTY
    )
    risk = np.clip(risk, 0.0, 1.0)

    relevant = (business_value > 0.65) | (access_rate > 0.50)
    relevant &= ~((risk > 0.85) & (suspicious_rate > 0.35))

    features = np.column_stack([
        np.ones(n),
        business_value,
        access_rate,
        legit_rate,
        suspicious_rate,
        trust,
        sensitivity_code,
        anomaly,
        risk,
    ])
    return features, relevant.astype(np.float64)


class RelevancePredictor:
    """
    Predict the probability that an object stays business-relevant.

    Train once with ``train_synthetic()`` before the simulation starts;
    ``predict()`` is then a pure function of the object's live state.
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

        self.samples = self.config.get("ml_samples", ML_TRAIN_SAMPLES)
        self.epochs = self.config.get("ml_epochs", ML_EPOCHS)
        self.learning_rate = self.config.get("ml_learning_rate", ML_LEARNING_RATE)
        self.l2 = self.config.get("ml_l2", ML_L2)
        self.max_step = self.config.get("ml_max_step", ML_MAX_STEP)
        self.init_seed = self.config.get("seed_model_init", SEED_MODEL_INIT)
        self.train_seed = self.config.get("seed_model_train", SEED_MODEL_TRAIN)

        init_rng = np.random.default_rng(self.init_seed)
        self._w = (init_rng.random(DIM) - 0.5) * ML_INIT_SCALE
        self._w_list = self._w.tolist()
        self.is_trained = False
        self.report: Optional[TrainingReport] = None

    @property
    def weights(self) -> list[float]:
        return list(self._w_list)

    @property
    def training_accuracy(self) -> Optional[float]:
        """Accuracy on the training set, or None before training."""
        return self.report.accuracy if self.report is not None else None

    def set_weights(self, weights: Sequence[float]) -> None:
        """Install externally supplied weights (marks the model trained)."""
        if len(weights) != DIM:
            raise ValueError(f"Expected {DIM} weights, got {len(weights)}")
        self._w = np.asarray(weights, dtype=np.float64).copy()
        self._w_list = self._w.tolist()
        self.is_trained = True

    def train_synthetic(self) -> TrainingReport:
        """Fit the weights on freshly generated synthetic data."""
        raw, y = synthesize_samples(self.samples, seed=self.train_seed)
        x = rescale(raw)
        n = x.shape[0]
        w = self._w.copy()

        for _ in range(self.epochs):
            p = np.clip(_sigmoid(x @ w), ML_PROBA_MIN, ML_PROBA_MAX)
            grad = x.T @ (p - y) / n + self.l2 * w
            w -= np.clip(self.learning_rate * grad, -self.max_step, self.max_step)

        self._w = w
        self._w_list = w.tolist()
        self.is_trained = True

        p = np.clip(_sigmoid(x @ w), ML_PROBA_MIN, ML_PROBA_MAX)
        loss = float(-np.mean(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))
        accuracy = float(np.mean((p >= 0.5) == (y > 0.5)))

        self.report = TrainingReport(
            samples=n,
            epochs=self.epochs,
            positive_rate=float(y.mean()),
            final_loss=loss,
            accuracy=accuracy,
            weights=self.weights,
        )
        logger.info(
            f"Relevance model trained: {n} samples, {self.epochs} epochs, "
            f"loss={loss:.4f}, accuracy={accuracy:.3f}"
        )
        return self.report

    @staticmethod
    def features(obj: TrackedObject) -> list[float]:
        """Raw (unscaled) feature vector for an object."""
        stats = obj.access_stats
        return [
            1.0,
            obj.base_business_value,
            stats.access_rate(),
            stats.legit_rate(),
            stats.suspicious_rate(),
            obj.trust,
            obj.sensitivity.code,
            obj.risk_stats.anomaly_score,
            obj.risk_stats.risk,
        ]

    def predict_features(self, raw: Sequence[float]) -> float:
        """Predict from a raw 9-element feature vector."""
        z = self._w_list[0] * raw[0]
        for j in range(1, DIM):
            z += self._w_list[j] * ((raw[j] - 0.5) * 2.0)
        return clamp(stable_sigmoid(z), ML_PROBA_MIN, ML_PROBA_MAX)

    def predict(self, obj: TrackedObject) -> float:
        return self.predict_features(self.features(obj))

    def predict_batch(self, raw: np.ndarray) -> np.ndarray:
        """Vectorised prediction over an (n, 9) raw feature matrix."""
        return np.clip(_sigmoid(rescale(raw) @ self._w), ML_PROBA_MIN, ML_PROBA_MAX)
