"""Shared fixtures for trustdecay tests."""

import pytest

from trustdecay.retention.models import Sensitivity, TrackedObject


@pytest.fixture
def make_object():
    """Factory for tracked objects with sensible defaults."""

    def _make(object_id=0, sensitivity=Sensitivity.NON_SENSITIVE, trust=0.7,
              business_value=0.5, **kwargs):
        return TrackedObject(
            id=object_id,
            sensitivity=sensitivity,
            trust=trust,
            base_business_value=business_value,
            **kwargs,
        )

    return _make
