"""
Pytest configuration and global fixtures.

This module provides shared test fixtures used across the test suite,
including a sample patient population and fresh indicator services.
"""

import random

import numpy as np
import pandas as pd
import pytest

from src.config.parameters import ServiceSettings
from src.indicators.service import IndicatorService


SEED = 42


def _apply_global_seed():
    """Apply global deterministic seed for tests.

    Ensures repeatable outcomes for any test relying on random or numpy generation.
    """
    random.seed(SEED)
    np.random.seed(SEED)


_apply_global_seed()


@pytest.fixture()
def sample_population():
    """
    Provide a small patient population.

    Returns:
        DataFrame with 8 patients and the columns used by the default
        indicators: program, enrollment_month, gender, age, cd4_count.

    Examples:
        >>> def test_size(sample_population):
        ...     assert len(sample_population) == 8
    """
    return pd.DataFrame(
        {
            "patient_id": [1, 2, 3, 4, 5, 6, 7, 8],
            "program": ["HIV", "HIV", "TB", "HIV", "TB", "HIV", "HIV", "TB"],
            "enrollment_month": ["Jan", "Feb", "Jan", "Feb", "Feb", "Mar", "Jan", "Feb"],
            "gender": ["M", "F", "M", "M", "F", "M", "F", "M"],
            "age": [34, 29, 12, 45, 61, 17, 8, 52],
            "cd4_count": [200, 500, 320, 410, 150, 700, 340, 900],
        }
    )


@pytest.fixture()
def indicator_service():
    """Provide an indicator service seeded with the default indicators."""
    return IndicatorService()


@pytest.fixture()
def empty_indicator_service():
    """Provide an indicator service with an empty registry."""
    return IndicatorService(ServiceSettings(seed_default_indicators=False))
