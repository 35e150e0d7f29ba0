"""Default indicator definitions.

This module seeds a registry with the data quality indicators (DQI1-DQI4)
that ship with the service. Each indicator is saved through the registry
so it receives a uuid.
"""

import logging

from src.indicators.registry.store import IndicatorRegistry
from src.models.definitions import Parameter
from src.models.indicators import CohortIndicator, Indicator


logger = logging.getLogger(__name__)


def default_indicators() -> list[Indicator]:
    """Build fresh, unsaved copies of the default indicators.

    Returns:
        List[Indicator]: DQI1 to DQI4, in order.
    """
    return [
        CohortIndicator(
            name="DQI1",
            description="# of patients enrolled in the HIV Program",
            cohort_query="program == 'HIV'",
        ),
        CohortIndicator(
            name="DQI2",
            description="# of patients enrolled at the start of this month",
            cohort_query="enrollment_month == @month",
            parameters=[Parameter("month", "Month of enrollment", str)],
        ),
        CohortIndicator(
            name="DQI3",
            description="# of male adult patients",
            cohort_query="gender == 'M' and age >= @min_age",
            parameters=[Parameter("min_age", "Minimum adult age", int, 15)],
        ),
        CohortIndicator(
            name="DQI4",
            description="# of patients with low cd4 count",
            cohort_query="cd4_count < @cd4_threshold",
            parameters=[Parameter("cd4_threshold", "CD4 count threshold", int, 350)],
        ),
    ]


def seed_default_indicators(registry: IndicatorRegistry) -> list[Indicator]:
    """Save the default indicators into a registry.

    Args:
        registry: Registry to seed.

    Returns:
        List[Indicator]: The saved indicators.
    """
    saved = [registry.save(indicator) for indicator in default_indicators()]
    logger.info(
        "Default indicators registered: %s",
        ", ".join(indicator.name for indicator in saved),
    )
    return saved
