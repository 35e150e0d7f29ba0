"""Data models and entities."""

from src.models.datasets import (
    DATASET_DEFINITION,
    DATASET_WRAPPING,
    DataSetDefinition,
    DataSetWrappingDataSetDefinition,
)
from src.models.definitions import Definition, DefinitionType, Parameter
from src.models.indicators import (
    COHORT_INDICATOR,
    INDICATOR,
    CohortIndicator,
    Indicator,
    IndicatorResult,
)

__all__ = [
    "DATASET_DEFINITION",
    "DATASET_WRAPPING",
    "DataSetDefinition",
    "DataSetWrappingDataSetDefinition",
    "Definition",
    "DefinitionType",
    "Parameter",
    "COHORT_INDICATOR",
    "INDICATOR",
    "CohortIndicator",
    "Indicator",
    "IndicatorResult",
]
