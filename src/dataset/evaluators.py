"""Dataset evaluators."""

from typing import Any

from src.evaluation.context import EvaluationContext
from src.models.datasets import DataSetWrappingDataSetDefinition


class DataSetWrappingDataSetEvaluator:
    """Returns the dataset a wrapping definition already carries."""

    def evaluate(
        self, definition: DataSetWrappingDataSetDefinition, context: EvaluationContext
    ) -> Any:
        """Return ``definition.data`` unchanged; the context is ignored."""
        return definition.data
