"""Dataset evaluation entry point.

Dataset definitions are evaluated through the same resolver and service
machinery as indicators, with their own registration table.
"""

from typing import Any

from src.dataset.evaluators import DataSetWrappingDataSetEvaluator
from src.evaluation.context import EvaluationContext
from src.evaluation.parameter import Mapped
from src.evaluation.resolver import HandlerResolver
from src.evaluation.service import EvaluationService
from src.models.datasets import DATASET_WRAPPING, DataSetDefinition


def build_dataset_resolver() -> HandlerResolver:
    """Build the registration table of built-in dataset evaluators."""
    resolver: HandlerResolver = HandlerResolver("dataset")
    resolver.register(DATASET_WRAPPING, DataSetWrappingDataSetEvaluator())
    return resolver


_dataset_service = EvaluationService(build_dataset_resolver())


def get_dataset_service() -> EvaluationService:
    """Get the process-wide dataset evaluation service."""
    return _dataset_service


def evaluate_dataset(
    definition: DataSetDefinition | Mapped,
    context: EvaluationContext | None = None,
) -> Any:
    """Evaluate a dataset definition with the process-wide service."""
    return _dataset_service.evaluate(definition, context)
