"""Evaluation package: contexts, parameter mapping and evaluator dispatch.

This package provides the generic machinery used to evaluate indicator and
dataset definitions through a registration table of evaluators.
"""

from .context import EvaluationContext
from .parameter import Mapped
from .resolver import Evaluator, HandlerResolver
from .service import EvaluationService


__all__ = [
    "EvaluationContext",
    "Mapped",
    "Evaluator",
    "HandlerResolver",
    "EvaluationService",
]
