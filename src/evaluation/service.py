"""
Generic evaluation service.

Dispatches a definition, or a ``Mapped`` definition, to the evaluator its
``HandlerResolver`` selects. Mapped definitions are evaluated in a child
context holding the mapping; the caller's context is never modified.
"""

import logging
from typing import Generic, TypeVar

from src.evaluation.context import EvaluationContext
from src.evaluation.parameter import Mapped
from src.evaluation.resolver import HandlerResolver
from src.models.definitions import Definition
from src.models.exceptions import APIError, HandlerResolutionError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class EvaluationService(Generic[R]):
    """
    Evaluate definitions through a resolver's registration table.

    Attributes:
        resolver: Evaluator lookup for this definition family.
        strict_parameter_mapping: If True, a mapping that binds names the
            base definition does not declare is rejected.
    """

    def __init__(
        self,
        resolver: HandlerResolver,
        strict_parameter_mapping: bool = False,
    ) -> None:
        self.resolver = resolver
        self.strict_parameter_mapping = strict_parameter_mapping

    def evaluate(
        self,
        definition: Definition | Mapped,
        context: EvaluationContext | None = None,
    ) -> R:
        """
        Evaluate a bare or mapped definition.

        Args:
            definition: Definition to evaluate, or a Mapped wrapping one.
            context: Enclosing context; a fresh root context when None.

        Returns:
            Whatever the selected evaluator produces.

        Raises:
            HandlerResolutionError: If no single evaluator matches.
            APIError: If the evaluator fails or the mapping is rejected.
        """
        if context is None:
            context = EvaluationContext.root()

        if isinstance(definition, Mapped):
            return self.evaluate_mapped(definition, context)

        evaluator = self.resolver.resolve(definition)
        logger.debug(
            "Evaluating '%s' with %s", definition.name, type(evaluator).__name__
        )
        try:
            return evaluator.evaluate(definition, context)
        except (APIError, HandlerResolutionError):
            raise
        except Exception as exc:
            raise APIError(
                f"Evaluation failed: {exc}",
                context={
                    "definition": definition.name,
                    "evaluator": type(evaluator).__name__,
                },
            ) from exc

    def evaluate_mapped(self, mapped: Mapped, context: EvaluationContext) -> R:
        """
        Evaluate ``mapped.parameterizable`` in a child of ``context``.

        Args:
            mapped: Definition plus parameter bindings.
            context: Enclosing context, left unmodified.

        Returns:
            The base definition's result.
        """
        undeclared = mapped.undeclared_names()
        if undeclared:
            if self.strict_parameter_mapping:
                raise APIError(
                    "Parameter mapping binds undeclared parameters",
                    context={
                        "definition": mapped.parameterizable.name,
                        "undeclared": ", ".join(sorted(undeclared)),
                    },
                )
            logger.warning(
                "Mapping for '%s' binds undeclared parameters: %s",
                mapped.parameterizable.name,
                ", ".join(sorted(undeclared)),
            )

        child_context = EvaluationContext.clone_for_child(context, mapped)
        return self.evaluate(mapped.parameterizable, child_context)
