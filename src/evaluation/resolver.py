"""
Evaluator resolution by definition type.

A ``HandlerResolver`` holds an explicit registration table of
``DefinitionType -> evaluator``, populated once at startup. Resolution picks
the evaluator registered for the most specific type the definition's type
satisfies. Equally specific matches are an error rather than an arbitrary
pick.
"""

import logging
from typing import Any, Generic, Protocol, TypeVar

from src.models.definitions import Definition, DefinitionType
from src.models.exceptions import HandlerRegistrationError, HandlerResolutionError

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """
    Protocol every evaluator plugin must implement.

    Evaluators may read but never mutate the context, and must not touch
    the indicator registry. They may call back into an evaluation service
    for composite definitions.
    """

    def evaluate(self, definition: Any, context: Any) -> Any:
        """Compute the result of ``definition`` within ``context``."""


E = TypeVar("E", bound=Evaluator)


class HandlerResolver(Generic[E]):
    """
    Registration table and most-specific-match lookup for one evaluator family.

    Examples:
        >>> from src.models.indicators import INDICATOR, COHORT_INDICATOR
        >>> resolver = HandlerResolver("indicator")
        >>> resolver.register(INDICATOR, "generic")
        >>> resolver.register(COHORT_INDICATOR, "cohort")
        >>> resolver.resolve_type(COHORT_INDICATOR)
        'cohort'
    """

    def __init__(self, family: str = "evaluator") -> None:
        self.family = family
        self._handlers: dict[str, tuple[DefinitionType, E]] = {}

    def register(self, definition_type: DefinitionType, evaluator: E) -> None:
        """
        Associate an evaluator with a definition type.

        Args:
            definition_type: Type the evaluator supports.
            evaluator: Evaluator instance.

        Raises:
            HandlerRegistrationError: If the type already has an evaluator.
        """
        if definition_type.name in self._handlers:
            raise HandlerRegistrationError(
                f"Type '{definition_type.name}' already has a registered "
                f"{self.family} evaluator"
            )
        self._handlers[definition_type.name] = (definition_type, evaluator)
        logger.debug(
            "Registered %s evaluator %s for type '%s'",
            self.family,
            type(evaluator).__name__,
            definition_type.name,
        )

    def is_registered(self, definition_type: DefinitionType) -> bool:
        """Return True if an evaluator is registered for exactly this type."""
        return definition_type.name in self._handlers

    def registered_types(self) -> list[DefinitionType]:
        """Return registered types in registration order."""
        return [definition_type for definition_type, _ in self._handlers.values()]

    def resolve(self, definition: Definition) -> E:
        """
        Select the evaluator for a definition.

        Args:
            definition: Definition whose declared type drives the lookup.

        Returns:
            The evaluator registered for the most specific matching type.

        Raises:
            HandlerResolutionError: If no type matches or the match is
                ambiguous.
        """
        return self.resolve_type(definition.definition_type)

    def resolve_type(self, definition_type: DefinitionType) -> E:
        """
        Select the evaluator for a definition type.

        Candidates are the registered types among ``definition_type`` and
        its ancestors. The winner is the candidate that no other candidate
        specializes.

        Args:
            definition_type: Type to resolve.

        Returns:
            The selected evaluator.

        Raises:
            HandlerResolutionError: If no type matches or the match is
                ambiguous.
        """
        candidates = [
            candidate
            for candidate in definition_type.ancestors()
            if candidate.name in self._handlers
        ]
        if not candidates:
            raise HandlerResolutionError(
                f"No {self.family} evaluator registered",
                definition_type=definition_type.name,
            )

        most_specific = [
            candidate
            for candidate in candidates
            if not any(
                other.name != candidate.name and other.is_specialization_of(candidate)
                for other in candidates
            )
        ]
        if len(most_specific) > 1:
            raise HandlerResolutionError(
                f"Ambiguous {self.family} evaluator",
                definition_type=definition_type.name,
                candidates=[candidate.name for candidate in most_specific],
            )

        selected = most_specific[0]
        _, evaluator = self._handlers[selected.name]
        logger.debug(
            "Resolved %s evaluator for '%s' via '%s'",
            self.family,
            definition_type.name,
            selected.name,
        )
        return evaluator
