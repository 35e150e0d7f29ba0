"""
Custom exception classes for indicator management and evaluation.

This module defines domain-specific exceptions that provide clear error
semantics for the failure modes of the evaluation subsystem.

Lookup misses (unknown uuid, no matching name) are not errors: read paths
return None or an empty list instead.
"""


class APIError(Exception):
    """
    Raised when a service-level operation fails unexpectedly.

    Wraps failures coming out of the registry or out of an evaluator so
    that callers see a single error type. The original exception is kept
    as ``__cause__``.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional error context.

    Examples:
        >>> raise APIError(
        ...     "Evaluator failed",
        ...     context={"indicator": "DQI1"}
        ... )
        Traceback (most recent call last):
        ...
        APIError: Evaluator failed (indicator=DQI1)
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize APIError.

        Args:
            message: Error description.
            context: Optional dictionary with error details.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class CohortEvaluationError(APIError):
    """
    Raised when a cohort indicator cannot be computed.

    Typical causes are a missing base population or a cohort query that
    pandas rejects.
    """


class HandlerResolutionError(Exception):
    """
    Raised when no single evaluator can be selected for a definition.

    Either no registered type matches the definition's type, or two or more
    equally specific types match (ambiguous tie).

    Attributes:
        message: Human-readable error description.
        definition_type: Name of the type being resolved.
        candidates: Names of the equally specific registered types, empty
            when nothing matched.

    Examples:
        >>> raise HandlerResolutionError(
        ...     "Ambiguous evaluator",
        ...     definition_type="composite",
        ...     candidates=["cohort_indicator", "ratio_indicator"],
        ... )
        Traceback (most recent call last):
        ...
        HandlerResolutionError: Ambiguous evaluator [type: composite, candidates: cohort_indicator, ratio_indicator]
    """

    def __init__(
        self,
        message: str,
        definition_type: str | None = None,
        candidates: list[str] | None = None,
    ):
        """
        Initialize HandlerResolutionError.

        Args:
            message: Error description.
            definition_type: Name of the definition type being resolved.
            candidates: Names of conflicting registered types.
        """
        super().__init__(message)
        self.message = message
        self.definition_type = definition_type
        self.candidates = list(candidates or [])

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.definition_type:
            parts.append(f"type: {self.definition_type}")
        if self.candidates:
            parts.append(f"candidates: {', '.join(self.candidates)}")

        if len(parts) > 1:
            context = ", ".join(parts[1:])
            return f"{parts[0]} [{context}]"
        return parts[0]


class HandlerRegistrationError(ValueError):
    """Raised when an evaluator is registered twice for the same type."""
