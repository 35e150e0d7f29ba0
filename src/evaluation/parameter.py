"""
Parameter mapping for definitions.

A ``Mapped`` pairs a definition with a substitution of its formal
parameters. Mapping values are either literal values or expressions of the
form ``${name}``, which refer to a parameter of the enclosing context.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Mapping, TypeVar

from src.models.definitions import Definition


T = TypeVar("T", bound=Definition)

EXPRESSION_PATTERN = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_.]*)\}$")


def parse_expression(value: Any) -> str | None:
    """
    Return the referenced parameter name if ``value`` is an expression.

    Args:
        value: A mapping value.

    Returns:
        The parameter name for ``"${name}"`` strings, otherwise None.

    Examples:
        >>> parse_expression("${startDate}")
        'startDate'
        >>> parse_expression("Jan") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = EXPRESSION_PATTERN.match(value.strip())
    if match:
        return match.group(1)
    return None


@dataclass(frozen=True)
class Mapped(Generic[T]):
    """
    A definition paired with concrete bindings for its parameters.

    Immutable once constructed: the mapping is copied into a read-only
    view, so later changes to the caller's dict are not seen.

    Attributes:
        parameterizable: The base definition to evaluate.
        parameter_mapping: Formal parameter name to value or expression.

    Examples:
        >>> from src.models.indicators import CohortIndicator
        >>> mapped = Mapped(CohortIndicator(name="DQI2"), {"month": "Feb"})
        >>> mapped.parameter_mapping["month"]
        'Feb'
    """

    parameterizable: T
    parameter_mapping: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Reject nested mappings and freeze the mapping."""
        if isinstance(self.parameterizable, Mapped):
            raise TypeError("Mapped must wrap a definition, not another Mapped")
        if self.parameterizable is None:
            raise TypeError("Mapped requires a definition to wrap")
        object.__setattr__(
            self,
            "parameter_mapping",
            MappingProxyType(dict(self.parameter_mapping or {})),
        )

    def undeclared_names(self) -> list[str]:
        """Return mapping keys the base definition does not declare."""
        declared = set(self.parameterizable.parameter_names)
        return [name for name in self.parameter_mapping if name not in declared]
