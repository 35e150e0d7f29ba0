"""
Evaluation context model.

An ``EvaluationContext`` carries the parameter bindings active for one
evaluation plus a non-owning link to the context it was derived from.
Parameter lookup is dynamically scoped: a context's own bindings win, and
names it does not bind fall back to the parent chain.

Contexts are only ever created by descending (``root`` then
``clone_for_child``); an existing context's parent is never rewired, so the
chain is acyclic and lookups always terminate.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

from src.evaluation.parameter import Mapped, parse_expression

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class EvaluationContext:
    """
    Immutable set of parameter bindings with an optional parent.

    Attributes:
        parameters: This context's own bindings (read-only).
        parent: Enclosing context, None for a root.
        base_population: Patient rows the evaluation runs over, inherited by
            child contexts.
        evaluation_date: Date the evaluation is run as of, inherited by
            child contexts.

    Examples:
        >>> root = EvaluationContext.root({"month": "Jan"})
        >>> root.resolve("month")
        'Jan'
        >>> root.resolve("year") is None
        True
    """

    parameters: Mapping[str, Any] = field(default_factory=dict)
    parent: Optional["EvaluationContext"] = None
    base_population: Optional["pd.DataFrame"] = None
    evaluation_date: date | None = None

    def __post_init__(self) -> None:
        """Copy parameters into a read-only mapping."""
        object.__setattr__(
            self, "parameters", MappingProxyType(dict(self.parameters or {}))
        )

    @classmethod
    def root(
        cls,
        parameters: Mapping[str, Any] | None = None,
        base_population: Optional["pd.DataFrame"] = None,
        evaluation_date: date | None = None,
    ) -> "EvaluationContext":
        """
        Create a context with no parent.

        Args:
            parameters: Global evaluation parameters.
            base_population: Patient rows indicators are computed over.
            evaluation_date: Date the evaluation is run as of.

        Returns:
            A root EvaluationContext.
        """
        return cls(
            parameters=parameters or {},
            parent=None,
            base_population=base_population,
            evaluation_date=evaluation_date,
        )

    @classmethod
    def clone_for_child(
        cls, context: "EvaluationContext", mapped: Mapped
    ) -> "EvaluationContext":
        """
        Create a child context scoped to a mapped definition.

        The child's own parameters are exactly ``mapped.parameter_mapping``
        and its parent is ``context``. The population and evaluation date
        are inherited. ``context`` is left untouched.

        Args:
            context: The enclosing context.
            mapped: Mapped definition whose bindings the child carries.

        Returns:
            A new EvaluationContext one level below ``context``.
        """
        child = cls(
            parameters=mapped.parameter_mapping,
            parent=context,
            base_population=context.base_population,
            evaluation_date=context.evaluation_date,
        )
        logger.debug(
            "Child context for '%s' at depth %d with parameters: %s",
            mapped.parameterizable.name,
            child.depth,
            ", ".join(sorted(child.parameters)) or "<none>",
        )
        return child

    @property
    def depth(self) -> int:
        """Number of ancestors above this context (0 for a root)."""
        depth = 0
        context = self.parent
        while context is not None:
            depth += 1
            context = context.parent
        return depth

    def contains(self, name: str) -> bool:
        """Return True if ``name`` is bound here or in any ancestor."""
        context: EvaluationContext | None = self
        while context is not None:
            if name in context.parameters:
                return True
            context = context.parent
        return False

    def resolve(self, name: str, default: Any = None) -> Any:
        """
        Resolve a parameter value.

        Looks in this context's own bindings first, then walks the parent
        chain. A bound value of the form ``${other}`` is resolved as
        ``other`` against the parent of the binding context (or the same
        context for a root).

        Args:
            name: Parameter name.
            default: Returned when the name is not bound anywhere.

        Returns:
            The resolved value, or ``default``.
        """
        found, value = self._lookup(name, frozenset())
        return value if found else default

    def _lookup(self, name: str, visiting: frozenset) -> tuple[bool, Any]:
        context: EvaluationContext | None = self
        while context is not None:
            if name in context.parameters:
                value = context.parameters[name]
                reference = parse_expression(value)
                if reference is None:
                    return True, value

                key = (id(context), name)
                if key in visiting:
                    logger.warning(
                        "Circular parameter reference while resolving '%s'", name
                    )
                    return False, None
                target = context.parent if context.parent is not None else context
                return target._lookup(reference, visiting | {key})
            context = context.parent
        return False, None

    def effective_parameters(self) -> dict[str, Any]:
        """
        Return every name visible from this context with its resolved value.

        Returns:
            Dict of parameter name to resolved value, child bindings
            overriding inherited ones. Names whose expression cannot be
            resolved are omitted.
        """
        names: list[str] = []
        context: EvaluationContext | None = self
        while context is not None:
            for name in context.parameters:
                if name not in names:
                    names.append(name)
            context = context.parent

        resolved: dict[str, Any] = {}
        for name in names:
            found, value = self._lookup(name, frozenset())
            if found:
                resolved[name] = value
        return resolved
