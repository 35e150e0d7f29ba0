"""
Definition types and parameter declarations.

Every evaluable definition (indicators, dataset definitions) declares a
``DefinitionType``. Types form an explicit hierarchy: a type lists its
parents when it is built, so the hierarchy can only grow downward and is
acyclic by construction. Evaluator resolution works on this declared
hierarchy rather than on Python class inheritance.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class DefinitionType:
    """
    A named node in the definition type hierarchy.

    Attributes:
        name: Unique type tag (e.g., "cohort_indicator").
        parents: Types this type specializes.

    Examples:
        >>> base = DefinitionType("indicator")
        >>> cohort = DefinitionType("cohort_indicator", (base,))
        >>> cohort.is_specialization_of(base)
        True
        >>> [[t.name for t in level] for level in cohort.generations()]
        [['cohort_indicator'], ['indicator']]
    """

    name: str
    parents: tuple["DefinitionType", ...] = ()

    def __post_init__(self) -> None:
        """Validate the type tag and normalise parents to a tuple."""
        if not self.name:
            raise ValueError("Definition type name cannot be empty")
        object.__setattr__(self, "parents", tuple(self.parents))

    def generations(self) -> list[list["DefinitionType"]]:
        """
        Return ancestor levels, most specific first.

        Level 0 holds this type, level 1 its parents, and so on. A type
        reachable through several paths is listed once, at its nearest
        distance.

        Returns:
            List of levels, each a list of DefinitionType in declaration
            order.
        """
        levels: list[list[DefinitionType]] = []
        seen: set[str] = set()
        current: list[DefinitionType] = [self]

        while current:
            level: list[DefinitionType] = []
            for definition_type in current:
                if definition_type.name not in seen:
                    seen.add(definition_type.name)
                    level.append(definition_type)
            if not level:
                break
            levels.append(level)
            current = [parent for t in level for parent in t.parents]

        return levels

    def ancestors(self) -> list["DefinitionType"]:
        """Return this type and all its ancestors, most specific first."""
        return [t for level in self.generations() for t in level]

    def is_specialization_of(self, other: "DefinitionType") -> bool:
        """Return True if ``other`` is this type or one of its ancestors."""
        return any(t.name == other.name for t in self.ancestors())

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Parameter:
    """
    A formal parameter declared by a definition.

    Attributes:
        name: Parameter name used in mappings and contexts.
        label: Human-readable label.
        type: Expected Python type of the value (informational).
        default: Value used when neither the context nor a mapping binds it.
    """

    name: str
    label: str = ""
    type: type = object
    default: Any = None


@dataclass(eq=False)
class Definition:
    """
    Base for anything the evaluation service can evaluate.

    Subclasses set ``definition_type`` to their node in the type hierarchy.

    Attributes:
        name: Display name.
        description: Free-text description.
        parameters: Formal parameters this definition accepts.
    """

    definition_type: ClassVar[DefinitionType]

    name: str = ""
    description: str = ""
    parameters: list[Parameter] = field(default_factory=list)

    def get_parameter(self, name: str) -> Parameter | None:
        """Return the declared parameter called ``name``, or None."""
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    @property
    def parameter_names(self) -> list[str]:
        """Names of all declared parameters, in declaration order."""
        return [parameter.name for parameter in self.parameters]
