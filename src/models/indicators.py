"""
Indicator definitions and evaluation results.

An indicator is a named, parameterizable definition of a derived
measurement over a patient population. Identity is the uuid, which the
indicator registry assigns on first save.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from src.models.definitions import Definition, DefinitionType

if TYPE_CHECKING:
    from src.evaluation.context import EvaluationContext


INDICATOR = DefinitionType("indicator")
COHORT_INDICATOR = DefinitionType("cohort_indicator", (INDICATOR,))


@dataclass(eq=False)
class Indicator(Definition):
    """
    Abstract indicator definition.

    Attributes:
        uuid: Stable identifier, None until the registry saves it.
        retired: True if the indicator is retired.

    The hash is fixed the first time it is taken, so an indicator placed in
    a set or used as a dict key before it is saved stays findable after
    the registry assigns its uuid.
    """

    definition_type: ClassVar[DefinitionType] = INDICATOR

    uuid: str | None = None
    retired: bool = False
    _hash: int | None = field(default=None, init=False, repr=False, compare=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Indicator):
            return NotImplemented
        if self.uuid is None or other.uuid is None:
            return self is other
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(self.uuid) if self.uuid else id(self)
        return self._hash


@dataclass(eq=False)
class CohortIndicator(Indicator):
    """
    Indicator computed over the members of a cohort.

    The cohort is the subset of the base population selected by
    ``cohort_query`` (a pandas query expression). Declared parameters are
    available inside the query as ``@name``.

    Attributes:
        cohort_query: Row filter applied to the base population; None
            selects everyone.
        aggregation: "count" for the cohort size, "fraction" for the share
            of the base population.

    Examples:
        >>> indicator = CohortIndicator(
        ...     name="DQI3",
        ...     description="# of male adult patients",
        ...     cohort_query="gender == 'M' and age >= 15",
        ... )
        >>> indicator.aggregation
        'count'
    """

    definition_type: ClassVar[DefinitionType] = COHORT_INDICATOR

    cohort_query: str | None = None
    aggregation: Literal["count", "fraction"] = "count"

    def __post_init__(self) -> None:
        """Validate aggregation mode."""
        if self.aggregation not in ("count", "fraction"):
            raise ValueError(
                f"Unsupported aggregation '{self.aggregation}' for indicator "
                f"'{self.name}'"
            )


@dataclass(frozen=True)
class IndicatorResult:
    """
    Outcome of evaluating one indicator.

    Attributes:
        indicator: The indicator that was evaluated.
        context: The context the evaluator ran in (a child context for
            mapped evaluations).
        value: The computed value.
    """

    indicator: Indicator
    context: "EvaluationContext"
    value: Any = field(default=None)
