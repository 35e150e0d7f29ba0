"""Unit tests for definition types and evaluator resolution."""

from dataclasses import dataclass
from typing import ClassVar

import pytest

from src.evaluation.resolver import HandlerResolver
from src.models.definitions import Definition, DefinitionType
from src.models.exceptions import HandlerRegistrationError, HandlerResolutionError
from src.models.indicators import COHORT_INDICATOR, INDICATOR, CohortIndicator


pytestmark = pytest.mark.unit


BASE = DefinitionType("base")
SPECIAL = DefinitionType("special", (BASE,))
LEFT = DefinitionType("left")
RIGHT = DefinitionType("right")
BOTH = DefinitionType("both", (LEFT, RIGHT))
MIDDLE = DefinitionType("middle", (BASE,))
DIAMOND = DefinitionType("diamond", (BASE, MIDDLE))
DEEP = DefinitionType("deep", (SPECIAL,))


@dataclass(eq=False)
class SpecialDefinition(Definition):
    definition_type: ClassVar[DefinitionType] = SPECIAL


@dataclass(eq=False)
class BothDefinition(Definition):
    definition_type: ClassVar[DefinitionType] = BOTH


class NamedEvaluator:
    """Evaluator that reports which registration handled the call."""

    def __init__(self, label):
        self.label = label

    def evaluate(self, definition, context):
        return self.label


class TestDefinitionType:
    """Tests for the declared type hierarchy."""

    def test_generations_most_specific_first(self):
        """Test ancestor levels are ordered from the type outward."""
        levels = [[t.name for t in level] for level in DEEP.generations()]
        assert levels == [["deep"], ["special"], ["base"]]

    def test_generations_lists_shared_ancestor_once(self):
        """Test a type reachable twice appears at its nearest level only."""
        levels = [[t.name for t in level] for level in DIAMOND.generations()]
        assert levels == [["diamond"], ["base", "middle"]]

    def test_is_specialization_of(self):
        """Test ancestry checks."""
        assert SPECIAL.is_specialization_of(BASE)
        assert SPECIAL.is_specialization_of(SPECIAL)
        assert not BASE.is_specialization_of(SPECIAL)
        assert not LEFT.is_specialization_of(RIGHT)

    def test_empty_name_rejected(self):
        """Test a type requires a name."""
        with pytest.raises(ValueError, match="cannot be empty"):
            DefinitionType("")

    def test_indicator_types(self):
        """Test built-in indicator types."""
        assert COHORT_INDICATOR.is_specialization_of(INDICATOR)
        assert CohortIndicator.definition_type is COHORT_INDICATOR


class TestHandlerResolver:
    """Tests for most-specific evaluator selection."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = HandlerResolver("test")

    def test_exact_match(self):
        """Test a type resolves to its own evaluator."""
        self.resolver.register(SPECIAL, NamedEvaluator("special"))
        assert self.resolver.resolve(SpecialDefinition()).label == "special"

    def test_most_specific_wins(self):
        """Test the specialization's evaluator beats the base evaluator."""
        self.resolver.register(BASE, NamedEvaluator("E1"))
        self.resolver.register(SPECIAL, NamedEvaluator("E2"))

        assert self.resolver.resolve(SpecialDefinition()).label == "E2"
        assert self.resolver.resolve_type(BASE).label == "E1"

    def test_registration_order_irrelevant(self):
        """Test specificity does not depend on registration order."""
        self.resolver.register(SPECIAL, NamedEvaluator("E2"))
        self.resolver.register(BASE, NamedEvaluator("E1"))

        assert self.resolver.resolve(SpecialDefinition()).label == "E2"

    def test_falls_back_to_ancestor(self):
        """Test an unregistered type uses its nearest registered ancestor."""
        self.resolver.register(BASE, NamedEvaluator("base"))
        assert self.resolver.resolve_type(DEEP).label == "base"

    def test_ambiguous_unrelated_parents(self):
        """Test two unrelated matching types raise instead of picking one."""
        self.resolver.register(LEFT, NamedEvaluator("left"))
        self.resolver.register(RIGHT, NamedEvaluator("right"))

        with pytest.raises(HandlerResolutionError, match="Ambiguous") as exc_info:
            self.resolver.resolve(BothDefinition())

        assert exc_info.value.definition_type == "both"
        assert sorted(exc_info.value.candidates) == ["left", "right"]

    def test_own_registration_breaks_tie(self):
        """Test registering the type itself removes the ambiguity."""
        self.resolver.register(LEFT, NamedEvaluator("left"))
        self.resolver.register(RIGHT, NamedEvaluator("right"))
        self.resolver.register(BOTH, NamedEvaluator("both"))

        assert self.resolver.resolve(BothDefinition()).label == "both"

    def test_diamond_prefers_more_specific_parent(self):
        """Test an ancestor of another candidate is never selected."""
        self.resolver.register(BASE, NamedEvaluator("base"))
        self.resolver.register(MIDDLE, NamedEvaluator("middle"))

        assert self.resolver.resolve_type(DIAMOND).label == "middle"

    def test_no_match_raises(self):
        """Test resolution fails when nothing matches."""
        self.resolver.register(LEFT, NamedEvaluator("left"))

        with pytest.raises(HandlerResolutionError, match="No test evaluator") as exc_info:
            self.resolver.resolve(SpecialDefinition())

        assert exc_info.value.candidates == []

    def test_duplicate_registration_rejected(self):
        """Test a type can only be registered once."""
        self.resolver.register(BASE, NamedEvaluator("first"))

        with pytest.raises(HandlerRegistrationError, match="already has"):
            self.resolver.register(BASE, NamedEvaluator("second"))

    def test_registered_types(self):
        """Test listing registrations."""
        self.resolver.register(BASE, NamedEvaluator("base"))
        self.resolver.register(LEFT, NamedEvaluator("left"))

        assert [t.name for t in self.resolver.registered_types()] == ["base", "left"]
        assert self.resolver.is_registered(BASE)
        assert not self.resolver.is_registered(SPECIAL)
