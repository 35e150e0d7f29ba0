"""Indicator service.

This module provides the service facade callers use to manage and evaluate
indicators: registry operations plus evaluation through the indicator
evaluator registration table. A process-wide instance and module-level
accessors are provided, following the same pattern as the registry.
"""

import logging
from typing import List, Optional

from src.config.parameters import ServiceSettings
from src.evaluation.context import EvaluationContext
from src.evaluation.parameter import Mapped
from src.evaluation.resolver import HandlerResolver
from src.evaluation.service import EvaluationService
from src.indicators.evaluators import CohortIndicatorEvaluator
from src.indicators.registry.defaults import seed_default_indicators
from src.indicators.registry.store import IndicatorRegistry
from src.models.indicators import COHORT_INDICATOR, Indicator, IndicatorResult

logger = logging.getLogger(__name__)


def build_indicator_resolver() -> HandlerResolver:
    """Build the registration table of built-in indicator evaluators.

    Returns:
        HandlerResolver: Resolver with every built-in evaluator registered.
    """
    resolver: HandlerResolver = HandlerResolver("indicator")
    resolver.register(COHORT_INDICATOR, CohortIndicatorEvaluator())
    return resolver


class IndicatorService:
    """Manage indicator definitions and evaluate them.

    Attributes:
        settings: Service configuration.
        registry: Indicator storage.
        evaluation: Evaluation service bound to the indicator resolver.
    """

    def __init__(
        self,
        settings: ServiceSettings | None = None,
        registry: IndicatorRegistry | None = None,
        resolver: HandlerResolver | None = None,
    ) -> None:
        self.settings = settings or ServiceSettings()
        self.registry = registry if registry is not None else IndicatorRegistry()
        self.evaluation: EvaluationService[IndicatorResult] = EvaluationService(
            resolver if resolver is not None else build_indicator_resolver(),
            strict_parameter_mapping=self.settings.strict_parameter_mapping,
        )

        if self.settings.seed_default_indicators:
            seed_default_indicators(self.registry)

    @property
    def resolver(self) -> HandlerResolver:
        """Indicator evaluator registration table."""
        return self.evaluation.resolver

    def save_indicator(self, indicator: Indicator) -> Indicator:
        """Save a new indicator; indicators with a uuid are left as they are."""
        return self.registry.save(indicator)

    def purge_indicator(self, indicator: Indicator) -> None:
        """Remove an indicator; unknown indicators are ignored."""
        self.registry.purge(indicator)

    def get_indicator_by_uuid(self, uuid: str) -> Optional[Indicator]:
        """Return the indicator with this uuid, or None."""
        return self.registry.get_by_uuid(uuid)

    def get_all_indicators(self, include_retired: bool = True) -> List[Indicator]:
        """Return every stored indicator (``include_retired`` is ignored)."""
        return self.registry.get_all(include_retired)

    def get_indicators(self, name: str, exact_match_only: bool = False) -> List[Indicator]:
        """Return indicators whose name equals or contains ``name``."""
        return self.registry.search(name, exact_match_only)

    def evaluate(
        self,
        indicator: Indicator | Mapped[Indicator],
        context: EvaluationContext | None = None,
    ) -> IndicatorResult:
        """Evaluate an indicator, or a mapped indicator in a child context.

        Args:
            indicator: Indicator or Mapped indicator.
            context: Enclosing context; a root context built from the
                configured default parameters when None.

        Returns:
            IndicatorResult: The evaluator's result.

        Raises:
            HandlerResolutionError: If no single evaluator matches.
            APIError: If evaluation fails.
        """
        if context is None:
            context = EvaluationContext.root(self.settings.default_parameters)
        return self.evaluation.evaluate(indicator, context)


_global_service: IndicatorService | None = None


def get_indicator_service() -> IndicatorService:
    """Get the process-wide indicator service, creating it on first use.

    Returns:
        IndicatorService: The global service instance.
    """
    global _global_service  # pylint: disable=global-statement
    if _global_service is None:
        _global_service = IndicatorService()
    return _global_service


def reset_indicator_service(settings: ServiceSettings | None = None) -> IndicatorService:
    """Replace the process-wide service (primarily for testing and the CLI).

    Args:
        settings: Settings for the new service.

    Returns:
        IndicatorService: The new global service instance.
    """
    global _global_service  # pylint: disable=global-statement
    _global_service = IndicatorService(settings)
    logger.info("Indicator service reset")
    return _global_service


def save_indicator(indicator: Indicator) -> Indicator:
    """Save an indicator in the global service."""
    return get_indicator_service().save_indicator(indicator)


def purge_indicator(indicator: Indicator) -> None:
    """Purge an indicator from the global service."""
    get_indicator_service().purge_indicator(indicator)


def get_indicator_by_uuid(uuid: str) -> Optional[Indicator]:
    """Get an indicator from the global service by uuid."""
    return get_indicator_service().get_indicator_by_uuid(uuid)


def get_all_indicators(include_retired: bool = True) -> List[Indicator]:
    """List all indicators in the global service."""
    return get_indicator_service().get_all_indicators(include_retired)


def get_indicators(name: str, exact_match_only: bool = False) -> List[Indicator]:
    """Search indicators by name in the global service."""
    return get_indicator_service().get_indicators(name, exact_match_only)


def evaluate_indicator(
    indicator: Indicator | Mapped[Indicator],
    context: EvaluationContext | None = None,
) -> IndicatorResult:
    """Evaluate an indicator with the global service."""
    return get_indicator_service().evaluate(indicator, context)
