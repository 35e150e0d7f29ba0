"""
Indicator evaluators.

Evaluators compute an ``IndicatorResult`` for one family of indicator
definitions. They read the evaluation context but never modify it.
"""

import logging
from typing import Any

import pandas as pd

from src.evaluation.context import EvaluationContext
from src.models.exceptions import CohortEvaluationError
from src.models.indicators import CohortIndicator, IndicatorResult

logger = logging.getLogger(__name__)


def query_locals(indicator: CohortIndicator, context: EvaluationContext) -> dict[str, Any]:
    """
    Build the ``@name`` variables available to a cohort query.

    Every parameter visible from the context is exposed. Declared
    parameters the context does not bind fall back to their declared
    default. The context's evaluation date, when set, is exposed as
    ``evaluation_date`` (a pandas Timestamp) unless a parameter of that
    name shadows it.

    Args:
        indicator: Indicator being evaluated.
        context: Evaluation context.

    Returns:
        Dict of variable name to value.
    """
    variables: dict[str, Any] = {}
    if context.evaluation_date is not None:
        variables["evaluation_date"] = pd.Timestamp(context.evaluation_date)
    variables.update(
        (name, value)
        for name, value in context.effective_parameters().items()
        if name.isidentifier()
    )
    for parameter in indicator.parameters:
        variables[parameter.name] = context.resolve(parameter.name, parameter.default)
    return variables


class CohortIndicatorEvaluator:
    """
    Evaluator for ``CohortIndicator`` definitions.

    Selects the cohort from the context's base population with the
    indicator's query and aggregates it.

    Examples:
        >>> import pandas as pd
        >>> population = pd.DataFrame({"gender": ["M", "F", "M"], "age": [30, 40, 10]})
        >>> indicator = CohortIndicator(name="men", cohort_query="gender == 'M'")
        >>> context = EvaluationContext.root(base_population=population)
        >>> CohortIndicatorEvaluator().evaluate(indicator, context).value
        2
    """

    def evaluate(
        self, definition: CohortIndicator, context: EvaluationContext
    ) -> IndicatorResult:
        """
        Compute the cohort indicator.

        Args:
            definition: Cohort indicator to compute.
            context: Context providing the base population and parameters.

        Returns:
            IndicatorResult with an int count or a float fraction.

        Raises:
            CohortEvaluationError: If there is no base population or the
                query cannot be applied.
        """
        population = context.base_population
        if population is None:
            raise CohortEvaluationError(
                "No base population in evaluation context",
                context={"indicator": definition.name},
            )

        cohort = self._select(definition, population, context)
        total = len(population)

        if definition.aggregation == "fraction":
            value = len(cohort) / total if total else 0.0
        else:
            value = int(len(cohort))

        logger.debug(
            "Cohort indicator '%s': %d of %d patients",
            definition.name,
            len(cohort),
            total,
        )
        return IndicatorResult(indicator=definition, context=context, value=value)

    def _select(
        self,
        definition: CohortIndicator,
        population: pd.DataFrame,
        context: EvaluationContext,
    ) -> pd.DataFrame:
        if not definition.cohort_query:
            return population

        variables = query_locals(definition, context)
        try:
            return population.query(definition.cohort_query, local_dict=variables)
        except (SyntaxError, NameError, KeyError, TypeError, ValueError) as exc:
            raise CohortEvaluationError(
                f"Cohort query failed: {exc}",
                context={
                    "indicator": definition.name,
                    "query": definition.cohort_query,
                },
            ) from exc
