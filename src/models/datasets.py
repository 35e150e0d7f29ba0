"""Dataset definitions."""

from dataclasses import dataclass
from typing import Any, ClassVar

from src.models.definitions import Definition, DefinitionType


DATASET_DEFINITION = DefinitionType("dataset_definition")
DATASET_WRAPPING = DefinitionType("dataset_wrapping", (DATASET_DEFINITION,))


@dataclass(eq=False)
class DataSetDefinition(Definition):
    """Abstract definition of a dataset."""

    definition_type: ClassVar[DefinitionType] = DATASET_DEFINITION


@dataclass(eq=False)
class DataSetWrappingDataSetDefinition(DataSetDefinition):
    """
    Dataset definition that carries an already computed dataset.

    Attributes:
        data: The precomputed dataset (typically a pandas DataFrame),
            returned as-is on evaluation.
    """

    definition_type: ClassVar[DefinitionType] = DATASET_WRAPPING

    data: Any = None
