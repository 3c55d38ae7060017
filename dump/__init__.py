# ============================================================================
# DUMP PACKAGE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Package initialization
# PURPOSE: Export contracts, selectors, factories and table definition generators
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from dump.__version__ import __version__
from dump.contracts import (
    NULL_VALUE,
    Batch,
    Column,
    DumpError,
    DuplicateColumnError,
    Row,
    SchemaInferenceError,
    Table,
)
from dump.mapping import (
    FieldSelector,
    FieldSelectorCollection,
    FieldSelectorWithForeignKey,
    ForeignKeyContainer,
)
from dump.factory import DataContainerFactoryBase, DataSetFactory
from dump.schema import PostgresTableDefinitionGenerator, TableDefinitionGenerator

__all__ = [
    "__version__",
    # Contracts
    "NULL_VALUE",
    "Batch",
    "Column",
    "Row",
    "Table",
    # Errors
    "DumpError",
    "DuplicateColumnError",
    "SchemaInferenceError",
    # Selectors
    "FieldSelector",
    "FieldSelectorCollection",
    "FieldSelectorWithForeignKey",
    "ForeignKeyContainer",
    # Factories
    "DataContainerFactoryBase",
    "DataSetFactory",
    # Generators
    "TableDefinitionGenerator",
    "PostgresTableDefinitionGenerator",
]
