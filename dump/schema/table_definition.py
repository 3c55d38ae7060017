# ============================================================================
# TABLE DEFINITION GENERATOR
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Dialect-agnostic DDL contract
# PURPOSE: Render generic tables/columns into vendor CREATE TABLE statements
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TableDefinitionGenerator
# DEPENDENCIES: psycopg
# ============================================================================
"""
Table Definition Generator.

One subclass per target database dialect. Subclasses decide how names are
sanitized and quoted, how semantic types map to physical types and how a
single column renders; composing columns into a table is shared here.

The batching engine only ever calls get_valid_name(). The DDL methods are
for the loader that creates tables before copying batches in.
"""

from abc import ABC, abstractmethod
from typing import List

from psycopg import sql

from dump.contracts import Batch, Column, Table


class TableDefinitionGenerator(ABC):
    """
    Derives identifiers and DDL for one SQL dialect.
    """

    @abstractmethod
    def get_valid_name(self, object_name: str) -> str:
        """
        Sanitize, truncate and quote an identifier.

        Must be idempotent: get_valid_name(get_valid_name(x)) == get_valid_name(x).

        Raises:
            ValueError: if the name is None, blank or has no legal characters
        """

    @abstractmethod
    def get_db_type(self, column: Column) -> str:
        """Physical type name for the column's semantic type."""

    @abstractmethod
    def get_column_definition(self, column: Column) -> str:
        """DDL fragment for a single column."""

    def get_column_definitions(self, table: Table) -> str:
        """All column fragments of a table, in column order."""
        if table is None:
            raise TypeError("table must not be None")
        return ", ".join(self.get_column_definition(column) for column in table.columns)

    def get_table_definition(self, table: Table) -> str:
        """CREATE TABLE statement for a table."""
        if table is None:
            raise TypeError("table must not be None")
        return (
            f"create table {self.get_valid_name(table.name)} "
            f"({self.get_column_definitions(table)})"
        )

    def get_table_definitions(self, batch: Batch) -> List[str]:
        """One CREATE TABLE statement per table of a batch."""
        return [self.get_table_definition(table) for table in batch.tables]

    @staticmethod
    def as_sql(statement: str) -> sql.SQL:
        """
        Wrap generated DDL for cursor.execute().

        Identifiers in the statement are already sanitized, so no further
        composition is needed.
        """
        return sql.SQL(statement)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["TableDefinitionGenerator"]
