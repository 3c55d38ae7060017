# ============================================================================
# POSTGRESQL TABLE DEFINITION GENERATOR
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - PostgreSQL dialect
# PURPOSE: PostgreSQL identifiers, type names and identity columns
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: PostgresTableDefinitionGenerator
# DEPENDENCIES: psycopg
# ============================================================================
"""
PostgreSQL Table Definition Generator.

Renders tables built by the batching engine into PostgreSQL DDL:

    create table "Orders" ("Id" bigint generated always as identity,
                           "Customer" text null, "Auto_ParentId" bigint null)

Identity columns use the SQL-standard "generated always as identity"
syntax rather than the legacy SERIAL pseudo-types.
"""

import logging
from typing import Optional

from dump.config import PostgresDefaults, get_defaults
from dump.contracts import Column
from dump.schema.ddl_utils import (
    get_native_type,
    quote_identifier,
    resolve_type_name,
    sanitize_identifier,
)
from dump.schema.table_definition import TableDefinitionGenerator

logger = logging.getLogger(__name__)


class PostgresTableDefinitionGenerator(TableDefinitionGenerator):
    """
    TableDefinitionGenerator for PostgreSQL.
    """

    def __init__(self, defaults: Optional[PostgresDefaults] = None):
        """
        Initialize the generator.

        Args:
            defaults: Identifier length and fallback type (global defaults if omitted)
        """
        self.defaults = defaults or get_defaults().postgres

    @property
    def max_identifier_length(self) -> int:
        return self.defaults.max_identifier_length

    def get_valid_name(self, object_name: str) -> str:
        if object_name is None or not str(object_name).strip():
            raise ValueError("Object name must not be blank")

        sanitized = sanitize_identifier(str(object_name), self.max_identifier_length)
        if not sanitized:
            raise ValueError(f"Object name {object_name!r} has no valid identifier characters")

        return quote_identifier(sanitized)

    def get_db_type(self, column: Column) -> str:
        if column is None:
            raise TypeError("column must not be None")

        native = get_native_type(column.data_type, fallback=self.defaults.fallback_type)
        return resolve_type_name(native)

    def get_column_definition(self, column: Column) -> str:
        if column is None:
            raise TypeError("column must not be None")

        parts = [self.get_valid_name(column.name), self.get_db_type(column)]
        if column.auto_increment:
            parts.append(self._identity_clause(column))
        else:
            parts.append("null" if column.nullable else "not null")

        definition = " ".join(parts)
        logger.debug(f"Column definition: {definition}")
        return definition

    @staticmethod
    def _identity_clause(column: Column) -> str:
        """generated always as identity, with sequence options when given."""
        options = []
        if column.auto_increment_seed is not None:
            options.append(f"start with {column.auto_increment_seed}")
        if column.auto_increment_step is not None:
            options.append(f"increment by {column.auto_increment_step}")

        clause = "generated always as identity"
        if options:
            clause = f"{clause} ({' '.join(options)})"
        return clause


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["PostgresTableDefinitionGenerator"]
