# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - DDL generation
# PURPOSE: Dialect-agnostic table definitions plus the PostgreSQL dialect
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from dump.schema.ddl_utils import (
    NATIVE_TYPE_NAMES,
    get_native_type,
    quote_identifier,
    resolve_type_name,
    sanitize_identifier,
    unwrap_optional,
)
from dump.schema.table_definition import TableDefinitionGenerator
from dump.schema.postgres import PostgresTableDefinitionGenerator

__all__ = [
    # Generators
    "TableDefinitionGenerator",
    "PostgresTableDefinitionGenerator",
    # Utilities
    "NATIVE_TYPE_NAMES",
    "get_native_type",
    "resolve_type_name",
    "sanitize_identifier",
    "quote_identifier",
    "unwrap_optional",
]
