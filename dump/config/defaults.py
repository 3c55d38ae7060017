# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for batching and identifier generation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for batching and DDL generation.
These can be overridden via environment variables or constructor arguments.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class DumpDefaults:
    """
    Defaults for the batching engine.
    """
    # Total rows across all tables before a batch is emitted
    batch_size: int = 100000

    # Name of the injected parent key column when a selector does not name one
    foreign_key_name: str = "Auto_ParentId"

    # Single column of tables built from scalar field types
    value_column_name: str = "Value"

    @classmethod
    def from_env(cls) -> "DumpDefaults":
        """Create from environment variables."""
        return cls(
            batch_size=int(os.getenv("DUMP_BATCH_SIZE", 100000)),
            foreign_key_name=os.getenv("DUMP_FOREIGN_KEY_NAME", "Auto_ParentId"),
            value_column_name=os.getenv("DUMP_VALUE_COLUMN_NAME", "Value"),
        )


@dataclass(frozen=True)
class PostgresDefaults:
    """
    Defaults for PostgreSQL DDL generation.
    """
    # Conservatively under the server's NAMEDATALEN limit
    max_identifier_length: int = 85

    # psycopg type name used when a Python type has no native mapping
    fallback_type: str = "text"

    @classmethod
    def from_env(cls) -> "PostgresDefaults":
        """Create from environment variables."""
        return cls(
            max_identifier_length=int(os.getenv("PG_MAX_IDENTIFIER_LENGTH", 85)),
            fallback_type=os.getenv("PG_FALLBACK_TYPE", "text"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    dump: DumpDefaults = field(default_factory=DumpDefaults)
    postgres: PostgresDefaults = field(default_factory=PostgresDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            dump=DumpDefaults.from_env(),
            postgres=PostgresDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DumpDefaults",
    "PostgresDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
