# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the dump engine.
"""

from dump.config.defaults import (
    DumpDefaults,
    PostgresDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DumpDefaults",
    "PostgresDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
