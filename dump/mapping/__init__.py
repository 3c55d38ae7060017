# ============================================================================
# MAPPING MODULE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Field selector declarations
# PURPOSE: Export selectors and the selector collection
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from dump.mapping.selectors import (
    FieldSelector,
    FieldSelectorWithForeignKey,
    FieldSelectorCollection,
    ForeignKeyContainer,
    is_enumerable,
)

__all__ = [
    "FieldSelector",
    "FieldSelectorWithForeignKey",
    "FieldSelectorCollection",
    "ForeignKeyContainer",
    "is_enumerable",
]
