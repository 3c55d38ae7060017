# ============================================================================
# FACTORY MODULE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Batching engine
# PURPOSE: Export the container factory base and the data set factory
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from dump.factory.container_base import DataContainerFactoryBase, RowCreatedHandler
from dump.factory.data_set import DataSetFactory

__all__ = [
    "DataContainerFactoryBase",
    "DataSetFactory",
    "RowCreatedHandler",
]
