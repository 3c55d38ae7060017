# ============================================================================
# DATA SET FACTORY
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Batched table production from object streams
# PURPOSE: Turn a lazy stream of objects into bounded batches of tables
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DataSetFactory
# DEPENDENCIES: dump.factory.container_base, dump.logging
# ============================================================================
"""
Data Set Factory.

Pipeline:
    source objects -> selectors -> per-type tables -> threshold -> Batch

The threshold is the sum of rows across ALL tracked tables, so one
batch_size bounds memory however many tables the selectors populate.

Each yielded Batch is only valid until the next one is requested: when the
consumer advances or stops early, every table is cleared (schemas are kept)
and the batch is emptied. Each create() run starts with no tables.

Usage:
    factory = DataSetFactory(PostgresTableDefinitionGenerator())
    for batch in factory.create(orders, selectors, batch_size=50000):
        for statement in generator.get_table_definitions(batch):
            ...
        for table in batch.tables:
            loader.copy(table.name, table.to_records())
"""

import uuid
from typing import Any, Iterable, Iterator, List, Optional

from dump.contracts import NULL_VALUE, Batch, Row, Table
from dump.factory.container_base import DataContainerFactoryBase
from dump.logging import get_logger, log_context
from dump.mapping.selectors import (
    FieldSelector,
    FieldSelectorCollection,
    FieldSelectorWithForeignKey,
    ForeignKeyContainer,
    is_enumerable,
)

logger = get_logger(__name__)


class DataSetFactory(DataContainerFactoryBase):
    """
    Produces batches of tables from source objects and field selectors.

    At most one foreign key hook is installed at a time. It is scoped to
    one selector applied to one source object.
    """

    def create(
        self,
        data: Iterable[Any],
        field_selectors: FieldSelectorCollection,
        batch_size: Optional[int] = None,
    ) -> Iterator[Batch]:
        """
        Lazily batch the tables built from data.

        Args:
            data: Source objects (may be unbounded)
            field_selectors: Selectors applied to every source object
            batch_size: Total rows across tables per batch (defaults to DUMP_BATCH_SIZE)

        Returns:
            Iterator of batches; the last one holds the remainder and may be empty

        Raises:
            TypeError: data or field_selectors is None
            ValueError: batch_size < 1
        """
        if data is None:
            raise TypeError("data must not be None")
        if field_selectors is None:
            raise TypeError("field_selectors must not be None")
        if batch_size is None:
            batch_size = self.defaults.batch_size
        if batch_size < 1:
            raise ValueError("Must batch at least 1 row")

        return self._create_batches(data, field_selectors, batch_size)

    def _create_batches(
        self,
        data: Iterable[Any],
        field_selectors: FieldSelectorCollection,
        batch_size: int,
    ) -> Iterator[Batch]:
        run_id = str(uuid.uuid4())[:8]
        index = 0
        snapshots = self.fill_data_tables(data, field_selectors, batch_size, run_id=run_id)
        try:
            for tables in snapshots:
                batch = Batch(index, {table.name: table for table in tables})
                with log_context(run_id=run_id, batch_index=index):
                    logger.info(
                        f"Emitting {batch.name}",
                        extra={"tables": len(batch), "rows": batch.total_rows},
                    )

                try:
                    yield batch
                finally:
                    batch.release()
                index += 1
        finally:
            snapshots.close()
            # rows never handed out when the consumer stops early
            for table in self.tables.values():
                table.clear()

    def fill_data_tables(
        self,
        data: Iterable[Any],
        field_selectors: FieldSelectorCollection,
        batch_size: int,
        run_id: Optional[str] = None,
    ) -> Iterator[List[Table]]:
        """
        Yield the tracked tables each time they reach batch_size rows, then once at the end.

        Every run starts with no tracked tables. Tables are not cleared here;
        the caller clears them before resuming.
        """
        self.tables = {}
        self.run_id = run_id or str(uuid.uuid4())[:8]
        try:
            for model in data:
                for selector in field_selectors:
                    with log_context(run_id=self.run_id, selector=repr(selector)):
                        table = self.get_data_table_schema(selector.field_type, selector.table_name())
                        value = selector.get_field(model)

                        self._handle_foreign_key_field(selector, model, table)

                    values = value if is_enumerable(value) else [value]
                    for _ in self.fill_data_table(selector.field_type, table, values, batch_size):
                        if self.total_rows >= batch_size:
                            yield list(self.tables.values())

            self.clear_row_created()
            yield list(self.tables.values())
        finally:
            self.clear_row_created()
            self.run_id = None

    def _handle_foreign_key_field(
        self,
        selector: FieldSelector,
        root: Any,
        table: Table,
    ) -> None:
        """
        Replace the installed hook with one for this selector, or none.

        The hook writes the parent key into the foreign key column of rows
        created in this selector's table. The parent is the value's
        foreign key container substitute when it supplies one, else root.
        """
        self.clear_row_created()

        if not isinstance(selector, FieldSelectorWithForeignKey):
            return

        name = selector.foreign_key_name() or self.defaults.foreign_key_name
        column = self.ensure_foreign_key_column(table, name, selector.foreign_key_type)

        def on_row_created(row: Row, model: Any) -> None:
            if row.table is not table:
                return

            parent = None
            if isinstance(model, ForeignKeyContainer):
                parent = model.get_foreign_key_model()
            if parent is None:
                parent = root

            key = selector.get_foreign_key(parent)
            row[column.name] = NULL_VALUE if key is None else key

        self.set_row_created(on_row_created)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["DataSetFactory"]
