# ============================================================================
# DATA CONTAINER FACTORY BASE
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Shared table building logic
# PURPOSE: Table schema inference, row filling and the row-created hook
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DataContainerFactoryBase, RowCreatedHandler
# DEPENDENCIES: pydantic
# ============================================================================
"""
Data Container Factory Base.

Logic shared by every batched dump strategy:
- Derive a table name and columns for a field type
- Append rows for field values, signalling when the batch threshold is hit
- Notify a single row-created hook after each appended row

Column inference reads an explicit schema description, in order:
1. a __dump_columns__() classmethod returning Columns or (name, type) pairs
2. pydantic model_fields (Optional[X] -> nullable X; names listed in
   __sql_identity_columns__ become identity columns)
3. anything else is a scalar and gets one nullable value column

A type may set a __sql_table__ ClassVar to name its table.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel

from dump.config import DumpDefaults, get_defaults
from dump.contracts import NULL_VALUE, Column, Row, SchemaInferenceError, Table
from dump.logging import get_logger, log_context
from dump.schema.ddl_utils import unwrap_optional
from dump.schema.table_definition import TableDefinitionGenerator

logger = get_logger(__name__)

# (row, model that produced the row)
RowCreatedHandler = Callable[[Row, Any], None]


class DataContainerFactoryBase:
    """
    Owns the tracked tables and the row-created hook of one dump run.

    run_id is set while a run is in progress and tags its log records.
    """

    def __init__(
        self,
        table_definition_generator: TableDefinitionGenerator,
        defaults: Optional[DumpDefaults] = None,
    ):
        """
        Args:
            table_definition_generator: Names tables and columns
            defaults: Batch size and column naming defaults (global defaults if omitted)
        """
        if table_definition_generator is None:
            raise TypeError("table_definition_generator must not be None")
        self.table_definition_generator = table_definition_generator
        self.defaults = defaults or get_defaults().dump
        self.tables: Dict[str, Table] = {}
        self.run_id: Optional[str] = None
        self._row_created: Optional[RowCreatedHandler] = None

    # =========================================================================
    # ROW CREATED HOOK
    # =========================================================================

    @property
    def row_created(self) -> Optional[RowCreatedHandler]:
        return self._row_created

    def set_row_created(self, handler: RowCreatedHandler) -> None:
        """Install the hook, replacing any installed one."""
        self._row_created = handler

    def clear_row_created(self) -> None:
        self._row_created = None

    def _on_row_created(self, row: Row, model: Any) -> None:
        if self._row_created is not None:
            self._row_created(row, model)

    # =========================================================================
    # SCHEMA
    # =========================================================================

    def get_table_name(self, field_type: Any, explicit_name: Optional[str] = None) -> str:
        """
        Valid table name for a field type.

        Explicit name first, then the type's __sql_table__, then the type name.
        """
        name = explicit_name or getattr(field_type, "__sql_table__", None) or _type_name(field_type)
        return self.table_definition_generator.get_valid_name(name)

    def get_data_table_schema(self, field_type: Any, explicit_name: Optional[str] = None) -> Table:
        """
        Tracked table for the derived name, created with inferred columns on first use.
        """
        name = self.get_table_name(field_type, explicit_name)
        table = self.tables.get(name)
        if table is None:
            with log_context(run_id=self.run_id, table_name=name, field_type=_type_name(field_type)):
                table = Table(name, self.describe_columns(field_type))
                self.tables[name] = table
                logger.debug(f"Created table {name} with columns {table.column_names}")
        return table

    def describe_columns(self, field_type: Any) -> List[Column]:
        """Columns for a field type, from its explicit schema description."""
        describe = getattr(field_type, "__dump_columns__", None)
        if callable(describe):
            return [self._coerce_column(field_type, entry) for entry in describe()]

        if isinstance(field_type, type) and issubclass(field_type, BaseModel):
            return self._columns_from_model(field_type)

        return [
            Column(
                name=self.table_definition_generator.get_valid_name(self.defaults.value_column_name),
                data_type=field_type,
                nullable=True,
            )
        ]

    def _coerce_column(self, field_type: Any, entry: Any) -> Column:
        get_valid_name = self.table_definition_generator.get_valid_name

        if isinstance(entry, Column):
            return entry.model_copy(update={
                "name": get_valid_name(entry.name),
                "source": entry.source or entry.name,
            })

        if isinstance(entry, tuple) and len(entry) == 2 and isinstance(entry[0], str):
            name, data_type = entry
            return Column(name=get_valid_name(name), data_type=data_type, source=name)

        raise SchemaInferenceError(field_type, entry)

    def _columns_from_model(self, model: type) -> List[Column]:
        identity_columns = set(getattr(model, "__sql_identity_columns__", None) or [])
        columns = []

        for field_name, field_info in model.model_fields.items():
            data_type, optional = unwrap_optional(field_info.annotation)
            columns.append(
                Column(
                    name=self.table_definition_generator.get_valid_name(field_name),
                    data_type=data_type,
                    nullable=optional,
                    auto_increment=field_name in identity_columns,
                    source=field_name,
                )
            )

        return columns

    def try_add_column(self, table: Table, name: str, data_type: Any) -> Optional[Column]:
        """Add a nullable column; None if the sanitized name is taken."""
        column_name = self.table_definition_generator.get_valid_name(name)
        if table.has_column(column_name):
            return None
        return table.add_column(Column(name=column_name, data_type=data_type, nullable=True))

    def ensure_foreign_key_column(self, table: Table, name: str, data_type: Any) -> Column:
        """Existing column of the sanitized name, else a new nullable foreign key column."""
        column_name = self.table_definition_generator.get_valid_name(name)
        existing = table.get_column(column_name)
        if existing is not None:
            return existing

        with log_context(run_id=self.run_id, table_name=table.name):
            logger.debug(f"Adding foreign key column {column_name} to {table.name}")
        return table.add_column(
            Column(name=column_name, data_type=data_type, nullable=True, foreign_key=True)
        )

    # =========================================================================
    # ROWS
    # =========================================================================

    @property
    def total_rows(self) -> int:
        """Rows across all tracked tables."""
        return sum(table.row_count for table in self.tables.values())

    @staticmethod
    def _read_value(column: Column, value: Any) -> Any:
        if value is None or column.foreign_key:
            return NULL_VALUE
        if column.source is None:
            return value
        if isinstance(value, Mapping):
            return value.get(column.source, NULL_VALUE)
        return getattr(value, column.source, NULL_VALUE)

    def fill_data_table(
        self,
        field_type: Any,
        table: Table,
        values: Iterable[Any],
        batch_threshold: int,
    ) -> Iterator[Row]:
        """
        Append one row per value, lazily.

        Yields the appended row whenever the tracked tables hold at least
        batch_threshold rows in total; the caller flushes on each yield.
        """
        count = 0
        for value in values:
            row = table.add_row(
                table.new_row([self._read_value(column, value) for column in table.columns])
            )
            count += 1
            self._on_row_created(row, value)

            if self.total_rows >= batch_threshold:
                yield row

        if count:
            name = _type_name(field_type)
            with log_context(run_id=self.run_id, table_name=table.name, field_type=name):
                logger.debug(f"Appended {count} {name} rows to {table.name}")


def _type_name(field_type: Any) -> str:
    return getattr(field_type, "__name__", None) or str(field_type)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["DataContainerFactoryBase", "RowCreatedHandler"]
