# ============================================================================
# BASE CONTRACTS - TABLES, ROWS, BATCHES
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Foundation - In-memory relational containers
# PURPOSE: Define the column/table/row/batch contracts shared by every layer
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Column, Row, Table, Batch, NULL_VALUE, DumpError
# DEPENDENCIES: pydantic
# ============================================================================
"""
Base contracts for the batched dump engine.

These are the containers that cross every boundary:
- Schema inference (factory layer creates tables and columns)
- DDL rendering (table definition generators read columns)
- Bulk loading (downstream loaders read batches and rows)

Column names and table names stored here are already valid identifiers
for the active table definition generator (sanitized and quoted).
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel, Field, model_validator


# Null marker written into rows for absent values
NULL_VALUE = None


# ============================================================================
# EXCEPTIONS
# ============================================================================

class DumpError(Exception):
    """Base exception for dump errors."""
    pass


class DuplicateColumnError(DumpError):
    """Raised when a column name already exists in a table."""
    def __init__(self, table_name: str, column_name: str):
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(f"Column {column_name} already exists in table {table_name}")


class SchemaInferenceError(DumpError):
    """Raised when a type describes its columns in an unusable way."""
    def __init__(self, field_type: Any, entry: Any):
        self.field_type = field_type
        self.entry = entry
        super().__init__(
            f"Cannot build a column for {getattr(field_type, '__name__', field_type)} "
            f"from {entry!r}"
        )


# ============================================================================
# COLUMN
# ============================================================================

class Column(BaseModel):
    """
    One column of a table.

    Identity columns are never nullable: the database generates their values.
    """

    name: str = Field(..., min_length=1, description="Valid (quoted) identifier")
    data_type: Any = Field(default=str, description="Semantic Python type")
    nullable: bool = Field(default=True)
    auto_increment: bool = Field(default=False, description="Identity column")
    auto_increment_seed: Optional[int] = Field(default=None)
    auto_increment_step: Optional[int] = Field(default=None)
    source: Optional[str] = Field(
        default=None,
        description="Attribute or key read from the source value (None reads the value itself)"
    )
    foreign_key: bool = Field(default=False, description="Injected parent key column")

    model_config = {"frozen": False, "arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def _identity_is_not_null(self) -> "Column":
        if self.auto_increment:
            self.nullable = False
        return self


# ============================================================================
# ROW
# ============================================================================

class Row:
    """
    Field values of one source value, positionally aligned to its table's columns.
    """

    __slots__ = ("table", "values")

    def __init__(self, table: "Table", values: List[Any]):
        self.table = table
        self.values = values

    def _position(self, key: Union[int, str]) -> int:
        if isinstance(key, int):
            return key
        return self.table.column_index(key)

    def __getitem__(self, key: Union[int, str]) -> Any:
        return self.values[self._position(key)]

    def __setitem__(self, key: Union[int, str], value: Any) -> None:
        self.values[self._position(key)] = value

    def __len__(self) -> int:
        return len(self.values)

    def as_dict(self) -> Dict[str, Any]:
        """Map column names to values."""
        return dict(zip(self.table.column_names, self.values))

    def __repr__(self) -> str:
        return f"Row({self.table.name}, {self.values!r})"


# ============================================================================
# TABLE
# ============================================================================

class Table:
    """
    A named table: ordered columns plus the rows accumulated since the last batch.

    Columns survive clear(); rows do not.
    """

    def __init__(self, name: str, columns: Optional[List[Column]] = None):
        self.name = name
        self.columns: List[Column] = []
        self.rows: List[Row] = []
        self._positions: Dict[str, int] = {}
        for column in columns or []:
            self.add_column(column)

    # =========================================================================
    # COLUMNS
    # =========================================================================

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def has_column(self, name: str) -> bool:
        return name in self._positions

    def get_column(self, name: str) -> Optional[Column]:
        position = self._positions.get(name)
        return None if position is None else self.columns[position]

    def column_index(self, name: str) -> int:
        try:
            return self._positions[name]
        except KeyError:
            raise KeyError(f"Table {self.name} has no column {name}") from None

    def add_column(self, column: Column) -> Column:
        """
        Append a column. Rows already in the table get the null marker for it.
        """
        if column.name in self._positions:
            raise DuplicateColumnError(self.name, column.name)

        self._positions[column.name] = len(self.columns)
        self.columns.append(column)
        for row in self.rows:
            row.values.append(NULL_VALUE)
        return column

    # =========================================================================
    # ROWS
    # =========================================================================

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def new_row(self, values: Optional[List[Any]] = None) -> Row:
        """Create a row bound to this table (not yet added)."""
        values = list(values or [])
        if len(values) > len(self.columns):
            raise ValueError(
                f"Table {self.name} has {len(self.columns)} columns, got {len(values)} values"
            )
        values.extend([NULL_VALUE] * (len(self.columns) - len(values)))
        return Row(self, values)

    def add_row(self, row: Row) -> Row:
        if row.table is not self:
            raise ValueError(f"Row belongs to table {row.table.name}, not {self.name}")
        self.rows.append(row)
        return row

    def clear(self) -> None:
        """Drop all rows, keep the schema."""
        self.rows.clear()

    def to_records(self) -> List[Dict[str, Any]]:
        """Rows as column-name dicts, the shape bulk loaders consume."""
        return [row.as_dict() for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return f"Table({self.name}, columns={len(self.columns)}, rows={len(self.rows)})"


# ============================================================================
# BATCH
# ============================================================================

class Batch(Mapping):
    """
    The tables accumulated since the previous batch, keyed by table name.

    A batch is a view: once the producer resumes, release() clears the rows
    of every table and detaches them, leaving the batch empty.
    """

    def __init__(self, index: int, tables: Optional[Dict[str, Table]] = None):
        self.index = index
        self.name = f"batch_{index:05d}"
        self._tables: Dict[str, Table] = dict(tables or {})

    def __getitem__(self, name: str) -> Table:
        return self._tables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    @property
    def tables(self) -> List[Table]:
        return list(self._tables.values())

    @property
    def total_rows(self) -> int:
        return sum(table.row_count for table in self._tables.values())

    def release(self) -> None:
        """Clear the rows of every table and detach them from this batch."""
        for table in self._tables.values():
            table.clear()
        self._tables.clear()

    def __repr__(self) -> str:
        return f"Batch({self.name}, tables={len(self._tables)}, rows={self.total_rows})"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "NULL_VALUE",
    "DumpError",
    "DuplicateColumnError",
    "SchemaInferenceError",
    "Column",
    "Row",
    "Table",
    "Batch",
]
