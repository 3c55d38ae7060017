# ============================================================================
# FIELD SELECTORS
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Declarative source-object mappings
# PURPOSE: Describe which value of a source object feeds which table
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: FieldSelector, FieldSelectorWithForeignKey, ForeignKeyContainer,
#          FieldSelectorCollection, is_enumerable
# DEPENDENCIES: pydantic
# ============================================================================
"""
Field Selectors.

A selector pulls one field out of every source object. The field's type
names the target table and supplies its columns; an iterable field value
becomes one row per element, anything else becomes one row.

Selectors with a foreign key additionally inject a column into their table
holding the parent's key, so child rows can be joined back to the object
they came from.

Usage:
    selectors = FieldSelectorCollection[Order]()
    selectors.add(FieldSelector(Order, lambda order: order))
    selectors.add(FieldSelectorWithForeignKey(
        OrderLine,
        lambda order: order.lines,
        get_foreign_key=lambda order: order.order_id,
        foreign_key_name="OrderId",
    ))
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Generic, Iterator, List, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

ModelT = TypeVar("ModelT")

# Iterable values that still count as a single field value
_SINGLE_VALUE_TYPES = (str, bytes, bytearray, memoryview, Mapping, BaseModel)


def is_enumerable(value: Any) -> bool:
    """Whether a field value should produce one row per element."""
    if value is None or isinstance(value, _SINGLE_VALUE_TYPES):
        return False
    return isinstance(value, Iterable)


@runtime_checkable
class ForeignKeyContainer(Protocol):
    """
    A child value that knows its parent.

    The object returned by get_foreign_key_model() replaces the root source
    object when the parent key is resolved.
    """

    def get_foreign_key_model(self) -> Any:
        ...


class FieldSelector(Generic[ModelT]):
    """
    Extracts one field from a source object.
    """

    def __init__(
        self,
        field_type: Any,
        get_field: Callable[[ModelT], Any],
        table_name: Optional[str] = None,
    ):
        """
        Args:
            field_type: Semantic type of the field (names the table, types the columns)
            get_field: Returns the value to store for a source object
            table_name: Overrides the table name derived from field_type
        """
        if field_type is None:
            raise TypeError("field_type must not be None")
        self.field_type = field_type
        self._get_field = get_field
        self._table_name = table_name

    def get_field(self, model: ModelT) -> Any:
        return self._get_field(model)

    def table_name(self) -> Optional[str]:
        return self._table_name

    def __repr__(self) -> str:
        name = getattr(self.field_type, "__name__", str(self.field_type))
        return f"{type(self).__name__}({name}, table_name={self._table_name!r})"


class FieldSelectorWithForeignKey(FieldSelector[ModelT]):
    """
    A selector whose rows carry the key of the object they were selected from.
    """

    def __init__(
        self,
        field_type: Any,
        get_field: Callable[[ModelT], Any],
        get_foreign_key: Callable[[Any], Any],
        foreign_key_type: Any = int,
        foreign_key_name: Optional[str] = None,
        table_name: Optional[str] = None,
    ):
        """
        Args:
            get_foreign_key: Returns the parent key from the parent (or its substitute)
            foreign_key_type: Semantic type of the injected column
            foreign_key_name: Injected column name (engine default if None)
        """
        super().__init__(field_type, get_field, table_name=table_name)
        self.foreign_key_type = foreign_key_type
        self._get_foreign_key = get_foreign_key
        self._foreign_key_name = foreign_key_name

    def foreign_key_name(self) -> Optional[str]:
        return self._foreign_key_name

    def get_foreign_key(self, parent: Any) -> Any:
        return self._get_foreign_key(parent)


class FieldSelectorCollection(Generic[ModelT]):
    """
    Ordered selectors applied, in order, to every source object.
    """

    def __init__(self, selectors: Optional[Iterable] = None):
        self._selectors: List[FieldSelector[ModelT]] = []
        for selector in selectors or []:
            self.add(selector)

    def add(self, selector: FieldSelector[ModelT]) -> "FieldSelectorCollection[ModelT]":
        """Append a selector. Returns self for chaining."""
        if not isinstance(selector, FieldSelector):
            raise TypeError(f"Expected a FieldSelector, got {type(selector).__name__}")
        self._selectors.append(selector)
        return self

    def for_type(self, field_type: Any) -> List[FieldSelector[ModelT]]:
        """All selectors targeting a field type, in order."""
        return [selector for selector in self._selectors if selector.field_type is field_type]

    @property
    def field_types(self) -> List[Any]:
        """Distinct field types in first-seen order."""
        seen: List[Any] = []
        for selector in self._selectors:
            if not any(selector.field_type is known for known in seen):
                seen.append(selector.field_type)
        return seen

    def __iter__(self) -> Iterator[FieldSelector[ModelT]]:
        return iter(self._selectors)

    def __len__(self) -> int:
        return len(self._selectors)

    def __getitem__(self, index: int) -> FieldSelector[ModelT]:
        return self._selectors[index]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ForeignKeyContainer",
    "FieldSelector",
    "FieldSelectorWithForeignKey",
    "FieldSelectorCollection",
    "is_enumerable",
]
