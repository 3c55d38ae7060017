# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Core - Shared helpers for DDL generation
# PURPOSE: Identifier sanitization and two-stage type resolution
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: sanitize_identifier, quote_identifier, unwrap_optional,
#          get_native_type, resolve_type_name, NATIVE_TYPE_NAMES
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

Type resolution is split in two pure stages so dialects can share the first:

    python type --get_native_type()--> psycopg TypeInfo --resolve_type_name()--> "bigint"

The first stage goes through the driver's own type registry
(psycopg.postgres.types), the second turns the driver type into the name
a CREATE TABLE statement expects.

Usage:
    from dump.schema.ddl_utils import get_native_type, resolve_type_name

    resolve_type_name(get_native_type(int))       # 'bigint'
    resolve_type_name(get_native_type(datetime))  # 'timestamp with time zone'
"""

import re
import types
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Tuple, Union, get_args, get_origin
from uuid import UUID

from psycopg import postgres
from psycopg.types import TypeInfo


# ============================================================================
# IDENTIFIERS
# ============================================================================

# Anything but letters, digits and underscore is dropped, including quotes
_ILLEGAL_CHARACTERS = re.compile(r"[^\w]")


def sanitize_identifier(name: str, max_length: int) -> str:
    """
    Strip characters illegal in an identifier and truncate.

    Quotes are illegal characters, so an already quoted name sanitizes
    to its bare form.
    """
    return _ILLEGAL_CHARACTERS.sub("", name)[:max_length]


def quote_identifier(name: str) -> str:
    """Wrap a sanitized identifier in double quotes."""
    return f'"{name}"'


# ============================================================================
# TYPE MAPPING
# ============================================================================

# Python type -> psycopg builtin type name
NATIVE_TYPE_NAMES = {
    bool: "bool",
    int: "int8",
    float: "float8",
    Decimal: "numeric",
    str: "text",
    bytes: "bytea",
    bytearray: "bytea",
    memoryview: "bytea",
    datetime: "timestamptz",
    date: "date",
    time: "time",
    timedelta: "interval",
    UUID: "uuid",
    dict: "jsonb",
    list: "jsonb",
    tuple: "jsonb",
}


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Strip Optional[...] from an annotation.

    Returns:
        (inner type, whether None was allowed)
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        optional = len(args) < len(get_args(annotation))
        if len(args) == 1:
            return args[0], optional
        return annotation, optional
    return annotation, False


def get_native_type(python_type: Any, fallback: str = "text") -> TypeInfo:
    """
    Stage one: map a Python type to the driver's native type.

    Walks the MRO so subclasses resolve like their bases. Enums are stored
    as text. A string naming a psycopg type passes straight through.

    Args:
        python_type: Python type, typing annotation, or psycopg type name
        fallback: psycopg type name for unmapped types

    Returns:
        psycopg TypeInfo
    """
    if isinstance(python_type, str):
        info = postgres.types.get(python_type)
        if info is not None:
            return info
        return postgres.types[fallback]

    python_type, _ = unwrap_optional(python_type)
    origin = get_origin(python_type)
    if origin is not None:
        python_type = origin

    if isinstance(python_type, type):
        if issubclass(python_type, Enum):
            return postgres.types["text"]
        for klass in python_type.__mro__:
            name = NATIVE_TYPE_NAMES.get(klass)
            if name:
                return postgres.types[name]

    return postgres.types[fallback]


def resolve_type_name(type_info: TypeInfo) -> str:
    """
    Stage two: the SQL name of a driver type (e.g. int8 -> bigint).
    """
    return getattr(type_info, "regtype", "") or type_info.name


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "NATIVE_TYPE_NAMES",
    "sanitize_identifier",
    "quote_identifier",
    "unwrap_optional",
    "get_native_type",
    "resolve_type_name",
]
