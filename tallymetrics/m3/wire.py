"""Thrift type identifiers, wire errors and a value skipper for the M3 structs."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

MAX_SKIP_DEPTH = 64


class TType(IntEnum):
    """Type identifiers used by the Thrift wire format."""

    STOP = 0
    VOID = 1
    BOOL = 2
    BYTE = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15


class ProtocolError(Exception):
    """Raised when data on the wire cannot be encoded or decoded."""

    UNKNOWN = 0
    INVALID_DATA = 1
    NEGATIVE_SIZE = 2
    SIZE_LIMIT = 3
    BAD_VERSION = 4
    NOT_IMPLEMENTED = 5
    DEPTH_LIMIT = 6

    def __init__(self, message: str, type_id: int = INVALID_DATA) -> None:
        super().__init__(message)
        self.message = message
        self.type_id = type_id


class UnionError(ValueError):
    """Raised when a union is written without exactly one field set."""

    def __init__(self, type_name: str, count: int) -> None:
        super().__init__(
            f"{type_name} write union: exactly one field must be set ({count} set)."
        )
        self.type_name = type_name
        self.count = count


_SIMPLE_READERS = {
    TType.BOOL: lambda p: p.read_bool(),
    TType.BYTE: lambda p: p.read_byte(),
    TType.I16: lambda p: p.read_i16(),
    TType.I32: lambda p: p.read_i32(),
    TType.I64: lambda p: p.read_i64(),
    TType.DOUBLE: lambda p: p.read_double(),
    TType.STRING: lambda p: p.read_string(),
}


def _as_ttype(value: Any) -> TType:
    try:
        return TType(value)
    except ValueError:
        raise ProtocolError(
            f"unknown data type {value}", ProtocolError.INVALID_DATA
        ) from None


def _check_size(size: int) -> None:
    if size < 0:
        raise ProtocolError(
            f"negative container size {size}", ProtocolError.NEGATIVE_SIZE
        )


def _skip_fields(iprot: Any, depth: int) -> None:
    iprot.read_struct_begin()
    while True:
        _, field_type, _ = iprot.read_field_begin()
        if field_type == TType.STOP:
            break
        _skip(iprot, field_type, depth - 1)
        iprot.read_field_end()
    iprot.read_struct_end()


def _skip(iprot: Any, ttype: Any, depth: int) -> None:
    if depth <= 0:
        raise ProtocolError("depth limit exceeded", ProtocolError.DEPTH_LIMIT)
    kind = _as_ttype(ttype)
    reader = _SIMPLE_READERS.get(kind)
    if reader is not None:
        reader(iprot)
    elif kind is TType.STRUCT:
        _skip_fields(iprot, depth)
    elif kind is TType.MAP:
        key_type, value_type, size = iprot.read_map_begin()
        _check_size(size)
        for _ in range(size):
            _skip(iprot, key_type, depth - 1)
            _skip(iprot, value_type, depth - 1)
        iprot.read_map_end()
    elif kind is TType.SET:
        elem_type, size = iprot.read_set_begin()
        _check_size(size)
        for _ in range(size):
            _skip(iprot, elem_type, depth - 1)
        iprot.read_set_end()
    elif kind is TType.LIST:
        elem_type, size = iprot.read_list_begin()
        _check_size(size)
        for _ in range(size):
            _skip(iprot, elem_type, depth - 1)
        iprot.read_list_end()
    else:
        raise ProtocolError(
            f"cannot skip data type {kind.name}", ProtocolError.INVALID_DATA
        )


def skip_struct(iprot: Any) -> None:
    """Read and discard one whole struct, including nested values, from iprot."""
    _skip(iprot, TType.STRUCT, MAX_SKIP_DEPTH)