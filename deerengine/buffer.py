"""Vertex attribute data types, their sizes, and buffer layouts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterable, Iterator


class ShaderDataType(IntEnum):
    """How a vertex attribute is presented to a shader."""

    NONE = 0
    FLOATING_POINT = 1
    NORMALIZED_FLOATING_POINT = 2
    INTEGER = 3


class DataType(IntEnum):
    """Element type of a vertex attribute, with its component count."""

    NONE = 0
    HALF = 1
    HALF2 = 2
    HALF3 = 3
    HALF4 = 4
    FLOAT = 5
    FLOAT2 = 6
    FLOAT3 = 7
    FLOAT4 = 8
    BYTE = 9
    BYTE2 = 10
    BYTE3 = 11
    BYTE4 = 12
    SHORT = 13
    SHORT2 = 14
    SHORT3 = 15
    SHORT4 = 16
    INT = 17
    INT2 = 18
    INT3 = 19
    INT4 = 20
    UNSIGNED_BYTE = 21
    UNSIGNED_BYTE2 = 22
    UNSIGNED_BYTE3 = 23
    UNSIGNED_BYTE4 = 24
    UNSIGNED_SHORT = 25
    UNSIGNED_SHORT2 = 26
    UNSIGNED_SHORT3 = 27
    UNSIGNED_SHORT4 = 28
    UNSIGNED_INT = 29
    UNSIGNED_INT2 = 30
    UNSIGNED_INT3 = 31
    UNSIGNED_INT4 = 32


class IndexDataType(IntEnum):
    """Element type of an index buffer."""

    NONE = 0
    UNSIGNED_BYTE = 1
    UNSIGNED_SHORT = 2
    UNSIGNED_INT = 3


# Each family is four consecutive members: one to four components.
_FAMILIES = (
    (DataType.HALF, 2),
    (DataType.FLOAT, 4),
    (DataType.BYTE, 1),
    (DataType.SHORT, 2),
    (DataType.INT, 4),
    (DataType.UNSIGNED_BYTE, 1),
    (DataType.UNSIGNED_SHORT, 2),
    (DataType.UNSIGNED_INT, 4),
)

_SHAPES: dict[DataType, tuple[int, int]] = {
    DataType(first + extra): (width, extra + 1)
    for first, width in _FAMILIES
    for extra in range(4)
}

_INDEX_SIZES = {
    IndexDataType.UNSIGNED_BYTE: 1,
    IndexDataType.UNSIGNED_SHORT: 2,
    IndexDataType.UNSIGNED_INT: 4,
}


def _shape(data_type: DataType) -> tuple[int, int]:
    try:
        return _SHAPES[DataType(data_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown shader data type: {data_type!r}") from None


def data_type_size(data_type: DataType) -> int:
    """Size in bytes of one attribute of the given type."""
    width, count = _shape(data_type)
    return width * count


def data_type_count(data_type: DataType) -> int:
    """Number of components in one attribute of the given type."""
    return _shape(data_type)[1]


def index_data_type_size(index_data_type: IndexDataType) -> int:
    """Size in bytes of one index of the given type."""
    try:
        return _INDEX_SIZES[IndexDataType(index_data_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown index data type: {index_data_type!r}") from None


def index_count(size: int, index_data_type: IndexDataType) -> int:
    """Number of whole indices held in size bytes of index data."""
    return size // index_data_type_size(index_data_type)


@dataclass(frozen=True)
class BufferElement:
    """One named attribute of a vertex."""

    name: str
    data_type: DataType
    shader_type: ShaderDataType = ShaderDataType.FLOATING_POINT
    offset: int = 0


class BufferLayout:
    """Attributes packed one after another, with offsets and stride."""

    def __init__(self, elements: Iterable[BufferElement] = ()) -> None:
        placed: list[BufferElement] = []
        offset = 0
        for element in elements:
            placed.append(replace(element, offset=offset))
            offset += data_type_size(element.data_type)
        self._elements = placed
        self._stride = offset

    @property
    def elements(self) -> list[BufferElement]:
        return list(self._elements)

    @property
    def stride(self) -> int:
        """Size in bytes of one whole vertex."""
        return self._stride

    def __iter__(self) -> Iterator[BufferElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"BufferLayout({self._elements!r})"