"""Helpers for performing tests."""
from typing import Iterator, List, Tuple, Type
import struct

from dirty_equals import DirtyEquals
import pytest

from bsplump import Brush, MapType, Node
from bsplump.lump import LumpStruct


__all__ = [
    'ExactType', 'KINDS', 'kind_formats', 'unsupported_formats', 'pack',
    'brush_formats', 'node_formats',
]

KINDS: List[Type[LumpStruct]] = [Brush, Node]


class ExactType(DirtyEquals[object]):
    """Proxy object which verifies both value and types match."""
    def __init__(self, val: object) -> None:
        super().__init__(val)
        self.compare = val

    def equals(self, other: object) -> bool:
        if isinstance(other, ExactType):
            other = other.compare
        return type(self.compare) is type(other) and self.compare == other


def pack(fmt: str, *values: int) -> bytes:
    """Shortcut to build little-endian test data."""
    return struct.pack('<' + fmt, *values)


def _iter_kind_formats(supported: bool) -> Iterator[Tuple[Type[LumpStruct], MapType]]:
    for kind in KINDS:
        for map_type in MapType:
            if (map_type in kind.LAYOUTS) is supported:
                yield kind, map_type


def kind_formats() -> List[object]:
    """Every supported combination of structure and map type, as parameters."""
    return [
        pytest.param(kind, map_type, id=f'{kind.__name__}-{map_type.name}')
        for kind, map_type in _iter_kind_formats(True)
    ]


def unsupported_formats() -> List[object]:
    """Every combination of structure and map type which cannot be decoded."""
    return [
        pytest.param(kind, map_type, id=f'{kind.__name__}-{map_type.name}')
        for kind, map_type in _iter_kind_formats(False)
    ]


def brush_formats() -> List[MapType]:
    """Map types which have brushes."""
    return sorted(Brush.LAYOUTS.formats, key=lambda t: t.value)


def node_formats() -> List[MapType]:
    """Map types which have nodes."""
    return sorted(Node.LAYOUTS.formats, key=lambda t: t.value)
