"""Decode fixed-size records from the BSP map format family.

The formats here are the Quake lineage and its descendants (Quake 2, Quake 3, Call of Duty,
Nightfire, the Source engine and various forks). Each stores the same logical structures using
different field orders and widths, so decoding is driven by per-format layout tables.
"""
from typing import TYPE_CHECKING, Optional
import sys as _sys


__version__: str
if not TYPE_CHECKING:
    try:
        from ._version import __version__
    except ImportError:
        __version__ = '<unknown>'
    else:
        # Discard the now-useless module. Use globals so static analysis ignores this.
        del _sys.modules[globals().pop('_version').__name__]

__all__ = [
    '__version__',
    'DecodeError', 'MissingInputError', 'UnsupportedFormatError', 'TruncatedDataError',
    'MapType', 'EngineFamily',
    'Brush', 'Node', 'ABSENT',
    'decode_entity', 'decode_lump', 'iter_lump',

    # Submodules:
    'binformat', 'const', 'entities', 'layout', 'logger', 'lump',  # pyright: ignore
]


class DecodeError(Exception):
    """Base class for all errors raised while decoding records."""


class MissingInputError(DecodeError, TypeError):
    """No buffer was provided to decode."""
    def __init__(self, message: str = 'No data provided to decode!') -> None:
        super().__init__(message)


class UnsupportedFormatError(DecodeError, ValueError):
    """The map type has no layout for this kind of structure.

    The message names both the map type and the structure.
    """
    kind: str
    """The name of the structure being decoded."""
    map_type: object
    """The map type which was requested."""

    def __init__(self, kind: str, map_type: object) -> None:
        name = getattr(map_type, 'name', None) or repr(map_type)
        super().__init__(f'Map type {name} is not supported by the {kind} structure!')
        self.kind = kind
        self.map_type = map_type


class TruncatedDataError(DecodeError, ValueError):
    """The buffer is too short for a record, or has leftover bytes in strict mode."""
    expected: int
    """The number of bytes required."""
    actual: int
    """The number of bytes which were present."""

    def __init__(self, message: str, expected: int, actual: int, kind: Optional[str] = None) -> None:
        if kind is not None:
            message = f'{kind}: {message}'
        super().__init__(f'{message} (expected {expected} bytes, got {actual})')
        self.expected = expected
        self.actual = actual


# Import these, so people can reference 'bsplump.Brush' instead of 'bsplump.entities.Brush'.
# Should be done after the exceptions, since the submodules import those.
# isort: off
from bsplump.const import MapType, EngineFamily
from bsplump.entities import ABSENT, Brush, Node
from bsplump.lump import decode_entity, decode_lump, iter_lump
