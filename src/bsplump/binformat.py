"""
The binformat module :mod:`binformat` contains helpers for handling fixed-size binary records, \
esentially expanding on :external:mod:`struct`'s functionality.

"""
from typing import Iterator, List, Mapping, Tuple, Union
from typing_extensions import Final, TypeAlias
from struct import Struct
import functools
import re


__all__ = [
    'SIZES', 'Buffer', 'byte_view', 'parse_format', 'record_count', 'iter_records',
]

Buffer: TypeAlias = Union[bytes, bytearray, memoryview]

SIZES: Final[Mapping[str, int]] = {
    fmt: Struct('<' + fmt).size
    for fmt in 'xbBhHiIqQ'
}

# Only explicit little-endian integer formats are accepted, since native alignment
# would silently insert padding.
_FORMAT_TOKEN = re.compile(r'\s*(\d*)([xbBhHiIqQ])\s*')
_cached_struct = functools.lru_cache()(Struct)


def parse_format(fmt: str) -> List[Tuple[int, str]]:
    """Split a little-endian integer struct format into the offset and code of each value.

    Padding bytes (``x``) are skipped, so only actual values are returned. For example,
    ``'<i2xh'`` produces ``[(0, 'i'), (6, 'h')]``.
    """
    if not fmt.startswith('<'):
        raise ValueError(f'Format {fmt!r} must be explicitly little-endian!')
    pos = 1
    offset = 0
    values: List[Tuple[int, str]] = []
    while pos < len(fmt):
        match = _FORMAT_TOKEN.match(fmt, pos)
        if match is None:
            raise ValueError(f'Unsupported format code {fmt[pos]!r} in {fmt!r}!')
        count_str, code = match.groups()
        count = int(count_str) if count_str else 1
        size = SIZES[code]
        if code == 'x':
            offset += size * count
        else:
            for _ in range(count):
                values.append((offset, code))
                offset += size
        pos = match.end()

    assert offset == _cached_struct(fmt).size, (fmt, offset)
    return values


def byte_view(data: Buffer) -> memoryview:
    """Return a flat view of the buffer's bytes.

    A memoryview over an array of shorts or ints has a length in items, not bytes. Casting to
    unsigned bytes makes lengths and slices line up with record offsets.
    """
    view = memoryview(data)
    if view.format == 'B' and view.ndim == 1:
        return view
    return view.cast('B')


def record_count(data: Buffer, size: int) -> int:
    """Return the number of complete records of the given size in the buffer."""
    if size <= 0:
        raise ValueError(f'Record size must be positive, not {size!r}!')
    return memoryview(data).nbytes // size


def iter_records(data: Buffer, size: int, start: int = 0, stop: int = -1) -> Iterator[memoryview]:
    """Iterate over consecutive fixed-size records in a buffer.

    Each record is a :external:py:class:`memoryview` slice, to avoid copying the data.
    Any trailing bytes too short to form a whole record are skipped. If specified, ``start``
    and ``stop`` give the range of record indexes to produce.
    """
    count = record_count(data, size)
    if stop < 0 or stop > count:
        stop = count
    view = byte_view(data)
    for i in range(start, stop):
        yield view[i * size: (i + 1) * size]
