from typing import List, Tuple
import array

import pytest

from bsplump import binformat


@pytest.mark.parametrize('fmt, values', [
    ('<i', [(0, 'i')]),
    ('<iii', [(0, 'i'), (4, 'i'), (8, 'i')]),
    ('<3i', [(0, 'i'), (4, 'i'), (8, 'i')]),
    ('<ihh', [(0, 'i'), (4, 'h'), (6, 'h')]),
    ('<i2xh', [(0, 'i'), (6, 'h')]),
    ('<hH4xI', [(0, 'h'), (2, 'H'), (8, 'I')]),
])
def test_parse_format(fmt: str, values: List[Tuple[int, str]]) -> None:
    """Test parsing struct formats into offsets."""
    assert binformat.parse_format(fmt) == values


@pytest.mark.parametrize('fmt', [
    'iii',  # Native alignment.
    '>ii',
    '<if',  # Not an integer.
    '<4s',
])
def test_parse_format_invalid(fmt: str) -> None:
    with pytest.raises(ValueError):
        binformat.parse_format(fmt)


def test_record_count() -> None:
    assert binformat.record_count(b'', 12) == 0
    assert binformat.record_count(bytes(11), 12) == 0
    assert binformat.record_count(bytes(12), 12) == 1
    assert binformat.record_count(bytes(40), 12) == 3
    with pytest.raises(ValueError):
        binformat.record_count(bytes(12), 0)


def test_iter_records() -> None:
    """Records are consecutive windows, with leftover bytes skipped."""
    data = bytes(range(14))
    records = [bytes(rec) for rec in binformat.iter_records(data, 4)]
    assert records == [
        bytes([0, 1, 2, 3]),
        bytes([4, 5, 6, 7]),
        bytes([8, 9, 10, 11]),
    ]


def test_iter_records_range() -> None:
    """A subset of the records can be requested."""
    data = bytearray(range(20))
    records = [bytes(rec) for rec in binformat.iter_records(data, 4, 1, 3)]
    assert records == [bytes([4, 5, 6, 7]), bytes([8, 9, 10, 11])]
    # A stop past the end is clamped.
    assert len(list(binformat.iter_records(data, 4, 3, 50))) == 2


def test_iter_records_no_copy() -> None:
    """The records are views into the original buffer."""
    data = bytearray(8)
    first, second = binformat.iter_records(data, 4)
    data[5] = 0xFF
    assert isinstance(second, memoryview)
    assert second[1] == 0xFF
    assert first.tobytes() == bytes(4)


def test_typed_memoryview() -> None:
    """Counts and records are in bytes, whatever the item size of the view."""
    view = memoryview(array.array('i', [0x04030201, 0x08070605, 0x0C0B0A09]))
    assert binformat.record_count(view, 8) == 1
    assert binformat.record_count(view, 4) == 3
    assert binformat.byte_view(view).nbytes == 12
    records = list(binformat.iter_records(view, 6))
    assert [rec.nbytes for rec in records] == [6, 6]
    assert all(rec.format == 'B' for rec in records)


def test_byte_view_passthrough() -> None:
    data = bytearray(4)
    view = memoryview(data)
    assert binformat.byte_view(view) is view
    assert binformat.byte_view(data).tolist() == [0, 0, 0, 0]
