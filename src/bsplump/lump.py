"""Decode single records, or entire lumps of them.

Every function here is generic over the kind of structure, which is given as the class to
produce (:py:class:`~bsplump.entities.Brush`, :py:class:`~bsplump.entities.Node`). The class
supplies the :py:class:`~bsplump.layout.LayoutTable` to use.
"""
from typing import ClassVar, Iterator, List, Optional, Tuple, Type, TypeVar
from concurrent.futures import ThreadPoolExecutor
import itertools

from bsplump import MissingInputError, TruncatedDataError, logger
from bsplump.binformat import Buffer, iter_records, record_count
from bsplump.layout import AnyMapType, Layout, LayoutTable


__all__ = ['LumpStruct', 'decode_entity', 'decode_lump', 'iter_lump']

LOGGER = logger.get_logger(__name__)
StructT = TypeVar('StructT', bound='LumpStruct')


class LumpStruct:
    """Base class for structures stored as fixed-size records in a lump.

    Subclasses define :py:attr:`LAYOUTS`, and accept each field name as a keyword argument.
    Fields absent from a layout are left to the class default.
    """
    __slots__ = ()
    LAYOUTS: ClassVar[LayoutTable]

    @classmethod
    def from_bytes(cls: Type[StructT], data: Buffer, map_type: AnyMapType) -> StructT:
        """Decode a single record. See :py:func:`decode_entity`."""
        return decode_entity(cls, data, map_type)

    @classmethod
    def read_lump(
        cls: Type[StructT],
        data: Buffer,
        map_type: AnyMapType,
        *,
        strict: bool = False,
        workers: Optional[int] = None,
    ) -> List[StructT]:
        """Decode every record in a lump. See :py:func:`decode_lump`."""
        return decode_lump(cls, data, map_type, strict=strict, workers=workers)

    @classmethod
    def iter_lump(
        cls: Type[StructT],
        data: Buffer,
        map_type: AnyMapType,
        *,
        strict: bool = False,
    ) -> Iterator[StructT]:
        """Lazily decode every record in a lump. See :py:func:`iter_lump`."""
        return iter_lump(cls, data, map_type, strict=strict)


def decode_entity(kind: Type[StructT], data: Buffer, map_type: AnyMapType) -> StructT:
    """Decode a single record into a structure.

    The record is read from the start of ``data``, any bytes past the end of the layout are
    ignored.

    :param kind: The structure class to produce.
    :param data: The bytes of the record.
    :param map_type: The game/engine which wrote the map.
    :raises MissingInputError: If ``data`` is ``None``.
    :raises UnsupportedFormatError: If the structure does not exist in this map type.
    :raises TruncatedDataError: If ``data`` is too short to hold the record.
    """
    if data is None:
        raise MissingInputError
    return kind(**kind.LAYOUTS.resolve(map_type).unpack(data))


def _prepare(
    kind: Type[LumpStruct],
    data: Buffer,
    map_type: AnyMapType,
    strict: bool,
) -> Tuple[Layout, int, int]:
    """Validate the arguments, then return the layout, record size and record count."""
    if data is None:
        raise MissingInputError
    table = kind.LAYOUTS
    map_type = table.check(map_type)
    layout = table.resolve(map_type)
    size = table.record_size(map_type)
    total = memoryview(data).nbytes
    count = record_count(data, size)
    extra = total - count * size
    if extra:
        if strict:
            raise TruncatedDataError(
                f'Lump is not a multiple of the record size ({size})',
                count * size, total,
                kind=table.kind,
            )
        LOGGER.debug(
            'Ignoring {} trailing bytes in {} lump for {}',
            extra, table.kind, map_type.name,
        )
    return layout, size, count


def _decode_range(
    kind: Type[StructT],
    layout: Layout,
    data: Buffer,
    size: int,
    start: int,
    stop: int,
) -> List[StructT]:
    """Decode the records with indexes in ``range(start, stop)``."""
    return [
        kind(**layout.unpack(record))
        for record in iter_records(data, size, start, stop)
    ]


def iter_lump(
    kind: Type[StructT],
    data: Buffer,
    map_type: AnyMapType,
    *,
    strict: bool = False,
) -> Iterator[StructT]:
    """Lazily decode each record in a lump, in file order.

    The arguments are validated immediately, before the first record is requested.
    See :py:func:`decode_lump` for the parameters.
    """
    layout, size, count = _prepare(kind, data, map_type, strict)
    return (
        kind(**layout.unpack(record))
        for record in iter_records(data, size, 0, count)
    )


def decode_lump(
    kind: Type[StructT],
    data: Buffer,
    map_type: AnyMapType,
    *,
    strict: bool = False,
    workers: Optional[int] = None,
) -> List[StructT]:
    """Decode all the records in a lump, in file order.

    Item ``i`` of the result is decoded from ``data[i * size: (i + 1) * size]``, where ``size``
    is the record size for this map type.

    :param kind: The structure class to produce.
    :param data: The contents of the lump.
    :param map_type: The game/engine which wrote the map.
    :param strict: By default, trailing bytes too short to form a whole record are ignored.
        If set, a :py:class:`~bsplump.TruncatedDataError` is raised instead.
    :param workers: If greater than one, split the lump into this many chunks and decode them
        in a thread pool. The result is identical to decoding sequentially.
    :raises MissingInputError: If ``data`` is ``None``.
    :raises UnsupportedFormatError: If the structure does not exist in this map type.
    """
    layout, size, count = _prepare(kind, data, map_type, strict)
    if workers is not None and workers < 1:
        raise ValueError(f'Worker count must be positive, not {workers!r}!')
    LOGGER.debug('Decoding {} {} records ({} bytes each)', count, kind.LAYOUTS.kind, size)

    if workers is None or workers == 1 or count < workers:
        return _decode_range(kind, layout, data, size, 0, count)

    chunk_size = -(-count // workers)  # Round up.
    starts = range(0, count, chunk_size)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields results in submission order, so the chunks join back up in order.
        chunks = executor.map(
            _decode_range,
            itertools.repeat(kind), itertools.repeat(layout), itertools.repeat(data),
            itertools.repeat(size),
            starts, [min(start + chunk_size, count) for start in starts],
        )
        return list(itertools.chain.from_iterable(chunks))
