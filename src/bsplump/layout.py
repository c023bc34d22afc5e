"""Byte layouts of each structure, for every supported map type.

Many map types share an identical layout, so each :py:class:`Layout` is a group which multiple
types point to. The length of each record is kept in a separate table, since some formats
share the same field layout but pad the remainder of the structure differently.
"""
from typing import AbstractSet, Collection, Dict, Iterable, Iterator, Mapping, Set, Tuple, Union
from typing_extensions import TypeAlias
from types import MappingProxyType
import struct

import attrs

from bsplump import MissingInputError, TruncatedDataError, UnsupportedFormatError
from bsplump.binformat import SIZES, Buffer, byte_view, parse_format
from bsplump.const import MapType


__all__ = ['AnyMapType', 'FieldSpec', 'Layout', 'LayoutTable']
AnyMapType: TypeAlias = Union[MapType, str]


@attrs.frozen
class FieldSpec:
    """The position of a single integer field inside a record."""
    name: str
    offset: int
    width: int  #: Size in bytes.
    signed: bool = True

    @property
    def end(self) -> int:
        """The offset just past this field."""
        return self.offset + self.width


def _make_struct(fmt: str) -> struct.Struct:
    """Validate the format, then compile it."""
    parse_format(fmt)
    return struct.Struct(fmt)


@attrs.frozen(eq=False, repr=False)
class Layout:
    """The field layout shared by a group of map types.

    The format is a little-endian :external:py:mod:`struct` format. Each value it produces is
    assigned to the corresponding name in ``fields``, in order. Fields not listed are absent
    from this layout.
    """
    name: str
    fmt: struct.Struct = attrs.field(converter=_make_struct)
    fields: Tuple[str, ...] = attrs.field(converter=tuple)
    specs: Tuple[FieldSpec, ...] = attrs.field(init=False)

    @fields.validator
    def _check_fields(self, _: 'attrs.Attribute[Tuple[str, ...]]', fields: Tuple[str, ...]) -> None:
        values = parse_format(self.fmt.format)
        if len(values) != len(fields):
            raise ValueError(
                f'Layout {self.name!r} has {len(values)} values, '
                f'but {len(fields)} field names: {fields}'
            )
        if len(set(fields)) != len(fields):
            raise ValueError(f'Duplicate field names in layout {self.name!r}: {fields}')

    @specs.default
    def _compute_specs(self) -> Tuple[FieldSpec, ...]:
        return tuple(
            FieldSpec(name, offset, SIZES[code], code.islower())
            for name, (offset, code) in zip(self.fields, parse_format(self.fmt.format))
        )

    def __repr__(self) -> str:
        return f'<Layout {self.name!r}: {" ".join(self.fields)} ({self.fmt.format!r})>'

    @property
    def size(self) -> int:
        """The number of bytes the fields cover, including any padding between them."""
        return self.fmt.size

    def has(self, name: str) -> bool:
        """Check if this layout includes the specified field."""
        return name in self.fields

    def unpack(self, data: Buffer) -> Dict[str, int]:
        """Read the fields from the start of the buffer.

        Absent fields are not included in the result. Any data after :py:attr:`size` bytes is
        ignored.
        """
        if data is None:
            raise MissingInputError
        view = byte_view(data)
        if view.nbytes < self.fmt.size:
            raise TruncatedDataError(
                f'Record too short for layout {self.name!r}',
                self.fmt.size, view.nbytes,
            )
        return dict(zip(self.fields, self.fmt.unpack_from(view)))


class LayoutTable:
    """Maps each supported map type to the layout and record size for one kind of structure.

    Groups are specified as ``(layout, map_types)`` pairs, so formats sharing a layout share the
    same :py:class:`Layout` object. The record sizes are specified separately. These must cover
    the same map types, which :py:meth:`verify` checks when the table is built.
    """
    kind: str
    fields: Tuple[str, ...]

    def __init__(
        self,
        kind: str,
        fields: Iterable[str],
        groups: Iterable[Tuple[Layout, Collection[MapType]]],
        record_sizes: Iterable[Tuple[int, Collection[MapType]]],
    ) -> None:
        self.kind = kind
        self.fields = tuple(fields)
        layouts: Dict[MapType, Layout] = {}
        sizes: Dict[MapType, int] = {}
        for layout, map_types in groups:
            for map_type in map_types:
                if map_type in layouts:
                    raise ValueError(f'{kind}: {map_type.name} is in multiple layout groups!')
                layouts[map_type] = layout
        for size, map_types in record_sizes:
            for map_type in map_types:
                if map_type in sizes:
                    raise ValueError(f'{kind}: {map_type.name} has multiple record sizes!')
                sizes[map_type] = size
        self._layouts: Mapping[MapType, Layout] = MappingProxyType(layouts)
        self._sizes: Mapping[MapType, int] = MappingProxyType(sizes)
        self.verify()

    def __repr__(self) -> str:
        return f'<LayoutTable {self.kind}: {len(self._layouts)} formats, {len(self.layouts())} layouts>'

    def __contains__(self, map_type: object) -> bool:
        return map_type in self._layouts

    def __iter__(self) -> Iterator[MapType]:
        return iter(self._layouts)

    def __len__(self) -> int:
        return len(self._layouts)

    @property
    def formats(self) -> AbstractSet[MapType]:
        """The map types this structure can be decoded from."""
        return self._layouts.keys()

    def layouts(self) -> Dict[Layout, AbstractSet[MapType]]:
        """Return each distinct layout, with the map types using it."""
        groups: Dict[Layout, Set[MapType]] = {}
        for map_type, layout in self._layouts.items():
            groups.setdefault(layout, set()).add(map_type)
        return {layout: frozenset(types) for layout, types in groups.items()}

    def check(self, map_type: AnyMapType) -> MapType:
        """Convert the map type to the enum, and check this structure supports it.

        Map types may be given as the enum member or its string value.

        :raises UnsupportedFormatError: If this structure does not exist in this map type.
        """
        try:
            if isinstance(map_type, str):
                map_type = MapType(map_type)
            if map_type in self._layouts:
                return map_type
        # ValueError for unknown strings, TypeError for unhashable junk.
        except (ValueError, TypeError):
            pass
        raise UnsupportedFormatError(self.kind, map_type)

    def resolve(self, map_type: AnyMapType) -> Layout:
        """Find the layout used for this map type.

        :raises UnsupportedFormatError: If this structure does not exist in this map type.
        """
        return self._layouts[self.check(map_type)]

    def record_size(self, map_type: AnyMapType) -> int:
        """Find the size of each record for this map type.

        This may be larger than the layout, if the structure has fields not decoded here.

        :raises UnsupportedFormatError: If this structure does not exist in this map type.
        """
        return self._sizes[self.check(map_type)]

    def verify(self) -> None:
        """Check the layout and record size tables are consistent.

        :raises ValueError: If a map type is missing from either table, a layout doesn't fit
            inside its record, or a layout uses an unknown field.
        """
        missing_size = self._layouts.keys() - self._sizes.keys()
        if missing_size:
            raise ValueError(
                f'{self.kind}: No record size for '
                f'{", ".join(sorted(t.name for t in missing_size))}!'
            )
        missing_layout = self._sizes.keys() - self._layouts.keys()
        if missing_layout:
            raise ValueError(
                f'{self.kind}: No layout for '
                f'{", ".join(sorted(t.name for t in missing_layout))}!'
            )
        for map_type, layout in self._layouts.items():
            size = self._sizes[map_type]
            if layout.size > size:
                raise ValueError(
                    f'{self.kind}: Layout {layout.name!r} needs {layout.size} bytes, '
                    f'but {map_type.name} records are only {size} bytes!'
                )
            unknown = set(layout.fields).difference(self.fields)
            if unknown:
                raise ValueError(
                    f'{self.kind}: Layout {layout.name!r} has unknown fields '
                    f'{", ".join(sorted(unknown))}!'
                )
