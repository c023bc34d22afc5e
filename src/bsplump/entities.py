"""The structures decoded from lumps, along with their layouts for each map type.

All are immutable. Fields which a map type does not store are set to :py:data:`ABSENT`,
so they can be told apart from a genuine zero.
"""
from typing import ClassVar, Tuple
from typing_extensions import Final

import attrs

from bsplump.const import MapType
from bsplump.layout import Layout, LayoutTable
from bsplump.lump import LumpStruct


__all__ = ['ABSENT', 'Brush', 'Node']

#: The value used for fields not present in a map type's layout.
ABSENT: Final = -1

# Formats sharing the Source layouts.
_SOURCE: Final = [
    MapType.SOURCE17, MapType.SOURCE18, MapType.SOURCE19, MapType.SOURCE20,
    MapType.SOURCE21, MapType.SOURCE22, MapType.SOURCE23, MapType.SOURCE27,
    MapType.TACTICAL_INTERVENTION, MapType.DMOMAM,
]
_QUAKE2: Final = [MapType.QUAKE2, MapType.DAIKATANA, MapType.SIN, MapType.SOF]
_COD: Final = [MapType.COD, MapType.COD2, MapType.COD4]


@attrs.frozen
class Brush(LumpStruct):
    """A convex brush, made from a range of brush sides.

    Quake 3 based formats refer to a texture, while Quake 2 and Source store the
    contents flags. Call of Duty only stores the side count and texture, the sides
    are implicitly consecutive.
    """
    first_side: int = ABSENT
    num_sides: int = ABSENT
    texture: int = ABSENT
    contents: int = ABSENT

    LAYOUTS: ClassVar[LayoutTable]

    @property
    def has_first_side(self) -> bool:
        """Check if the map type stores the first side index."""
        return self.first_side != ABSENT

    @property
    def has_texture(self) -> bool:
        """Check if the map type stores a texture index."""
        return self.texture != ABSENT

    @property
    def has_contents(self) -> bool:
        """Check if the map type stores contents flags."""
        return self.contents != ABSENT

    @property
    def side_range(self) -> range:
        """The indexes of the brush sides used by this brush."""
        if self.first_side == ABSENT:
            raise ValueError('This brush does not store its first side!')
        return range(self.first_side, self.first_side + self.num_sides)


Brush.LAYOUTS = LayoutTable(
    'Brush',
    ['first_side', 'num_sides', 'texture', 'contents'],
    [
        (Layout('quake2', '<iii', ['first_side', 'num_sides', 'contents']), [
            *_QUAKE2, *_SOURCE, MapType.VINDICTUS,
        ]),
        (Layout('nightfire', '<iii', ['contents', 'first_side', 'num_sides']), [
            MapType.NIGHTFIRE,
        ]),
        (Layout('quake3', '<iii', ['first_side', 'num_sides', 'texture']), [
            MapType.QUAKE3, MapType.RAVEN, MapType.STEF2_DEMO, MapType.MOHAA, MapType.FAKK,
        ]),
        (Layout('stef2', '<iii', ['num_sides', 'first_side', 'texture']), [
            MapType.STEF2,
        ]),
        (Layout('cod', '<hh', ['num_sides', 'texture']), _COD),
    ],
    [
        (12, [
            *_QUAKE2, *_SOURCE, MapType.VINDICTUS, MapType.NIGHTFIRE,
            MapType.QUAKE3, MapType.RAVEN, MapType.STEF2, MapType.STEF2_DEMO,
            MapType.MOHAA, MapType.FAKK,
        ]),
        (4, _COD),
    ],
)


@attrs.frozen
class Node(LumpStruct):
    """A node in the BSP tree.

    Each child is either another node, or a leaf if negative. Leaf ``n`` is stored as ``-1 - n``.
    Zero is the root node, so can never be a child. It is not rejected here, since that
    would make it impossible to inspect broken maps.
    """
    plane: int
    child1: int
    child2: int

    LAYOUTS: ClassVar[LayoutTable]

    @property
    def children(self) -> Tuple[int, int]:
        """Both child indexes."""
        return self.child1, self.child2

    @staticmethod
    def is_leaf(child: int) -> bool:
        """Check if a child index refers to a leaf."""
        return child < 0

    @staticmethod
    def leaf_index(child: int) -> int:
        """Convert a child index referring to a leaf into the index of that leaf."""
        if child >= 0:
            raise ValueError(f'Child {child} is a node, not a leaf!')
        return -1 - child


# All formats use the first 4 bytes as the plane index.
_NODE_STANDARD: Final = Layout('standard', '<iii', ['plane', 'child1', 'child2'])

Node.LAYOUTS = LayoutTable(
    'Node',
    ['plane', 'child1', 'child2'],
    [
        (Layout('quake', '<ihh', ['plane', 'child1', 'child2']), [MapType.QUAKE]),
        (_NODE_STANDARD, [
            *_QUAKE2, MapType.NIGHTFIRE, *_SOURCE, MapType.VINDICTUS,
            MapType.QUAKE3, MapType.RAVEN, MapType.STEF2, MapType.STEF2_DEMO,
            MapType.MOHAA, MapType.FAKK, MapType.COD,
        ]),
    ],
    [
        (24, [MapType.QUAKE]),
        (28, _QUAKE2),
        (32, _SOURCE),
        (48, [MapType.VINDICTUS]),
        (36, [
            MapType.QUAKE3, MapType.FAKK, MapType.COD, MapType.STEF2, MapType.STEF2_DEMO,
            MapType.MOHAA, MapType.RAVEN, MapType.NIGHTFIRE,
        ]),
    ],
)
