"""Map type identifiers, and the engine families they belong to."""
from typing import Optional
from enum import Enum


__all__ = ['EngineFamily', 'MapType', 'normalise_name']


def normalise_name(name: str) -> str:
    """Fold a map type name for lookup.

    Case is ignored, as are dashes, underscores and spaces, so ``Source-20`` and ``SOURCE_20``
    are both ``source20``.
    """
    return ''.join(
        char for char in name.casefold()
        if char not in '-_ '
    )


class EngineFamily(Enum):
    """The engine generation a map format descends from."""
    QUAKE = 'quake'
    QUAKE2 = 'quake2'
    QUAKE3 = 'quake3'
    COD = 'cod'
    NIGHTFIRE = 'nightfire'
    SOURCE = 'source'


class MapType(Enum):
    """Identifies the game or engine variant which wrote a map.

    The reader of the container file is responsible for picking this, the type is never
    inferred from the record contents. Values are strings so they can be specified in
    configuration, lookup by value is case-insensitive.
    """
    QUAKE = 'quake'

    QUAKE2 = 'quake2'
    DAIKATANA = 'daikatana'
    SIN = 'sin'
    SOF = 'sof'  #: Soldier of Fortune.

    QUAKE3 = 'quake3'
    RAVEN = 'raven'  #: Jedi Outcast, Jedi Academy and Soldier of Fortune 2.
    STEF2 = 'stef2'  #: Star Trek Elite Force 2.
    STEF2_DEMO = 'stef2demo'
    MOHAA = 'mohaa'  #: Medal of Honor: Allied Assault.
    FAKK = 'fakk'  #: Heavy Metal: F.A.K.K. 2.

    COD = 'cod'
    COD2 = 'cod2'
    COD4 = 'cod4'

    NIGHTFIRE = 'nightfire'

    SOURCE17 = 'source17'
    SOURCE18 = 'source18'
    SOURCE19 = 'source19'
    SOURCE20 = 'source20'
    SOURCE21 = 'source21'
    SOURCE22 = 'source22'
    SOURCE23 = 'source23'
    SOURCE27 = 'source27'
    VINDICTUS = 'vindictus'
    TACTICAL_INTERVENTION = 'tacticalintervention'
    DMOMAM = 'dmomam'  #: Dark Messiah of Might and Magic.

    # Known formats which none of the structures here can decode.
    GOLDSRC = 'goldsrc'
    BLUE_SHIFT = 'blueshift'
    L4D2 = 'l4d2'
    TITANFALL = 'titanfall'

    @classmethod
    def _missing_(cls, value: object) -> Optional['MapType']:
        """Allow looking up types with different capitalisation or separators."""
        if isinstance(value, str):
            folded = normalise_name(value)
            for member in cls:
                if member.value == folded:
                    return member
        return None

    @property
    def family(self) -> EngineFamily:
        """The engine generation this format belongs to."""
        return _FAMILIES[self]

    @property
    def is_source(self) -> bool:
        """Check if this is a Source engine format, including forks."""
        return self.family is EngineFamily.SOURCE


_FAMILIES = {
    MapType.QUAKE: EngineFamily.QUAKE,
    MapType.GOLDSRC: EngineFamily.QUAKE,
    MapType.BLUE_SHIFT: EngineFamily.QUAKE,

    MapType.QUAKE2: EngineFamily.QUAKE2,
    MapType.DAIKATANA: EngineFamily.QUAKE2,
    MapType.SIN: EngineFamily.QUAKE2,
    MapType.SOF: EngineFamily.QUAKE2,

    MapType.QUAKE3: EngineFamily.QUAKE3,
    MapType.RAVEN: EngineFamily.QUAKE3,
    MapType.STEF2: EngineFamily.QUAKE3,
    MapType.STEF2_DEMO: EngineFamily.QUAKE3,
    MapType.MOHAA: EngineFamily.QUAKE3,
    MapType.FAKK: EngineFamily.QUAKE3,

    MapType.COD: EngineFamily.COD,
    MapType.COD2: EngineFamily.COD,
    MapType.COD4: EngineFamily.COD,

    MapType.NIGHTFIRE: EngineFamily.NIGHTFIRE,

    MapType.SOURCE17: EngineFamily.SOURCE,
    MapType.SOURCE18: EngineFamily.SOURCE,
    MapType.SOURCE19: EngineFamily.SOURCE,
    MapType.SOURCE20: EngineFamily.SOURCE,
    MapType.SOURCE21: EngineFamily.SOURCE,
    MapType.SOURCE22: EngineFamily.SOURCE,
    MapType.SOURCE23: EngineFamily.SOURCE,
    MapType.SOURCE27: EngineFamily.SOURCE,
    MapType.VINDICTUS: EngineFamily.SOURCE,
    MapType.TACTICAL_INTERVENTION: EngineFamily.SOURCE,
    MapType.DMOMAM: EngineFamily.SOURCE,
    MapType.L4D2: EngineFamily.SOURCE,
    MapType.TITANFALL: EngineFamily.SOURCE,
}
