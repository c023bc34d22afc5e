"""Test the map type enum lookup and families."""
import pytest

from bsplump.const import EngineFamily, MapType, normalise_name


@pytest.mark.parametrize('name, expected', [
    ('source20', MapType.SOURCE20),
    ('Source-20', MapType.SOURCE20),
    ('SOURCE_20', MapType.SOURCE20),
    ('STEF2_DEMO', MapType.STEF2_DEMO),
    ('stef2 demo', MapType.STEF2_DEMO),
    ('Tactical_Intervention', MapType.TACTICAL_INTERVENTION),
    ('CoD4', MapType.COD4),
])
def test_lookup_normalised(name: str, expected: MapType) -> None:
    """Map types can be looked up from config strings with loose formatting."""
    assert MapType(name) is expected


def test_lookup_invalid() -> None:
    """Unknown names still raise ValueError like a regular enum."""
    with pytest.raises(ValueError):
        MapType('quake9')
    with pytest.raises(ValueError):
        MapType(20)


def test_normalise_name() -> None:
    assert normalise_name('Source-2_0 ') == 'source20'
    assert normalise_name('') == ''


@pytest.mark.parametrize('map_type', list(MapType), ids=lambda t: t.name)
def test_value_lookup_roundtrips(map_type: MapType) -> None:
    """Every member can be found by both its value and its name."""
    assert MapType(map_type.value) is map_type
    assert MapType(map_type.name) is map_type


def test_families() -> None:
    assert MapType.QUAKE.family is EngineFamily.QUAKE
    assert MapType.SIN.family is EngineFamily.QUAKE2
    assert MapType.MOHAA.family is EngineFamily.QUAKE3
    assert MapType.COD2.family is EngineFamily.COD
    assert MapType.NIGHTFIRE.family is EngineFamily.NIGHTFIRE
    assert MapType.VINDICTUS.family is EngineFamily.SOURCE

    assert MapType.DMOMAM.is_source
    assert MapType.SOURCE27.is_source
    assert not MapType.QUAKE3.is_source
    assert not MapType.NIGHTFIRE.is_source


@pytest.mark.parametrize('map_type', list(MapType), ids=lambda t: t.name)
def test_every_type_has_family(map_type: MapType) -> None:
    """Every map type belongs to an engine family."""
    assert isinstance(map_type.family, EngineFamily)


def test_family_table_complete() -> None:
    """The family lookup has no fallback, so it must cover every map type."""
    from bsplump.const import _FAMILIES
    assert _FAMILIES.keys() == set(MapType)
