import pytest

from alert_data import region
from alert_data.region import RegionID


@pytest.mark.parametrize(
    "name,expected",
    [
        ("м. Київ", RegionID.KYIV_CITY),
        ("Автономна Республіка Крим", RegionID.CRIMEA),
        ("Івано-Франківська область", RegionID.IVANO_FRANKIVSK),
        ("Курська Народна Республіка", RegionID.INVALID),
        ("", RegionID.INVALID),
    ],
)
def test_parse_name(name, expected):
    assert region.parse_name(name) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (26, RegionID.KYIV_CITY),
        (1, RegionID.CRIMEA),
        (9, RegionID.IVANO_FRANKIVSK),
        (-69, RegionID.INVALID),
        (0, RegionID.INVALID),
        (420, RegionID.INVALID),
    ],
)
def test_parse_id(value, expected):
    assert region.parse_id(value) is expected


def test_parse_raises_for_unknown_name():
    assert region.parse("Одеська область") is RegionID.ODESA
    with pytest.raises(region.UnknownRegionNameError):
        region.parse("Odesa")


def test_registry_is_bidirectional():
    assert region.count() == 27
    seen = set()
    for region_id, name in region.iterate():
        assert region.parse_name(name) is region_id
        assert region_id.display_name == name
        assert region.is_known(region_id)
        seen.add(region_id)
    assert RegionID.INVALID not in seen
    assert len(seen) == region.count()


def test_invalid_has_no_display_name():
    assert RegionID.INVALID.display_name == ""
    assert not region.is_known(RegionID.INVALID)
