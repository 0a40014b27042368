"""
Region registry.

Stable numeric identifiers for the administrative regions announced on the
alert channel, plus their canonical (Ukrainian) display names as they appear
in channel messages.
"""

from enum import IntEnum
from typing import Dict, Iterator, Tuple


class UnknownRegionNameError(ValueError):
    """Raised by parse() for a name missing from the registry."""


class RegionID(IntEnum):
    INVALID = 0
    CRIMEA = 1
    VINNYTSIA = 2
    VOLYN = 3
    DNIPRO = 4
    DONETSK = 5
    ZHYTOMYR = 6
    ZAKARPATTIA = 7
    ZAPORIZHZHIA = 8
    IVANO_FRANKIVSK = 9
    KYIV = 10
    KIROVOHRAD = 11
    LUHANSK = 12
    LVIV = 13
    MYKOLAIV = 14
    ODESA = 15
    POLTAVA = 16
    RIVNE = 17
    SUMY = 18
    TERNOPIL = 19
    KHARKIV = 20
    KHERSON = 21
    KHMELNYTSKYI = 22
    CHERKASY = 23
    CHERNIVTSI = 24
    CHERNIHIV = 25
    KYIV_CITY = 26
    SEVASTOPOL_CITY = 27

    @property
    def display_name(self) -> str:
        """Channel name of the region, empty for INVALID."""
        return NAMES_BY_ID.get(self, "")


NAMES_BY_ID: Dict[RegionID, str] = {
    RegionID.CRIMEA: "Автономна Республіка Крим",
    RegionID.VINNYTSIA: "Вінницька область",
    RegionID.VOLYN: "Волинська область",
    RegionID.DNIPRO: "Дніпропетровська область",
    RegionID.DONETSK: "Донецька область",
    RegionID.ZHYTOMYR: "Житомирська область",
    RegionID.ZAKARPATTIA: "Закарпатська область",
    RegionID.ZAPORIZHZHIA: "Запорізька область",
    RegionID.IVANO_FRANKIVSK: "Івано-Франківська область",
    RegionID.KYIV: "Київська область",
    RegionID.KIROVOHRAD: "Кіровоградська область",
    RegionID.LUHANSK: "Луганська область",
    RegionID.LVIV: "Львівська область",
    RegionID.MYKOLAIV: "Миколаївська область",
    RegionID.ODESA: "Одеська область",
    RegionID.POLTAVA: "Полтавська область",
    RegionID.RIVNE: "Рівненська область",
    RegionID.SUMY: "Сумська область",
    RegionID.TERNOPIL: "Тернопільська область",
    RegionID.KHARKIV: "Харківська область",
    RegionID.KHERSON: "Херсонська область",
    RegionID.KHMELNYTSKYI: "Хмельницька область",
    RegionID.CHERKASY: "Черкаська область",
    RegionID.CHERNIVTSI: "Чернівецька область",
    RegionID.CHERNIHIV: "Чернігівська область",
    RegionID.KYIV_CITY: "м. Київ",
    RegionID.SEVASTOPOL_CITY: "м. Севастополь",
}

IDS_BY_NAME: Dict[str, RegionID] = {name: region_id for region_id, name in NAMES_BY_ID.items()}


def parse_name(name: str) -> RegionID:
    """Resolve a display name, RegionID.INVALID if it is not registered."""
    return IDS_BY_NAME.get(name, RegionID.INVALID)


def parse_id(value: int) -> RegionID:
    """Resolve a raw numeric id, RegionID.INVALID if it is not registered."""
    try:
        region_id = RegionID(value)
    except ValueError:
        return RegionID.INVALID
    if region_id not in NAMES_BY_ID:
        return RegionID.INVALID
    return region_id


def parse(name: str) -> RegionID:
    region_id = parse_name(name)
    if region_id is RegionID.INVALID:
        raise UnknownRegionNameError(f"name '{name}' doesn't exist")
    return region_id


def is_known(region_id: int) -> bool:
    return parse_id(region_id) is not RegionID.INVALID


def count() -> int:
    """Number of registered regions (INVALID excluded)."""
    return len(NAMES_BY_ID)


def iterate() -> Iterator[Tuple[RegionID, str]]:
    """Yield (id, display name) pairs in id order."""
    for region_id in sorted(NAMES_BY_ID):
        yield region_id, NAMES_BY_ID[region_id]


__all__ = [
    'RegionID',
    'UnknownRegionNameError',
    'NAMES_BY_ID',
    'parse_name',
    'parse_id',
    'parse',
    'is_known',
    'count',
    'iterate',
]
