from dataclasses import dataclass
from enum import StrEnum
from typing import NotRequired, TypedDict

from shapely import Point

from georesolve.models.overpass import OverpassElementType
from georesolve.models.types import ElementId

# https://nominatim.org/release-docs/develop/api/Lookup/
# https://nominatim.org/release-docs/develop/api/Output/


class NominatimMatch(StrEnum):
    any = 'any'
    best = 'best'


class NominatimAddress(TypedDict, total=False):
    city: str
    town: str
    state: str
    country: str
    country_code: str


class NominatimPlace(TypedDict):
    place_id: int
    osm_type: NotRequired[OverpassElementType]
    osm_id: NotRequired[ElementId]
    lat: str
    lon: str
    name: NotRequired[str]
    display_name: str
    category: str
    type: str
    addresstype: NotRequired[str]
    place_rank: int
    importance: NotRequired[float]
    address: NotRequired[NominatimAddress]


@dataclass(kw_only=True, slots=True)
class RelationInfo:
    osm_id: ElementId
    name: str
    country: str
    point: Point  # (lon, lat)
    importance: float = 0
