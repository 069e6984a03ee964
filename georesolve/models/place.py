from dataclasses import dataclass, field

from shapely import Point

from georesolve.models.nominatim import RelationInfo
from georesolve.models.types import ElementId


@dataclass(kw_only=True, slots=True)
class PlaceFeature:
    point: Point  # (lon, lat)
    tags: dict[str, str]


@dataclass(kw_only=True, slots=True)
class Place:
    osm_id: ElementId
    name: str
    country: str
    center: Point  # (lon, lat)
    features: list[PlaceFeature] = field(default_factory=list)


def place_from_relation_info(info: RelationInfo) -> Place:
    return Place(
        osm_id=info.osm_id,
        name=info.name,
        country=info.country,
        center=info.point,
    )
