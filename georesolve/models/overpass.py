from typing import Literal, NamedTuple, NotRequired, TypedDict

from shapely import Point

from georesolve.models.types import ElementId

# Overpass API Documentation:
# https://wiki.openstreetmap.org/wiki/Overpass_API/Overpass_QL

OverpassElementType = Literal['node', 'way', 'relation']


class _OverpassElement(TypedDict):
    id: ElementId
    tags: NotRequired[dict[str, str]]


class OverpassNode(_OverpassElement):
    type: Literal['node']
    lat: float
    lon: float


class OverpassWay(_OverpassElement):
    type: Literal['way']


class OverpassRelation(_OverpassElement):
    type: Literal['relation']


OverpassElement = OverpassNode | OverpassWay | OverpassRelation


class OverpassResponse(TypedDict):
    elements: list[OverpassElement]


class OverpassNodeInfo(NamedTuple):
    point: Point  # (lon, lat)
    tags: dict[str, str]


__all__ = (
    'OverpassElement',
    'OverpassElementType',
    'OverpassNodeInfo',
    'OverpassResponse',
)
