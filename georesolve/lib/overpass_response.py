import logging
from typing import Any

import cython
import orjson
from shapely import Point

from georesolve.models.overpass import OverpassNodeInfo
from georesolve.models.types import ElementId


@cython.cfunc
def _decode_elements(content: bytes | str) -> list[Any]:
    if not content:
        return []
    try:
        document = orjson.loads(content)
    except orjson.JSONDecodeError:
        logging.debug('Overpass response is not valid JSON')
        return []
    if not isinstance(document, dict):
        logging.debug('Overpass response is not a JSON object')
        return []
    elements = document.get('elements')
    return elements if isinstance(elements, list) else []


def extract_relation_ids(content: bytes | str) -> list[ElementId]:
    """
    Extract relation ids from an Overpass JSON response, in response order.

    Malformed responses yield an empty list.
    """
    result: list[ElementId] = []
    for element in _decode_elements(content):
        if not isinstance(element, dict) or element.get('type') != 'relation':
            continue
        element_id = element.get('id')
        if isinstance(element_id, int) and not isinstance(element_id, bool):
            result.append(ElementId(element_id))
    return result


def extract_nodes(content: bytes | str) -> list[OverpassNodeInfo]:
    """
    Extract nodes with their coordinates and tags from an Overpass JSON response.

    Malformed responses yield an empty list.
    """
    result: list[OverpassNodeInfo] = []
    for element in _decode_elements(content):
        if not isinstance(element, dict) or element.get('type') != 'node':
            continue

        lat: cython.double = _number(element.get('lat'))
        lon: cython.double = _number(element.get('lon'))

        tags_data = element.get('tags')
        tags: dict[str, str] = (
            {k: v for k, v in tags_data.items() if isinstance(v, str)}  #
            if isinstance(tags_data, dict)
            else {}
        )
        result.append(OverpassNodeInfo(Point(lon, lat), tags))
    return result


@cython.cfunc
def _number(value: Any) -> cython.double:
    return float(value) if isinstance(value, int | float) and not isinstance(value, bool) else 0.0
