import logging
from datetime import timedelta

from httpx import Client, HTTPError, Timeout
from shapely import Point, get_coordinates

from georesolve.config import (
    OVERPASS_INTERPRETER_URL,
    OVERPASS_LOOKUP_TIMEOUT,
    OVERPASS_REGIONS_TIMEOUT,
)
from georesolve.lib.overpass_request import quote_string
from georesolve.lib.overpass_response import extract_nodes, extract_relation_ids
from georesolve.models.overpass import OverpassNodeInfo
from georesolve.models.types import ElementId
from georesolve.utils import HTTP


class OverpassQuery:
    def __init__(self, http: Client = HTTP, url: str = OVERPASS_INTERPRETER_URL) -> None:
        self._http = http
        self._url = url

    def post(self, query: str, timeout: timedelta = OVERPASS_REGIONS_TIMEOUT) -> bytes:
        """
        Run a query against the Overpass interpreter.

        The timeout is the server-side timeout embedded in the query.
        Returns an empty body when the request fails.
        """
        logging.debug('Querying Overpass with %r', query)
        try:
            r = self._http.post(
                self._url,
                data={'data': query},
                # leave room for the server-side timeout
                timeout=Timeout(timeout.total_seconds() * 2),
            )
            r.raise_for_status()
        except HTTPError:
            logging.warning('Overpass request failed', exc_info=True)
            return b''
        return r.content

    def relation_ids_by_name(self, name: str) -> list[ElementId]:
        """Find administrative boundary relations by exact name."""
        timeout = OVERPASS_LOOKUP_TIMEOUT
        query = (
            f'[out:json][timeout:{int(timeout.total_seconds())}];'
            f'rel["name"={quote_string(name)}]["boundary"="administrative"];'
            'out ids;'
        )
        return extract_relation_ids(self.post(query, timeout))

    def relation_ids_by_position(self, point: Point) -> list[ElementId]:
        """Find administrative boundaries and city, town or state places enclosing a point."""
        x, y = get_coordinates(point)[0].tolist()
        timeout = OVERPASS_LOOKUP_TIMEOUT
        query = (
            f'[out:json][timeout:{int(timeout.total_seconds())}];'
            f'is_in({y:.7f},{x:.7f})->.areas;'  # lat,lon
            '('
            'rel(pivot.areas)["boundary"="administrative"];'
            'rel(pivot.areas)["place"~"^(city|town|state)$"];'
            ');'
            'out ids;'
        )
        return extract_relation_ids(self.post(query, timeout))

    def tourism_nodes(self, relation_id: ElementId) -> list[OverpassNodeInfo]:
        """Find tourism nodes inside the area of a relation."""
        timeout = OVERPASS_LOOKUP_TIMEOUT
        query = (
            f'[out:json][timeout:{int(timeout.total_seconds())}];'
            f'rel({relation_id});'
            'map_to_area->.a;'
            'node(area.a)["tourism"];'
            'out body;'
        )
        return extract_nodes(self.post(query, timeout))
