import logging
from urllib.parse import urlencode

import orjson
from httpx import Client, HTTPError
from shapely import Point

from georesolve.config import (
    NOMINATIM_LOOKUP_BATCH_SIZE,
    NOMINATIM_LOOKUP_LANGUAGE,
    NOMINATIM_URL,
)
from georesolve.models.nominatim import NominatimMatch, NominatimPlace, RelationInfo
from georesolve.models.types import ElementId
from georesolve.utils import HTTP, chunked

# https://nominatim.org/release-docs/develop/api/Lookup/

# Overpass position queries also return place=state relations,
# the lookup narrows them down to city-like places only
_CITY_TYPES = frozenset(('city', 'town', 'village', 'municipality'))


class NominatimQuery:
    def __init__(self, http: Client = HTTP, url: str = NOMINATIM_URL) -> None:
        self._http = http
        self._url = url

    def lookup_regions(self, relation_ids: list[ElementId]) -> list[RelationInfo]:
        """Look up place details for the given relations."""
        return [info for _, info in self._lookup(relation_ids)]

    def lookup_cities(self, relation_ids: list[ElementId], match: NominatimMatch) -> list[RelationInfo]:
        """
        Look up place details for the relations that Nominatim considers cities.

        With the best match mode, at most the single most important city is returned.
        """
        infos = [
            info
            for entry, info in self._lookup(relation_ids)
            if (entry.get('addresstype') or entry.get('type')) in _CITY_TYPES
        ]
        if match == NominatimMatch.best and infos:
            return [max(infos, key=lambda info: info.importance)]
        return infos

    def _lookup(self, relation_ids: list[ElementId]) -> list[tuple[NominatimPlace, RelationInfo]]:
        result: list[tuple[NominatimPlace, RelationInfo]] = []
        for batch in chunked(relation_ids, NOMINATIM_LOOKUP_BATCH_SIZE):
            path = '/lookup?' + urlencode({
                'osm_ids': ','.join(f'R{relation_id}' for relation_id in batch),
                'format': 'jsonv2',
                'addressdetails': 1,
                'accept-language': NOMINATIM_LOOKUP_LANGUAGE,
            })
            logging.debug('Querying Nominatim lookup for %d relations', len(batch))
            try:
                r = self._http.get(self._url + path)
                r.raise_for_status()
                entries = orjson.loads(r.content)
            except (HTTPError, orjson.JSONDecodeError):
                logging.warning('Nominatim lookup failed', exc_info=True)
                continue
            if not isinstance(entries, list):
                logging.warning('Nominatim lookup returned unexpected %s', type(entries).__name__)
                continue
            for entry in entries:
                # some results are abstract and have no osm_type/osm_id
                if (
                    not isinstance(entry, dict)
                    or entry.get('osm_type') != 'relation'
                    or entry.get('osm_id') is None
                ):
                    continue
                info = _relation_info(entry)
                if info is None:
                    logging.warning('Skipping Nominatim entry without a valid position: %r', entry)
                    continue
                result.append((entry, info))
        return result


def _relation_info(entry: NominatimPlace) -> RelationInfo | None:
    try:
        lon = float(entry['lon'])
        lat = float(entry['lat'])
    except (KeyError, TypeError, ValueError):
        return None

    name = entry.get('name') or (entry.get('display_name') or '').split(',', 1)[0].strip()
    address = entry.get('address') or {}
    return RelationInfo(
        osm_id=ElementId(entry['osm_id']),  # pyright: ignore[reportTypedDictNotRequiredAccess]
        name=name,
        country=address.get('country', ''),
        point=Point(lon, lat),
        importance=entry.get('importance') or 0,
    )
