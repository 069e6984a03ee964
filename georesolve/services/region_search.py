import logging

from georesolve.lib.geo_utils import is_valid_bounding_box
from georesolve.lib.overpass_request import regions_request
from georesolve.lib.overpass_response import extract_relation_ids
from georesolve.models.bounding_box import BoundingBox
from georesolve.models.place import Place, place_from_relation_info
from georesolve.models.region_preferences import RegionPreferences
from georesolve.models.types import ElementId
from georesolve.queries.nominatim_query import NominatimQuery
from georesolve.queries.overpass_query import OverpassQuery


class RegionSearch:
    """
    Incremental region discovery over a sequence of bounding boxes.

    A region usually spans several bounding boxes of a scan, so regions returned
    by earlier calls are not returned again. The session is not thread-safe,
    use one session per scan.
    """

    __slots__ = ('_nominatim', '_overpass', '_processed')

    def __init__(self, overpass: OverpassQuery, nominatim: NominatimQuery) -> None:
        self._overpass = overpass
        self._nominatim = nominatim
        self._processed: set[ElementId] = set()

    @property
    def processed(self) -> frozenset[ElementId]:
        """Relation ids already returned by this session."""
        return frozenset(self._processed)

    def advance(self, bbox: BoundingBox, prefs: RegionPreferences) -> list[Place]:
        """Find regions within the bounding box which were not returned before."""
        if not is_valid_bounding_box(bbox):
            logging.error('Too big bounding box %r passed into region search', bbox)
            return []

        request = regions_request(bbox, prefs)
        if not request:
            logging.debug('No region features requested, skipping query')
            return []

        relation_ids = extract_relation_ids(self._overpass.post(request))
        if not relation_ids:
            logging.debug('No regions found in %r', bbox)
            return []

        candidate_ids = sorted(set(relation_ids))
        new_ids = [relation_id for relation_id in candidate_ids if relation_id not in self._processed]
        if len(new_ids) != len(candidate_ids):
            logging.debug('Filtered out %d already processed relation ids', len(candidate_ids) - len(new_ids))
        if not new_ids:
            return []

        infos = self._nominatim.lookup_regions(new_ids)
        if not infos:
            # ids are not marked as processed, a later call may retry them
            logging.error('Cannot find regions in Nominatim (checked %d relation ids)', len(new_ids))
            return []

        logging.info('Found %d regions in Nominatim (checked %d relation ids)', len(infos), len(new_ids))
        self._processed.update(new_ids)
        return [place_from_relation_info(info) for info in infos]
