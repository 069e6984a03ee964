import logging
from datetime import date, datetime

from shapely import Point

from georesolve.config import HISTORICAL_WEATHER_YEARS
from georesolve.lib.date_utils import collect_historical_ranges
from georesolve.models.nominatim import NominatimMatch
from georesolve.models.place import Place, PlaceFeature, place_from_relation_info
from georesolve.models.types import ElementId
from georesolve.models.weather import DateRange, WeatherInfo
from georesolve.queries.nominatim_query import NominatimQuery
from georesolve.queries.open_meteo_query import OpenMeteoQuery
from georesolve.queries.overpass_query import OverpassQuery
from georesolve.services.region_search import RegionSearch

# tags copied from tourism nodes into place features
_FEATURE_NAME_TAGS = ('name', 'name:en')


class SearchService:
    def __init__(
        self,
        overpass: OverpassQuery | None = None,
        nominatim: NominatimQuery | None = None,
        open_meteo: OpenMeteoQuery | None = None,
    ) -> None:
        self._overpass = overpass if overpass is not None else OverpassQuery()
        self._nominatim = nominatim if nominatim is not None else NominatimQuery()
        self._open_meteo = open_meteo if open_meteo is not None else OpenMeteoQuery()

    def find_cities_by_name(self, name: str, *, include_details: bool = False) -> list[Place]:
        """Find cities by the exact name of their administrative boundary."""
        relation_ids = self._overpass.relation_ids_by_name(name)
        return self._find_cities(relation_ids, NominatimMatch.any, include_details=include_details)

    def find_cities_by_position(self, point: Point, *, include_details: bool = False) -> list[Place]:
        """Find the city enclosing a point."""
        relation_ids = self._overpass.relation_ids_by_position(point)
        return self._find_cities(relation_ids, NominatimMatch.best, include_details=include_details)

    def start_find_regions(self) -> RegionSearch:
        """Start a new incremental region search session."""
        return RegionSearch(self._overpass, self._nominatim)

    def get_weather(
        self,
        point: Point,
        date_range: DateRange,
        *,
        num_years: int = HISTORICAL_WEATHER_YEARS,
        now: datetime | date | None = None,
    ) -> list[WeatherInfo]:
        """
        Load the weather at a point for the same calendar period in past years.

        Results of the most recent year come first.
        """
        start, end = date_range
        if start > end:
            logging.error('Invalid weather date range %s..%s', start, end)
            return []

        result: list[WeatherInfo] = []
        for historical_range in collect_historical_ranges(date_range, now, num_years):
            result.extend(self._open_meteo.historical_weather(point, historical_range))
        return result

    def _find_cities(
        self,
        relation_ids: list[ElementId],
        match: NominatimMatch,
        *,
        include_details: bool,
    ) -> list[Place]:
        if not relation_ids:
            logging.error('No cities found in Overpass')
            return []

        # Nominatim returns only the relations it considers cities,
        # there is no way to select them in advance
        infos = self._nominatim.lookup_cities(relation_ids, match)
        if not infos:
            logging.error('Cannot find cities in Nominatim (checked %d relation ids)', len(relation_ids))
            return []

        logging.info('Found %d cities in Nominatim (checked %d relation ids)', len(infos), len(relation_ids))
        result: list[Place] = []
        for info in infos:
            place = place_from_relation_info(info)
            if include_details:
                place.features = self._load_features(info.osm_id)
            result.append(place)
        return result

    def _load_features(self, relation_id: ElementId) -> list[PlaceFeature]:
        features: list[PlaceFeature] = []
        for node in self._overpass.tourism_nodes(relation_id):
            category = node.tags.get('tourism')
            if category is None:
                continue
            tags = {'tourism': category}
            for key in _FEATURE_NAME_TAGS:
                if value := node.tags.get(key):
                    tags[key] = value
            features.append(PlaceFeature(point=node.point, tags=tags))
        return features
