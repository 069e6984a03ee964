from datetime import date

import orjson
from shapely import Point

from georesolve.models.bounding_box import BoundingBox
from georesolve.models.region_preferences import GeographicalFeature, RegionPreferences
from georesolve.models.weather import DateRange, WeatherInfo
from georesolve.services.region_search import RegionSearch
from georesolve.services.search_service import SearchService
from tests.utils.fakes import FakeNominatim, FakeOverpass, overpass_body

_TOURISM = orjson.dumps({
    'elements': [
        {
            'type': 'node',
            'id': 10,
            'lat': 48.8606,
            'lon': 2.3376,
            'tags': {'tourism': 'museum', 'name': 'Musée du Louvre', 'name:en': 'Louvre Museum', 'wikidata': 'Q19675'},
        },
        {'type': 'node', 'id': 11, 'lat': 48.85, 'lon': 2.35, 'tags': {'tourism': 'hotel'}},
        {'type': 'node', 'id': 12, 'lat': 48.85, 'lon': 2.35, 'tags': {'amenity': 'cafe'}},
    ]
})


class _FakeOpenMeteo:
    def __init__(self) -> None:
        self.ranges: list[DateRange] = []

    def historical_weather(self, point: Point, date_range: DateRange) -> list[WeatherInfo]:
        self.ranges.append(date_range)
        return [WeatherInfo(date_range[0], 20.0, 10.0, 15.0)]


def test_find_cities_by_name():
    overpass = FakeOverpass(overpass_body(71525, 7444))
    nominatim = FakeNominatim({71525, 7444}, cities={71525})
    service = SearchService(overpass, nominatim)  # type: ignore[arg-type]

    places = service.find_cities_by_name('Paris')
    assert [p.osm_id for p in places] == [71525]
    assert places[0].name == 'Place 71525'
    assert places[0].country == 'Testland'
    assert places[0].features == []
    assert nominatim.calls == [[71525, 7444]]
    assert '"name"="Paris"' in overpass.queries[0]


def test_find_cities_by_name_no_relations():
    nominatim = FakeNominatim({1})
    service = SearchService(FakeOverpass(overpass_body()), nominatim)  # type: ignore[arg-type]
    assert service.find_cities_by_name('Atlantis') == []
    assert nominatim.calls == [], 'Place lookup must not be called without candidates'


def test_find_cities_by_name_no_cities():
    service = SearchService(FakeOverpass(overpass_body(1, 2)), FakeNominatim({1, 2}, cities=set()))  # type: ignore[arg-type]
    assert service.find_cities_by_name('Nowhere') == []


def test_find_cities_by_position_best_match():
    overpass = FakeOverpass(overpass_body(8649, 71525))
    nominatim = FakeNominatim({8649, 71525})
    service = SearchService(overpass, nominatim)  # type: ignore[arg-type]

    places = service.find_cities_by_position(Point(2.3522, 48.8566))
    assert len(places) == 1
    assert 'is_in(48.8566000,2.3522000)' in overpass.queries[0]


def test_find_cities_with_details():
    overpass = FakeOverpass(overpass_body(71525), tourism=_TOURISM)
    service = SearchService(overpass, FakeNominatim({71525}))  # type: ignore[arg-type]

    (place,) = service.find_cities_by_name('Paris', include_details=True)
    assert [f.tags for f in place.features] == [
        {'tourism': 'museum', 'name': 'Musée du Louvre', 'name:en': 'Louvre Museum'},
        {'tourism': 'hotel'},
    ]
    assert place.features[0].point.equals(Point(2.3376, 48.8606))
    assert 'rel(71525);' in overpass.queries[-1]


def test_start_find_regions():
    overpass = FakeOverpass(overpass_body(1, 2))
    service = SearchService(overpass, FakeNominatim({1, 2}))  # type: ignore[arg-type]
    session = service.start_find_regions()
    assert isinstance(session, RegionSearch)
    assert service.start_find_regions() is not session

    prefs = RegionPreferences(features=frozenset({GeographicalFeature.international_airports}))
    places = session.advance(BoundingBox(south=43, north=44, west=5, east=6), prefs)
    assert [p.osm_id for p in places] == [1, 2]


def test_get_weather():
    open_meteo = _FakeOpenMeteo()
    service = SearchService(FakeOverpass(), FakeNominatim(set()), open_meteo)  # type: ignore[arg-type]

    weather = service.get_weather(
        Point(2.35, 48.86),
        (date(2024, 6, 1), date(2024, 6, 10)),
        num_years=2,
        now=date(2024, 6, 5),
    )
    assert open_meteo.ranges == [
        (date(2023, 6, 1), date(2023, 6, 10)),
        (date(2022, 6, 1), date(2022, 6, 10)),
    ]
    assert [w.day for w in weather] == [date(2023, 6, 1), date(2022, 6, 1)]



def test_get_weather_inverted_range():
    open_meteo = _FakeOpenMeteo()
    service = SearchService(FakeOverpass(), FakeNominatim(set()), open_meteo)  # type: ignore[arg-type]

    weather = service.get_weather(Point(2.35, 48.86), (date(2024, 6, 10), date(2024, 6, 1)), now=date(2024, 6, 5))
    assert weather == []
    assert open_meteo.ranges == []

def test_match_modes():
    overpass = FakeOverpass(overpass_body(1, 2), overpass_body(1, 2))
    nominatim = FakeNominatim({1, 2})
    service = SearchService(overpass, nominatim)  # type: ignore[arg-type]
    assert len(service.find_cities_by_name('Twin')) == 2
    assert len(service.find_cities_by_position(Point(0, 0))) == 1
