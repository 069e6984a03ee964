import httpx
import orjson
import pytest
from shapely import Point

from georesolve.models.nominatim import NominatimMatch
from georesolve.queries import nominatim_query
from georesolve.queries.nominatim_query import NominatimQuery


def _place(osm_id: int, name: str, addresstype: str, importance: float, **extra) -> dict:
    return {
        'place_id': osm_id * 10,
        'osm_type': 'relation',
        'osm_id': osm_id,
        'lat': '48.8566',
        'lon': '2.3522',
        'name': name,
        'display_name': f'{name}, France',
        'category': 'boundary',
        'type': 'administrative',
        'addresstype': addresstype,
        'place_rank': 12,
        'importance': importance,
        'address': {'country': 'France', 'country_code': 'fr'},
        **extra,
    }


_ENTRIES = [
    _place(71525, 'Paris', 'city', 0.88),
    _place(8649, 'Ile-de-France', 'state', 0.75),
    _place(7444, 'Paris', 'town', 0.3),
    {'place_id': 1, 'lat': '0', 'lon': '0', 'display_name': 'Abstract', 'type': 'city'},
    {**_place(5, 'Way', 'city', 1.0), 'osm_type': 'way'},
]


@pytest.fixture
def nominatim(mock_http):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=orjson.dumps(_ENTRIES))

    query = NominatimQuery(mock_http(handler), 'https://nominatim.test')
    query.requests = requests  # type: ignore[attr-defined]
    return query


def test_lookup_regions(nominatim):
    infos = nominatim.lookup_regions([71525, 8649, 7444])
    assert [info.osm_id for info in infos] == [71525, 8649, 7444]
    assert infos[1].name == 'Ile-de-France'
    assert infos[1].country == 'France'
    assert infos[1].point.equals(Point(2.3522, 48.8566))

    request: httpx.Request = nominatim.requests[0]
    assert request.url.path == '/lookup'
    assert request.url.params['osm_ids'] == 'R71525,R8649,R7444'
    assert request.url.params['format'] == 'jsonv2'


def test_lookup_cities_any(nominatim):
    infos = nominatim.lookup_cities([71525, 8649, 7444], NominatimMatch.any)
    assert [info.osm_id for info in infos] == [71525, 7444], 'Only city-like places must be returned'


def test_lookup_cities_best(nominatim):
    infos = nominatim.lookup_cities([7444, 8649, 71525], NominatimMatch.best)
    assert [info.osm_id for info in infos] == [71525]


def test_lookup_batches(mock_http, monkeypatch):
    monkeypatch.setattr(nominatim_query, 'NOMINATIM_LOOKUP_BATCH_SIZE', 2)
    batches: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        batches.append(request.url.params['osm_ids'])
        return httpx.Response(200, content=b'[]')

    assert NominatimQuery(mock_http(handler)).lookup_regions([1, 2, 3, 4, 5]) == []
    assert batches == ['R1,R2', 'R3,R4', 'R5']


def test_lookup_name_fallback(mock_http):
    entry = _place(42, 'Lyon', 'city', 0.5)
    del entry['name']
    del entry['address']

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=orjson.dumps([entry]))

    (info,) = NominatimQuery(mock_http(handler)).lookup_regions([42])
    assert info.name == 'Lyon'
    assert info.country == ''


def test_lookup_skips_malformed_entries(mock_http):
    no_position = _place(1, 'Nowhere', 'city', 0.9)
    del no_position['lat']
    del no_position['lon']
    entries = [
        no_position,
        _place(2, 'Bad Lat', 'city', 0.9, lat='north'),
        _place(3, 'Null Lon', 'city', 0.9, lon=None),
        _place(4, 'Lyon', 'city', importance=None, address=None),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=orjson.dumps(entries))

    query = NominatimQuery(mock_http(handler))
    (info,) = query.lookup_regions([1, 2, 3, 4])
    assert info.osm_id == 4
    assert info.country == ''
    assert info.importance == 0
    assert [info.osm_id for info in query.lookup_cities([1, 2, 3, 4], NominatimMatch.best)] == [4]


@pytest.mark.parametrize(
    ('status_code', 'content'),
    [
        (500, b''),
        (200, b'<html></html>'),
        (200, b'{"error": "bad request"}'),
    ],
)
def test_lookup_failure(mock_http, status_code, content):
    query = NominatimQuery(mock_http(lambda _: httpx.Response(status_code, content=content)))
    assert query.lookup_regions([1]) == []
    assert query.lookup_cities([1], NominatimMatch.any) == []
