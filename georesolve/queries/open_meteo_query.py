import logging
from datetime import date
from urllib.parse import urlencode

import orjson
from httpx import Client, HTTPError
from shapely import Point, get_coordinates

from georesolve.config import OPEN_METEO_ARCHIVE_URL
from georesolve.lib.date_utils import format_iso_date
from georesolve.models.weather import DateRange, WeatherInfo
from georesolve.utils import HTTP

# https://open-meteo.com/en/docs/historical-weather-api


class OpenMeteoQuery:
    def __init__(self, http: Client = HTTP, url: str = OPEN_METEO_ARCHIVE_URL) -> None:
        self._http = http
        self._url = url

    def historical_weather(self, point: Point, date_range: DateRange) -> list[WeatherInfo]:
        """Load daily temperatures at a point for an inclusive date range."""
        x, y = get_coordinates(point)[0].tolist()
        start, end = date_range
        path = '?' + urlencode({
            'latitude': f'{y:.5f}',
            'longitude': f'{x:.5f}',
            'start_date': format_iso_date(start),
            'end_date': format_iso_date(end),
            'daily': 'temperature_2m_max,temperature_2m_min',
        })
        logging.debug('Querying Open-Meteo archive with %r', path)
        try:
            r = self._http.get(self._url + path)
            r.raise_for_status()
        except HTTPError:
            logging.warning('Open-Meteo request failed', exc_info=True)
            return []
        return parse_weather_response(r.content)


def parse_weather_response(content: bytes | str) -> list[WeatherInfo]:
    """Parse daily temperatures from an Open-Meteo response."""
    try:
        daily = orjson.loads(content)['daily']
        days: list[str] = daily['time']
        temperatures_max: list[float | None] = daily['temperature_2m_max']
        temperatures_min: list[float | None] = daily['temperature_2m_min']
    except (orjson.JSONDecodeError, KeyError, TypeError):
        logging.error('Historical weather response is malformed')
        return []

    if not len(days) == len(temperatures_max) == len(temperatures_min):
        logging.error('Historical weather response is malformed')
        return []

    result: list[WeatherInfo] = []
    for day, t_max, t_min in zip(days, temperatures_max, temperatures_min, strict=True):
        # missing measurements are reported as null
        if t_max is None or t_min is None:
            continue
        result.append(
            WeatherInfo(
                day=date.fromisoformat(day),
                temperature_max=t_max,
                temperature_min=t_min,
                temperature_average=(t_max + t_min) / 2,
            )
        )
    return result
