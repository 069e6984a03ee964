from datetime import date
from typing import NamedTuple

DateRange = tuple[date, date]
"""Inclusive (start, end) pair with start <= end."""


class WeatherInfo(NamedTuple):
    day: date
    temperature_max: float
    temperature_min: float
    temperature_average: float
