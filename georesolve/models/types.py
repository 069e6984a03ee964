from typing import Annotated, NewType

from annotated_types import Interval

ElementId = NewType('ElementId', int)
"""Overpass element id, unique only within its element type."""

Longitude = Annotated[float, Interval(ge=-180, le=180)]
Latitude = Annotated[float, Interval(ge=-90, le=90)]
