from dataclasses import dataclass

from georesolve.models.types import Latitude, Longitude


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """
    Geographic bounding box stored as (south, north, west, east).

    A box with west > east crosses the antimeridian.
    """

    south: Latitude
    north: Latitude
    west: Longitude
    east: Longitude

    def __post_init__(self) -> None:
        if self.south > self.north:
            raise ValueError(f'South {self.south!r} must not be above north {self.north!r}')

    @property
    def overpass_bbox(self) -> str:
        """
        Format the box in Overpass QL axis order (south, west, north, east).

        >>> BoundingBox(1, 2, 3, 4).overpass_bbox
        '1.0000000,3.0000000,2.0000000,4.0000000'
        """
        return f'{self.south:.7f},{self.west:.7f},{self.north:.7f},{self.east:.7f}'
