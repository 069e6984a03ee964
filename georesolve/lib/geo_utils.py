import cython

from georesolve.config import BOUNDING_BOX_MAX_DIMENSION_KM
from georesolve.models.bounding_box import BoundingBox

if cython.compiled:
    from cython.cimports.libc.math import cos, fabs
else:
    from math import cos, fabs


@cython.cfunc
def _radians(degrees: cython.double) -> cython.double:
    return degrees * 0.017453292519943295  # pi / 180


def degrees_to_meters(degrees: float) -> float:
    """Convert a distance in degrees to meters."""
    return degrees * (6371000 / 57.29577951308232)  # R / (180 / pi)


def bounding_box_dimensions_km(bbox: BoundingBox) -> tuple[float, float]:
    """
    Calculate the (width, height) of a bounding box in kilometers.

    The width is measured along the parallel closest to the equator, where the box is widest.

    >>> [round(v, 3) for v in bounding_box_dimensions_km(BoundingBox(0, 1, 0, 1))]
    [111.195, 111.195]
    """
    south: cython.double = bbox.south
    north: cython.double = bbox.north
    width_degrees: cython.double = bbox.east - bbox.west
    if width_degrees < 0:
        # antimeridian crossing
        width_degrees += 360

    widest_lat: cython.double = 0 if south <= 0 <= north else min(fabs(south), fabs(north))
    width_km = degrees_to_meters(width_degrees) * cos(_radians(widest_lat)) / 1000
    height_km = degrees_to_meters(north - south) / 1000
    return width_km, height_km


def is_valid_bounding_box(bbox: BoundingBox, max_dimension_km: float = BOUNDING_BOX_MAX_DIMENSION_KM) -> bool:
    """Check that both bounding box dimensions are below the limit."""
    width_km, height_km = bounding_box_dimensions_km(bbox)
    return width_km < max_dimension_km and height_km < max_dimension_km
