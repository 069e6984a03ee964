import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import timedelta
from math import isfinite
from typing import NamedTuple

from georesolve.config import OVERPASS_REGIONS_TIMEOUT, REGION_ADMIN_LEVEL
from georesolve.models.bounding_box import BoundingBox
from georesolve.models.region_preferences import (
    MIN_PEAK_HEIGHT_PROPERTY,
    GeographicalFeature,
    RegionPreferences,
)

# Overpass QL Documentation:
# https://wiki.openstreetmap.org/wiki/Overpass_API/Overpass_QL

# Definitions below that produce ways or relations before recursing down
# save them into named sets so the default set stays clean.


def _airports_nodes(bbox: str, properties: Mapping[str, str]) -> str:
    return (
        '('
        f'nwr["aeroway"="aerodrome"]["aerodrome:type"="international"]({bbox});'
        f'nwr["aerodrome"="international"]({bbox});'
        ')->.outA;'
        '(.outA;.outA >;)->.outA;'  # add members (ways and nodes)
        'node.outA'
    )


def _peaks_nodes(bbox: str, properties: Mapping[str, str]) -> str | None:
    height = parse_min_peak_height(properties)
    if height is None:
        return None
    return f'node[natural=peak][name]({bbox})(if:is_number(t["ele"])&&number(t["ele"])>{height:.10g})'


def _sea_beaches_nodes(bbox: str, properties: Mapping[str, str]) -> str:
    return (
        f'way[natural=coastline]({bbox})->.coastlinesS;'  #
        'node(around.coastlinesS:100)[natural=beach]'
    )


def _salt_lakes_nodes(bbox: str, properties: Mapping[str, str]) -> str:
    # select only nodes inside the bounding box,
    # large lakes may contain nodes from other regions or countries
    return (
        f'wr[natural=water][water=lake][salt=yes][name]({bbox})->.outL;'
        '.outL >->.outL;'
        f'node.outL({bbox})'
    )


class _FeatureDef(NamedTuple):
    suffix: str
    nodes: Callable[[str, Mapping[str, str]], str | None]


_FEATURE_DEFS: dict[GeographicalFeature, _FeatureDef] = {
    GeographicalFeature.international_airports: _FeatureDef('A', _airports_nodes),
    GeographicalFeature.peaks: _FeatureDef('P', _peaks_nodes),
    GeographicalFeature.sea_beaches: _FeatureDef('S', _sea_beaches_nodes),
    GeographicalFeature.salt_lakes: _FeatureDef('L', _salt_lakes_nodes),
}


def parse_min_peak_height(properties: Mapping[str, str]) -> float | None:
    """
    Parse the minimum peak height in meters.

    Returns None when the property is missing or not a finite number.

    >>> parse_min_peak_height({'minPeakHeight': '1500'})
    1500.0
    >>> parse_min_peak_height({'minPeakHeight': 'high'}) is None
    True
    """
    value = properties.get(MIN_PEAK_HEIGHT_PROPERTY)
    if value is None:
        return None
    try:
        height = float(value)
    except (TypeError, ValueError):
        logging.debug('Ignoring non-numeric %s %r', MIN_PEAK_HEIGHT_PROPERTY, value)
        return None
    return height if isfinite(height) else None


def quote_string(value: str) -> str:
    r"""
    Quote a string literal for Overpass QL.

    >>> quote_string('Saint "Petersburg"')
    '"Saint \\"Petersburg\\""'
    """
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


class OverpassRequest:
    """
    Accumulates per-feature sub-queries of a region request.

    Each sub-query saves its relations into a named set,
    and the request answers with the intersection of all contributed sets.
    """

    __slots__ = ('_admin_level', '_fragments', '_timeout')

    def __init__(
        self,
        *,
        timeout: timedelta = OVERPASS_REGIONS_TIMEOUT,
        admin_level: int = REGION_ADMIN_LEVEL,
    ) -> None:
        self._timeout = timeout
        self._admin_level = admin_level
        self._fragments: list[tuple[str, str]] = []

    @property
    def fragments(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._fragments)

    def add_relations_by_nodes(self, suffix: str, nodes: str) -> None:
        """Add a sub-query selecting regions that contain the given nodes."""
        if any(s == suffix for s, _ in self._fragments):
            raise ValueError(f'Named set suffix {suffix!r} is already used')
        fragment = (
            f'{nodes}->.nodes{suffix};'  # save candidate nodes into a named set
            f'.nodes{suffix} is_in->.areas{suffix};'  # areas containing those nodes
            # relations which define the outlines of those areas
            f'rel(pivot.areas{suffix})[boundary=administrative][admin_level={self._admin_level}]->.rel{suffix};'
        )
        self._fragments.append((suffix, fragment))

    def build(self) -> str:
        return render_request(self._fragments, timeout=self._timeout)


def render_request(fragments: Sequence[tuple[str, str]], *, timeout: timedelta) -> str:
    """
    Render named sub-query fragments into the final request text.

    Returns an empty string when there are no fragments.
    """
    if not fragments:
        return ''
    header = f'[out:json][timeout:{int(timeout.total_seconds())}];'
    body = ''.join(fragment for _, fragment in fragments)
    intersection = 'rel' + ''.join(f'.rel{suffix}' for suffix, _ in fragments)
    return f'{header}{body}{intersection};out tags;'


def regions_request(
    bbox: BoundingBox,
    prefs: RegionPreferences,
    *,
    timeout: timedelta = OVERPASS_REGIONS_TIMEOUT,
    admin_level: int = REGION_ADMIN_LEVEL,
) -> str:
    """
    Build a request for regions that contain every enabled feature within the bounding box.

    Returns an empty string when no feature contributes a sub-query.
    """
    request = OverpassRequest(timeout=timeout, admin_level=admin_level)
    overpass_bbox = bbox.overpass_bbox

    for feature in prefs.enabled_features():
        feature_def = _FEATURE_DEFS[feature]
        nodes = feature_def.nodes(overpass_bbox, prefs.properties)
        if nodes is None:
            logging.debug('Feature %s has no usable parameters, skipping', feature)
            continue
        request.add_relations_by_nodes(feature_def.suffix, nodes)

    return request.build()
