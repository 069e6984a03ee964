from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class GeographicalFeature(StrEnum):
    # declaration order is the canonical query order
    international_airports = 'international_airports'
    peaks = 'peaks'
    sea_beaches = 'sea_beaches'
    salt_lakes = 'salt_lakes'


MIN_PEAK_HEIGHT_PROPERTY = 'minPeakHeight'


@dataclass(frozen=True, kw_only=True, slots=True)
class RegionPreferences:
    features: frozenset[GeographicalFeature] = frozenset()
    properties: Mapping[str, str] = field(default_factory=dict)

    def enabled_features(self) -> Iterator[GeographicalFeature]:
        """Iterate over the enabled features in the canonical order."""
        return (feature for feature in GeographicalFeature if feature in self.features)
