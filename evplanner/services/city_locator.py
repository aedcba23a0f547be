import re

import pgeocode

from evplanner.domain.types import Coordinate

PLACE_NORMALIZE_RE = re.compile(r"[^a-z0-9 ]+")
WHITESPACE_RE = re.compile(r"\s+")
PLACE_SUFFIXES = (" city", " town", " district")


class CityLocator:
    """Offline place-name lookup backed by the pgeocode postal dataset."""

    def __init__(self, country: str):
        nominatim = pgeocode.Nominatim(country)
        raw = nominatim._data[["place_name", "state_name", "latitude", "longitude"]].dropna()

        self._place_index: dict[str, list[tuple[str, Coordinate]]] = {}
        for row in raw.itertuples(index=False):
            place = self._normalize(str(row.place_name))
            region = self._normalize(str(row.state_name))
            if not place:
                continue

            coord = Coordinate(latitude=float(row.latitude), longitude=float(row.longitude))
            self._place_index.setdefault(place, []).append((region, coord))

    @staticmethod
    def _normalize(value: str) -> str:
        cleaned = PLACE_NORMALIZE_RE.sub(" ", value.lower())
        cleaned = WHITESPACE_RE.sub(" ", cleaned).strip()
        return cleaned

    @staticmethod
    def _place_variants(normalized_place: str) -> list[str]:
        variants = [normalized_place]
        for suffix in PLACE_SUFFIXES:
            if normalized_place.endswith(suffix):
                variants.append(normalized_place.removesuffix(suffix))
        # Keep order deterministic while deduplicating.
        return list(dict.fromkeys(variant for variant in variants if variant))

    def lookup(self, place: str, region: str | None = None) -> Coordinate | None:
        normalized_region = self._normalize(region) if region else ""

        for variant in self._place_variants(self._normalize(place)):
            entries = self._place_index.get(variant)
            if not entries:
                continue
            if normalized_region:
                entries = [entry for entry in entries if entry[0] and entry[0] in normalized_region]
            if not entries:
                continue

            mean_lat = sum(coord.latitude for _, coord in entries) / len(entries)
            mean_lon = sum(coord.longitude for _, coord in entries) / len(entries)
            return Coordinate(latitude=mean_lat, longitude=mean_lon)

        return None
