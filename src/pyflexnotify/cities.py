"""Branch identifiers, city bounds and booking URLs."""

from __future__ import annotations

from dataclasses import dataclass

from pyflexnotify.exceptions import FlexValidationError

BRANCH_IDS: dict[str, int] = {
    "montreal": 1,
    "quebec": 2,
    "toronto": 3,
}


@dataclass(frozen=True)
class CityBounds:
    """Axis-aligned bounding box of a branch's service area."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


CITY_BOUNDS: dict[str, CityBounds] = {
    "montreal": CityBounds(min_lat=45.38, max_lat=45.73, min_lng=-74.05, max_lng=-73.47),
    "quebec": CityBounds(min_lat=46.70, max_lat=47.02, min_lng=-71.58, max_lng=-71.10),
    "toronto": CityBounds(min_lat=43.57, max_lat=43.88, min_lng=-79.68, max_lng=-79.10),
}


def normalize_city(city: str) -> str:
    """Return the canonical city key, raising for unknown cities."""
    key = str(city).strip().lower()
    if key not in BRANCH_IDS:
        raise FlexValidationError(f"Unknown city {city!r}; expected one of {sorted(BRANCH_IDS)}")
    return key


def branch_id_for(city: str) -> int:
    """Map a city name to the feed's branch identifier."""
    return BRANCH_IDS[normalize_city(city)]


def detect_city(lat: float, lng: float) -> str | None:
    """Return the city whose service area contains the point, if any."""
    for city, bounds in CITY_BOUNDS.items():
        if bounds.contains(lat, lng):
            return city
    return None


def booking_url(city: str) -> str:
    """Booking page for a city. Toronto books through the Ontario site."""
    region = "ontario" if branch_id_for(city) == BRANCH_IDS["toronto"] else "quebec"
    return f"https://{region}.client.reservauto.net/bookCar"
