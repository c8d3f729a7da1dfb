"""Tests for feed entry parsing into Vehicle."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyflexnotify.models.route import WalkingRoute
from pyflexnotify.models.vehicle import RankedVehicle, Vehicle

_FEED_ENTRY = {
    "CarId": 18231,
    "CarBrand": "Toyota",
    "CarModel": "Corolla",
    "CarPlate": "FXM1234",
    "CarColor": "Grey",
    "Latitude": 45.5231,
    "Longitude": -73.5817,
    "CarVehiculeType": 1,
}


class TestVehicle:
    def test_maps_feed_field_names(self) -> None:
        vehicle = Vehicle.model_validate(_FEED_ENTRY)
        assert vehicle.brand == "Toyota"
        assert vehicle.model == "Corolla"
        assert vehicle.plate == "FXM1234"
        assert vehicle.color == "Grey"
        assert vehicle.latitude == pytest.approx(45.5231)
        assert vehicle.longitude == pytest.approx(-73.5817)
        assert vehicle.car_id == 18231
        assert vehicle.label == "Toyota Corolla"

    def test_raw_keeps_unmapped_fields(self) -> None:
        vehicle = Vehicle.model_validate(_FEED_ENTRY)
        assert vehicle.raw["CarVehiculeType"] == 1

    def test_snake_case_names_accepted(self) -> None:
        vehicle = Vehicle(brand="Kia", model="Niro", plate="ABC", color="Blue", latitude=45.0, longitude=-73.0)
        assert vehicle.label == "Kia Niro"
        assert vehicle.car_id is None

    def test_numeric_strings_are_coerced(self) -> None:
        vehicle = Vehicle.model_validate({**_FEED_ENTRY, "Latitude": "45.5", "Longitude": "-73.6"})
        assert vehicle.latitude == 45.5
        assert vehicle.longitude == -73.6

    @pytest.mark.parametrize("bad", [None, "", "--", "nan", "abc"])
    def test_missing_coordinates_rejected(self, bad: object) -> None:
        with pytest.raises(ValidationError):
            Vehicle.model_validate({**_FEED_ENTRY, "Latitude": bad})

    def test_frozen(self) -> None:
        vehicle = Vehicle.model_validate(_FEED_ENTRY)
        with pytest.raises(ValidationError):
            vehicle.plate = "OTHER"  # type: ignore[misc]

    def test_ranked_vehicle_delegates(self) -> None:
        ranked = RankedVehicle(vehicle=Vehicle.model_validate(_FEED_ENTRY), distance=120.5)
        assert ranked.plate == "FXM1234"
        assert ranked.label == "Toyota Corolla"


def test_walking_route_minutes() -> None:
    route = WalkingRoute(distance=850.0, duration=600.0)
    assert route.minutes == 10
