"""Vehicle models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pyflexnotify._normalize import safe_float, safe_str


class Vehicle(BaseModel):
    """One vehicle reported by the availability feed at fetch time.

    Fields are mapped from the ``GetAvailableVehicles`` entries
    (``CarBrand``, ``CarPlate``, ``Latitude``...). Instances are built
    fresh from every snapshot and never mutated.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    brand: str = Field(default="", validation_alias=AliasChoices("CarBrand", "brand"))
    """Manufacturer (e.g. ``"Toyota"``)."""
    model: str = Field(default="", validation_alias=AliasChoices("CarModel", "model"))
    """Model name (e.g. ``"Corolla"``)."""
    plate: str = Field(default="", validation_alias=AliasChoices("CarPlate", "plate"))
    """License plate. Unique among live vehicles, not stable over time."""
    color: str = Field(default="", validation_alias=AliasChoices("CarColor", "color"))
    """Body colour label."""
    latitude: float = Field(validation_alias=AliasChoices("Latitude", "latitude", "lat"))
    """Latitude in degrees."""
    longitude: float = Field(validation_alias=AliasChoices("Longitude", "longitude", "lng"))
    """Longitude in degrees."""
    car_id: int | None = Field(default=None, validation_alias=AliasChoices("CarId", "car_id"))
    """Feed-side vehicle identifier, when present."""

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original feed entry."""

    @property
    def label(self) -> str:
        """``"{brand} {model}"`` as shown in notifications."""
        return f"{self.brand} {self.model}".strip()

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged

    @field_validator("brand", "model", "plate", "color", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return safe_str(value)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("car_id", mode="before")
    @classmethod
    def _coerce_car_id(cls, value: Any) -> int | None:
        parsed = safe_float(value)
        return None if parsed is None else int(parsed)


class RankedVehicle(BaseModel):
    """A vehicle paired with its distance to a reference point.

    The distance is derived at filter time and recomputed every poll.
    """

    model_config = ConfigDict(frozen=True)

    vehicle: Vehicle
    distance: float
    """Great-circle distance in metres."""

    @property
    def plate(self) -> str:
        return self.vehicle.plate

    @property
    def label(self) -> str:
        return self.vehicle.label
