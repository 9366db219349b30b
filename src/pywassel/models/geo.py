"""Geographic position model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pywassel._normalize import safe_float


class GeoPoint(BaseModel):
    """A latitude/longitude pair.

    Accepts ``lat``/``lng``/``lon`` and the device geolocation shape
    ``{"coords": {"latitude": ..., "longitude": ...}}``. Dumps as
    ``{"lat": ..., "lng": ...}`` when serialised by alias.

    Parameters
    ----------
    latitude : float
        Latitude in degrees, -90 to 90.
    longitude : float
        Longitude in degrees, -180 to 180.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(
        validation_alias=AliasChoices("latitude", "lat"),
        serialization_alias="lat",
        ge=-90.0,
        le=90.0,
    )
    longitude: float = Field(
        validation_alias=AliasChoices("longitude", "lng", "lon"),
        serialization_alias="lng",
        ge=-180.0,
        le=180.0,
    )

    @model_validator(mode="before")
    @classmethod
    def _unwrap_coords(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        nested = values.get("coords")
        if isinstance(nested, dict):
            return nested
        return values

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> Any:
        parsed = safe_float(value)
        # Leave unparseable input for pydantic to reject.
        return value if parsed is None else parsed

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)
