"""Rider location collaborators."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pywassel.models.geo import GeoPoint


@runtime_checkable
class LocationProvider(Protocol):
    """Best-effort source of the rider's current device position."""

    def current_position(self) -> GeoPoint | None:
        """Return the latest known position, or ``None`` when unknown."""
        ...


class StaticLocationProvider:
    """Location provider holding a single position that callers update.

    Useful when a geolocation watcher pushes fixes into the library:
    call :meth:`set_position` on every fix and :meth:`clear` when
    permission is revoked.
    """

    def __init__(self, position: GeoPoint | dict[str, Any] | None = None) -> None:
        self._position: GeoPoint | None = None
        self.set_position(position)

    def set_position(self, position: GeoPoint | dict[str, Any] | None) -> None:
        if position is None or isinstance(position, GeoPoint):
            self._position = position
        else:
            self._position = GeoPoint.model_validate(position)

    def clear(self) -> None:
        self._position = None

    def current_position(self) -> GeoPoint | None:
        return self._position
