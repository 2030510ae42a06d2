from __future__ import annotations

import logging
from typing import Protocol

from app.core.errors import LocationPermissionDenied, LocationUnavailable
from app.schemas.weather import Coordinates, PlaceQuery


logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Permission to access location was denied"


class LocationService(Protocol):
    async def request_permission(self) -> bool: ...

    async def current_position(self) -> Coordinates: ...


class ReportedLocationService:
    """Location reported by the client device: its permission answer and GPS fix."""

    def __init__(self, *, permission_granted: bool, coordinates: Coordinates | None = None) -> None:
        self.permission_granted = permission_granted
        self.coordinates = coordinates

    async def request_permission(self) -> bool:
        return self.permission_granted

    async def current_position(self) -> Coordinates:
        if self.coordinates is None:
            raise LocationUnavailable("Current location is unavailable")
        return self.coordinates


async def resolve_device_location(service: LocationService) -> Coordinates:
    if not await service.request_permission():
        logger.info("Location permission denied")
        raise LocationPermissionDenied(PERMISSION_DENIED_MESSAGE)
    try:
        return await service.current_position()
    except LocationUnavailable:
        raise
    except Exception as exc:
        logger.warning("Reading device position failed: %s", type(exc).__name__)
        raise LocationUnavailable("Current location is unavailable") from exc


def resolve_place(name: str) -> PlaceQuery:
    name = (name or "").strip()
    if not name:
        raise ValueError("place name must not be blank")
    return PlaceQuery(name=name)
