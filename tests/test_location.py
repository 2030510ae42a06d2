import pytest

from app.core.errors import LocationPermissionDenied, LocationUnavailable
from app.schemas.weather import Coordinates
from app.services.location import ReportedLocationService, resolve_device_location, resolve_place


class _CountingService:
    def __init__(self, granted: bool, fail: bool = False):
        self.granted = granted
        self.fail = fail
        self.permission_requests = 0
        self.position_reads = 0

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    async def current_position(self) -> Coordinates:
        self.position_reads += 1
        if self.fail:
            raise OSError("gps timeout")
        return Coordinates(latitude=41.0, longitude=29.0)


@pytest.mark.asyncio
async def test_denied_permission_stops_before_reading_position():
    service = _CountingService(granted=False)

    with pytest.raises(LocationPermissionDenied) as exc_info:
        await resolve_device_location(service)

    assert exc_info.value.message == "Permission to access location was denied"
    assert service.permission_requests == 1
    assert service.position_reads == 0


@pytest.mark.asyncio
async def test_granted_permission_reads_one_position():
    service = _CountingService(granted=True)

    coords = await resolve_device_location(service)

    assert coords == Coordinates(latitude=41.0, longitude=29.0)
    assert service.position_reads == 1


@pytest.mark.asyncio
async def test_position_failure_is_location_unavailable():
    with pytest.raises(LocationUnavailable):
        await resolve_device_location(_CountingService(granted=True, fail=True))
    with pytest.raises(LocationUnavailable):
        await resolve_device_location(ReportedLocationService(permission_granted=True))


def test_resolve_place_strips_and_rejects_blank():
    assert resolve_place("  Izmir ").name == "Izmir"
    assert resolve_place("Izmir").to_params() == {"q": "Izmir"}
    with pytest.raises(ValueError):
        resolve_place("   ")
