import httpx
import pytest
import pytest_asyncio

from app.core.config import get_settings
from app.core.http import set_http_client


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch):
    monkeypatch.setenv("SKYCAST_OPENWEATHERMAP_API_KEY", "test-key")
    monkeypatch.setenv("SKYCAST_DAY_TIMEZONE", "UTC")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def http_client():
    # ASGITransport does not run the app lifespan, so install the shared client here.
    async with httpx.AsyncClient() as client:
        set_http_client(client)
        yield client
    set_http_client(None)
