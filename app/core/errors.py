from __future__ import annotations


class SkycastError(Exception):
    """Base error; ``message`` is safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProviderError(SkycastError):
    pass


class ProviderNotConfigured(ProviderError):
    pass


class ProviderUnavailable(ProviderError):
    pass


class ProviderStatusError(ProviderError):
    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderPayloadError(ProviderError):
    pass


class LocationError(SkycastError):
    pass


class LocationPermissionDenied(LocationError):
    pass


class LocationUnavailable(LocationError):
    pass


class SelectionError(SkycastError):
    pass
