"""Error taxonomy for AR scaling requests.

Every error carries the HTTP status the endpoint answers with, so routers
can translate without inspecting messages.
"""


class ARScalingError(Exception):
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ARScalingError):
    """Missing or malformed request parameters. No fetch is attempted."""

    http_status = 400


class ForbiddenSourceError(ARScalingError):
    """The source URL points outside the allowed archive domains."""

    http_status = 403


class DownloadError(ARScalingError):
    """The source asset could not be fetched. Possibly transient."""

    http_status = 502

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ARScalingError):
    """The fetched bytes are not a valid GLB asset."""

    http_status = 422


class NoSceneError(ARScalingError):
    """The asset decoded but declares no scene."""

    http_status = 422


class InternalError(ARScalingError):
    http_status = 500
