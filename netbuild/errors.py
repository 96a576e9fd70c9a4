"""Error taxonomy shared by the clients, the persistence layer and the session."""


class NetBuildError(Exception):
    """Base class for every error raised by netbuild."""


class TransportError(NetBuildError):
    """A collaborator service could not be reached."""


class ServiceError(NetBuildError):
    """A collaborator answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class FormatError(NetBuildError):
    """A response arrived but its content is unusable."""


class ValidationError(NetBuildError):
    """User input rejected before any network call."""


class BusyError(NetBuildError):
    """A mutating action was attempted while another one is in flight."""


class DeviceNotFoundError(NetBuildError, KeyError):
    """No device with the requested id exists in the live topology."""

    def __init__(self, device_id: int) -> None:
        super().__init__(f"Device not found: {device_id}")
        self.device_id = device_id

    def __str__(self) -> str:
        return self.args[0]
