# src/tunebridge/core/errors.py


class TunebridgeError(Exception):
    """Base application error for tunebridge.

    Use this for predictable, user-facing error messages that should be
    caught by the CLI or the plugin facade and displayed nicely.
    """

    pass


class BackendNotInstalled(TunebridgeError):
    """The backend launch artifact is missing (or no backend path is configured)."""


class BackendUnreachable(TunebridgeError):
    """The backend was launched or already running, but the liveness probe failed."""


class RequestFailed(TunebridgeError):
    """Network-level failure or an empty body from a catalog call."""


class MalformedResult(TunebridgeError):
    """A response body arrived but a required field is absent."""


class StreamUnavailable(MalformedResult):
    """No stream URL could be resolved; the message carries the backend's detail."""


class NotAuthenticated(TunebridgeError):
    """The backend reports no signed-in account. Public catalog browsing still works."""
