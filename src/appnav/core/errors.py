"""Exception hierarchy for appnav."""


class AppNavError(Exception):
    """Base class for all appnav errors."""


class ConfigError(AppNavError):
    """Raised when the navigator configuration cannot be loaded or is invalid."""


class PersistenceError(AppNavError):
    """Raised when the app map or its reports cannot be written to disk."""


class CaptureError(AppNavError):
    """Raised when a route could not be captured after all attempts."""

    def __init__(self, route: str, attempts: int, cause: BaseException | None = None) -> None:
        self.route = route
        self.attempts = attempts
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to capture {route} after {attempts} attempt(s){detail}")
