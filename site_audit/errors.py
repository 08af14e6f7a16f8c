"""Error taxonomy for audit runs."""


class AuditError(Exception):
    """Base class for every error raised by the audit engine."""


class NavigationError(AuditError):
    """The target page did not load or settle in time."""


class CaptureError(AuditError):
    """A capture or extraction call failed after navigation."""


class ConfigurationError(AuditError):
    """A requested viewport, page or category is absent from configuration."""


class CriticalViolationsError(AuditError):
    """Critical accessibility violations were found while the critical check is enabled."""

    def __init__(self, count: int):
        super().__init__(f"Found {count} critical accessibility violations")
        self.count = count


class RunTimeoutError(AuditError):
    """The whole run exceeded its wall-clock ceiling."""
