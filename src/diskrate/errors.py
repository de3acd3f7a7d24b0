"""Exceptions raised by diskrate."""


class DiskRateError(RuntimeError):
    """Base class for collector errors."""


class CollectionError(DiskRateError):
    """Raised when the device list or counter table cannot be read."""


class ParseError(DiskRateError):
    """Raised when a counter table line is malformed."""

    def __init__(self, message: str, field: str = "", device: str = ""):
        super().__init__(message)
        self.field = field
        self.device = device


class StoreError(DiskRateError):
    """Raised when the persisted snapshot cannot be read, decoded or written."""


class MetricSkipped(DiskRateError):
    """A single metric cannot be reported this run. Never fatal."""


class StaleWindow(MetricSkipped):
    """The previous snapshot is too old to compare against."""


class CounterReset(MetricSkipped):
    """The counter went backwards (wrapped, or the device was reattached)."""


class InvalidValue(MetricSkipped):
    """The computed value is NaN, infinite, or has no valid time window."""
