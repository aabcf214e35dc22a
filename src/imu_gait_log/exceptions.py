"""Errors raised by the sensor log engine."""


class SensorLogError(ValueError):
    """Base class for sensor log parsing errors."""


class InsufficientLinesError(SensorLogError):
    """Raised when a file has too few non-empty lines to hold headers and data."""

    def __init__(self, line_count: int, minimum: int = 3):
        self.line_count = line_count
        self.minimum = minimum
        super().__init__(
            f"Invalid file format: insufficient lines ({line_count} found, {minimum} required)"
        )


class InvalidContentError(SensorLogError):
    """Raised when content is clearly not a sensor log, e.g. an HTML error page."""
