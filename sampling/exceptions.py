"""Exceptions raised by the sampling engine."""


class SamplingError(Exception):
    """Base exception for chart sampling."""
    pass


class InvalidThresholdError(SamplingError, ValueError):
    """Raised when a threshold or bucket count is not a positive integer."""
    pass


class InvalidSeriesError(SamplingError, ValueError):
    """Raised when a request body does not describe a usable series."""
    pass
