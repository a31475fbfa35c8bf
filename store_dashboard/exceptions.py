"""
Dashboard Exceptions

Only malformed range input is surfaced as an error. Missing lookups,
inverted ranges and empty totals degrade gracefully instead.
"""


class StoreDashboardError(Exception):
    """Base class for all dashboard errors"""


class InvalidRangeError(StoreDashboardError, ValueError):
    """Range bounds cannot be parsed as ISO-8601 datetimes"""


class InvalidIntervalError(StoreDashboardError, ValueError):
    """Bucket interval is not one of the supported values"""
