"""
================================================================================
Errors - Dashboard Exception Types
================================================================================

Three things can go wrong in the data pipeline, and callers treat each one
differently:

    NotFoundError:   an unknown patient, date or sensor file
    TransportError:  the sensor file exists but could not be fetched
    ValidationError: bad user input (empty note, invalid config value)

Malformed sensor values are not errors at all. The frame parser replaces
them with the baseline value and carries on.
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class NotFoundError(DashboardError, KeyError):
    """An identifier (patient, date, file) is not known."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class TransportError(DashboardError):
    """
    A sensor file could not be retrieved.

    Attributes:
        filename: The file that failed to load
        status: HTTP status code, if the failure came from an HTTP response
    """

    def __init__(self, filename: str, message: str, status: Optional[int] = None):
        super().__init__(f"Failed to load {filename}: {message}")
        self.filename = filename
        self.status = status


class ValidationError(DashboardError, ValueError):
    """Input was rejected before any state changed."""
