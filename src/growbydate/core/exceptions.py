"""
Custom exception hierarchy for the GrowByDate planner.
Provides clear error categories and rich error information.
"""
from typing import Optional, Any, Dict
from dataclasses import dataclass


@dataclass
class ErrorContext:
    """Context information for errors"""
    location_key: Optional[str] = None
    station_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class GrowByDateError(Exception):
    """Base exception for all GrowByDate errors"""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        context_str = ""
        if self.context.location_key:
            context_str += f" [Location: {self.context.location_key}]"
        if self.context.station_id:
            context_str += f" [Station: {self.context.station_id}]"
        if self.context.component:
            context_str += f" [Component: {self.context.component}]"

        return f"{self.__class__.__name__}: {self.message}{context_str}"


# Data-related errors
class DataError(GrowByDateError):
    """Base class for data-related errors"""
    pass


class DataSourceError(DataError):
    """Error fetching or decoding a published dataset"""
    pass


class DataValidationError(DataError):
    """Dataset payload failed structural validation"""
    pass


# Planning errors
class PlanningError(GrowByDateError):
    """Base class for planner run errors"""
    pass


class InputError(PlanningError):
    """User input cannot be used for an estimate"""
    status = "invalid_input"


class NoCropSelectedError(InputError):
    """No crop was selected"""
    status = "no_crops"


class InvalidPlantingDateError(InputError):
    """Planting date missing or not a calendar date"""
    status = "invalid_date"


class InvalidLocationError(InputError):
    """Location input normalizes to an empty key"""
    status = "empty_location"


# Configuration errors
class ConfigurationError(GrowByDateError):
    """Configuration error"""
    pass


def handle_exception(exc: Exception, context: Optional[ErrorContext] = None) -> GrowByDateError:
    """
    Wrap generic exceptions in the GrowByDateError hierarchy.
    Useful for catching and categorizing third-party exceptions.
    """
    if isinstance(exc, GrowByDateError):
        return exc

    # Map common third-party exceptions
    error_map = {
        FileNotFoundError: DataSourceError,
        ConnectionError: DataSourceError,
        TimeoutError: DataSourceError,
        OSError: DataSourceError,
        ValueError: DataValidationError,
        KeyError: DataValidationError,
        TypeError: DataValidationError,
    }

    for exc_type, app_exc_type in error_map.items():
        if isinstance(exc, exc_type):
            return app_exc_type(str(exc), context)

    # Default to generic GrowByDateError
    return GrowByDateError(str(exc), context)
