"""Custom exceptions for data loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when JSON files or payloads are missing or not valid JSON."""


class DataValidationError(DataError):
    """Raised when JSON content fails structural validation."""
