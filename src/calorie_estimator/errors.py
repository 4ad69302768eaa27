# Path: calorie_estimator/errors.py
"""Exceptions raised along one estimation cycle."""


class EstimationError(Exception):
    """Base class for every failure the controller knows how to report."""


class SelectionError(EstimationError):
    """No image was chosen."""


class ReadError(EstimationError):
    """The selected image could not be read into memory."""


class NetworkError(EstimationError):
    """The HTTP request failed or came back with a non-2xx status."""

    def __init__(self, message, status=None):
        self.status = status
        self.message = message
        if status is not None:
            super().__init__(f"API error: {status} - {message}")
        else:
            super().__init__(message)


class ResponseShapeError(EstimationError):
    """candidates -> content -> parts -> text is missing from the response."""


class ParseError(EstimationError):
    """The text part of the response is not valid JSON."""

    def __init__(self, reason, raw_text):
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Failed to parse JSON response: {reason}. Raw response: {raw_text}")


class FieldMissingError(EstimationError):
    """The parsed JSON lacks a usable description or calories value."""
