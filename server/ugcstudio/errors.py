from __future__ import annotations


class ServiceError(Exception):
    """Base for errors surfaced to the client as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class ProcessingError(ServiceError):
    status_code = 500
