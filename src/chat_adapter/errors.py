"""Adapter error types. Parse failures are recovered; extraction and transport failures are retried."""


class AdapterError(Exception):
    """Base class for adapter failures."""


class PayloadParseError(AdapterError):
    """Filled template could not be parsed, even after repair passes."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class ExtractionError(AdapterError):
    """Configured response path yields no reply text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"No content found at path {path}: {reason}")
        self.path = path
        self.reason = reason


class TransportError(AdapterError):
    """Network failure or non-success HTTP status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExhaustedRetriesError(AdapterError):
    """Every attempt failed. Carries the last observed error."""

    def __init__(self, attempts: int, last_error: Exception | None) -> None:
        detail = f": {last_error}" if last_error else ""
        super().__init__(f"Failed to get a response after {attempts} attempt(s){detail}")
        self.attempts = attempts
        self.last_error = last_error
