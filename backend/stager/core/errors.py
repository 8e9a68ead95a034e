"""
Errors raised by the artifact pipeline.

Every error carries the HTTP status the API maps it to; the message is shown
to the caller as-is.
"""


class StagerError(Exception):
    """Base class for pipeline errors surfaced to the caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingParameterError(StagerError):
    """One of the required request parameters is empty or absent."""

    status_code = 400


class DescriptorNotFoundError(StagerError):
    """No device descriptor exists at any of the candidate paths."""

    def __init__(self, message: str, tried: list[str] | None = None) -> None:
        super().__init__(message)
        self.tried = tried or []


class TemplateNotFoundError(StagerError):
    """A SQL dump template file is missing."""


class MaterializationError(StagerError):
    """The SQL batch could not be applied to the output database."""
