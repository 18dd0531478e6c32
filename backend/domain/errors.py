"""
Domain errors raised by the jacket services.

They carry no HTTP knowledge; `api/errors.py` maps them to status codes.
"""


class JacketError(Exception):
    """Base class for jacket failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JacketError):
    """The uploaded file was missing, of an unsupported type, or too large."""


class UnsupportedSizeError(ValidationError):
    """A size other than a configured variant or "original" was requested."""

    def __init__(self, size: str):
        super().__init__(f"Unsupported size: {size}")
        self.size = size


class NotFoundError(JacketError):
    """The book, its jacket, or the requested variant file does not exist."""


class CodecError(JacketError):
    """Image bytes could not be decoded or re-encoded."""


class ProcessingError(JacketError):
    """A jacket processing run did not produce its full variant set."""
