"""
Domain errors raised by services and mapped to HTTP responses in main.
"""


class DealershipError(Exception):
    """Base class for errors raised by the service layer."""


class InvalidReferenceError(DealershipError):
    """A record refers to a vehicle or customer that does not exist."""


class InvalidUploadError(DealershipError):
    """The uploaded file is not acceptable (type, size or count)."""


class StorageNotConfiguredError(DealershipError):
    """Object storage settings are missing or still hold placeholders."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Object storage is not configured: " + "; ".join(errors))


class StorageError(DealershipError):
    """The object store rejected or failed a request."""
