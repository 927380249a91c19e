"""Exceptions and warnings raised by h5extra operations."""


class H5ExtraError(Exception):
    """Base class for failures of container link operations."""


class MissingLinkError(H5ExtraError, KeyError):
    """Raised when a link that an operation needs does not exist."""

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


class LinkExistsError(H5ExtraError, ValueError):
    """Raised when a destination link exists and overwriting was not requested."""


class MalformedReferenceError(H5ExtraError, ValueError):
    """Raised for references that can never be valid for the requested operation.

    Examples are addressing the container root through a sub-scope handle,
    listing a dataset or asking for the dimensions of a group.
    """


class OpenTimeoutError(BaseException):
    """Raised when a container could not be opened before the retry timeout.

    Derives from `BaseException` like `SystemExit`, the process should not continue.
    """


class H5ExtraWarning(UserWarning):
    """Warning category for non-fatal anomalies (no-op moves, missing delete targets)."""


__all__ = [
    "H5ExtraError",
    "MissingLinkError",
    "LinkExistsError",
    "MalformedReferenceError",
    "OpenTimeoutError",
    "H5ExtraWarning",
]
