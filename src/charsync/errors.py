"""Exceptions raised by charsync."""


class CharsyncError(Exception):
    """Base class for charsync errors."""


class ApiError(CharsyncError):
    """Raised when a request to the upstream API fails.

    Covers transport failures, non-2xx responses and bodies that are not
    the JSON shape the endpoint is expected to return.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
