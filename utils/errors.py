"""Error taxonomy shared by the relay controllers and the exception handler in `main`."""


class RelayError(Exception):
    """Base error carrying the HTTP status and a user-facing message.

    Attributes:
        status_code: HTTP status returned to the client.
        message: Safe message placed in the `error` field of the response.
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(RelayError):
    """Client input failed validation; no provider was contacted."""

    status_code = 400


class ProviderError(RelayError):
    """The upstream provider answered with a structured error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message, status_code=status_code)


class ServerError(RelayError):
    """Transport failure or unexpected exception; details stay in the logs."""

    status_code = 500
