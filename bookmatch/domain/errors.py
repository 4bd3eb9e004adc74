"""Error taxonomy shared by the rating and recommendation services."""


class BookmatchError(Exception):
    """Base class for errors raised by the core services."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(BookmatchError):
    """Missing or out-of-range request data."""

    status_code = 400


class NotFound(BookmatchError):
    """A referenced record does not exist."""

    status_code = 404


class InternalFailure(BookmatchError):
    """Storage or adapter failure. The cause is chained, never exposed."""

    status_code = 500
