"""Error taxonomy shared by services and routes.

Every failure reaches the client as {"success": false, "error": message}
with the status code carried by the exception class.
"""


class ArenaError(Exception):
    """Base class for errors reported to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ArenaError):
    """Match, team or tournament id did not resolve."""

    status_code = 404


class ValidationFailure(ArenaError):
    """Malformed request: bad sport, side or action details."""

    status_code = 400


class MatchStateConflict(ArenaError):
    """Operation not allowed in the match's current status."""

    status_code = 409


class StoreFailure(ArenaError):
    """Persistence layer error. Not retried."""

    status_code = 500
