"""Errors raised by member operations, each carrying its HTTP status."""


class MemberError(Exception):
    """Base exception for member and photo operations."""

    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict[str, str]:
        """Convert to the REST error body."""
        return {"detail": self.message}


class NotFoundError(MemberError):
    """The acting user or a referenced photo does not exist."""

    http_status = 404


class ConflictError(MemberError):
    """The request conflicts with the current gallery state."""


class UpstreamError(MemberError):
    """The photo hosting provider reported an error."""


class PersistenceError(MemberError):
    """The repository did not save any change."""
