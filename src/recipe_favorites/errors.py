"""Error taxonomy for the favorites API.

Every failure a client can see is one of these. Each carries the HTTP
status it maps to and the message put in the `{"error": ...}` payload.
Internal detail goes to the server log, never to the client.
"""

from __future__ import annotations


class FavoritesError(Exception):
    """Base class for client-visible errors."""

    status_code = 500
    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message

    def payload(self) -> dict:
        """Client-visible body."""
        return {"error": self.message}


class InvalidInput(FavoritesError):
    """Malformed or missing path or body data."""

    status_code = 400
    message = "Invalid input"


class MissingFields(FavoritesError):
    """A required body field is absent or empty."""

    status_code = 400
    message = "Missing required fields"


class InvalidFieldTypes(FavoritesError):
    """A body field has the wrong type."""

    status_code = 400
    message = "Invalid field types"


class DuplicateEntry(FavoritesError):
    """The (user, recipe) pair is already stored."""

    status_code = 409
    message = "Recipe already in favorites"


class NotFound(FavoritesError):
    """Delete target does not exist."""

    status_code = 404
    message = "Favorite not found"


class ForbiddenOrigin(FavoritesError):
    """Request origin rejected by the CORS policy."""

    status_code = 403
    message = "CORS policy violation"


class InternalError(FavoritesError):
    """Storage or runtime fault."""

    status_code = 500
    message = "Something went wrong"
