"""
Error taxonomy for the todo service.

Every failure a request can hit is one of these; the app's exception
handlers turn them into plain-text responses with the carried status code.
"""

from __future__ import annotations

from typing import Optional


class TodoServiceError(Exception):
    """Base class carrying the HTTP status and the client-facing message."""

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TodoServiceError):
    """A field value (or identifier) the service refuses to accept."""

    status_code = 400
    default_message = "Invalid Request"


class NotFoundError(TodoServiceError):
    status_code = 404
    default_message = "Todo not found"


class StoreError(TodoServiceError):
    """Any persistence failure. The message never carries store details."""

    status_code = 500
    default_message = "Server Error"
