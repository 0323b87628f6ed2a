"""
Domain errors.

Each error knows the HTTP status it maps to and the short message the client
is allowed to see. Details stay in the server log.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500
    public_message = "Server error"

    def __init__(self, detail: str = "", public_message: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message
        if public_message is not None:
            self.public_message = public_message


class InvalidInputError(AppError):
    status_code = 400
    public_message = "Invalid request"

    def __init__(self, public_message: str):
        super().__init__(public_message, public_message=public_message)


class AuthenticationError(AppError):
    status_code = 401
    public_message = "Not authorized"


class ForbiddenError(AppError):
    status_code = 403
    public_message = "Not authorized to access this resource"


class NotFoundError(AppError):
    status_code = 404
    public_message = "Not found"


class SessionConflictError(AppError):
    status_code = 409
    public_message = "Chat was modified concurrently, please retry"


class ConfigurationError(AppError):
    status_code = 500
    public_message = "Chat service is not configured"


class UpstreamError(AppError):
    status_code = 500
    public_message = "Failed to get AI response"


class EmptyResponseError(UpstreamError):
    public_message = "No response from AI"
