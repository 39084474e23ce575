"""Domain errors raised by services and dependencies.

Each carries the HTTP status it maps to; ``nickvote.main`` renders them all as
``{"detail": message}``.
"""
from __future__ import annotations


class NickVoteError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(NickVoteError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationDenied(NickVoteError):
    status_code = 401
    default_message = "Not allowed for this role"


class ValidationFailed(NickVoteError):
    status_code = 400
    default_message = "Invalid request"


class AlreadyVoted(NickVoteError):
    status_code = 400
    default_message = "You have already submitted your votes"


class NotFound(NickVoteError):
    status_code = 404
    default_message = "Not found"


class InternalError(NickVoteError):
    pass
