"""Exceptions raised by the account storage and session services."""


class NoSuchUser(RuntimeError):
    """User does not exist."""


class DuplicateUsername(RuntimeError):
    """An account with the requested username already exists."""


class Unavailable(RuntimeError):
    """The database cannot be reached."""


class InvalidToken(RuntimeError):
    """Session token is malformed or its signature does not check out."""


class SessionExpired(RuntimeError):
    """User's session has expired."""
