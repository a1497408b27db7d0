"""Error types raised by the Unleashed web-admin client."""

from __future__ import annotations


class UnleashedError(Exception):
    """Base error for every failure surfaced by this package."""


class TransportError(UnleashedError):
    """The HTTP exchange failed: connection error, timeout or non-200 status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ResponseTooLarge(TransportError):
    """A response body exceeded the size cap and was not buffered."""


class DecodeError(UnleashedError):
    """An envelope or its payload was not well-formed XML of the expected shape."""


class ApplicationError(UnleashedError):
    """The controller answered HTTP 200 but reported an ``xmsg`` error element."""

    def __init__(self, type: str = "", msg: str = "", name: str = "", lmsg: str = "") -> None:
        super().__init__(f"xmsg error: {msg}: {lmsg}")
        self.type = type
        self.msg = msg
        self.name = name
        self.lmsg = lmsg


class AuthError(UnleashedError):
    """The controller explicitly rejected the login."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"login failed: {reason!r}")
        self.reason = reason


class FormatError(UnleashedError):
    """A scalar codec rejected malformed wire text."""

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text


class ProtocolError(UnleashedError):
    """The controller broke the session protocol (redirect loop, unreadable login page)."""


class ValidationError(UnleashedError, ValueError):
    """A record was rejected locally before being sent to the controller."""
