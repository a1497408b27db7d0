"""
Strategies for turning a stale or missing CSRF token into a fresh one.

``ControllerSession.ensure_token`` delegates here so callers never see which
strategy is in use.
"""

from __future__ import annotations

import abc
import threading

from ..errors import TransportError
from ..logging_setup import log


class TokenRefresher(abc.ABC):
    """Return a usable CSRF token for a session, logging in when needed."""

    @abc.abstractmethod
    def ensure_token(self, session, timeout=None) -> str:
        ...


class DoubleCheckedRefresher(TokenRefresher):
    """
    Check the cached token, log in if it is stale.

    Concurrent callers that all see a stale token each perform their own
    login; the controller treats repeated logins as harmless.
    """

    def ensure_token(self, session, timeout=None) -> str:
        token = session.cached_token()
        if token:
            return token
        return session.login(timeout=timeout).csrf_token


class _Flight:
    __slots__ = ("done", "result", "error")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.result = None
        self.error: BaseException | None = None


def _wait_seconds(timeout) -> float | None:
    if timeout is None:
        return None
    if isinstance(timeout, tuple):
        return sum(t for t in timeout if t is not None) or None
    return float(timeout)


class SingleFlightRefresher(TokenRefresher):
    """
    Collapse concurrent logins into one.

    The first caller to find the token stale performs the login; callers
    arriving while it is in flight wait for its outcome, success or error.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._flight: _Flight | None = None

    def ensure_token(self, session, timeout=None) -> str:
        token = session.cached_token()
        if token:
            return token

        with self._lock:
            flight = self._flight
            leader = flight is None
            if leader:
                # A flight may have landed since the check above.
                token = session.cached_token()
                if token:
                    return token
                flight = self._flight = _Flight()

        if leader:
            try:
                flight.result = session.login(timeout=timeout)
            except BaseException as exc:
                flight.error = exc
                raise
            finally:
                with self._lock:
                    self._flight = None
                flight.done.set()
            return flight.result.csrf_token

        log.debug("Waiting for in-flight login")
        if not flight.done.wait(_wait_seconds(timeout)):
            raise TransportError("timed out waiting for in-flight login")
        if flight.error is not None:
            raise flight.error
        return flight.result.csrf_token
