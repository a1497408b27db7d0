"""Lock-guarded connection state shared by every request of one client."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field

from ..config import DEFAULT_PASSWORD, DEFAULT_USER
from ..logging_setup import log


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    @classmethod
    def from_env(cls) -> "Credentials":
        """Read ``UNLEASHED_USER`` / ``UNLEASHED_PASSWORD`` from the environment."""
        return cls(
            os.environ.get("UNLEASHED_USER", DEFAULT_USER),
            os.environ.get("UNLEASHED_PASSWORD", DEFAULT_PASSWORD),
        )


@dataclass(frozen=True)
class LoginResult:
    """What the admin page revealed after a successful login."""
    privilege: str = ""
    version: str = ""
    csrf_token: str = field(default="", repr=False)


class SessionState:
    """
    Host, credentials and last login result behind a single lock.

    The lock only ever covers attribute reads and writes; nothing holding it
    performs network I/O.
    """

    def __init__(self, host: str, credentials: Credentials) -> None:
        self._lock = threading.Lock()
        self._host = host
        self._credentials = credentials
        self._login_result: LoginResult | None = None

    @property
    def host(self) -> str:
        with self._lock:
            return self._host

    def follow_host(self, host: str) -> bool:
        """Re-pin to *host*; return True if it differed from the stored one."""
        with self._lock:
            if host == self._host:
                return False
            previous, self._host = self._host, host
        log.info("Controller moved: %s → %s", previous, host)
        return True

    @property
    def credentials(self) -> Credentials:
        with self._lock:
            return self._credentials

    @credentials.setter
    def credentials(self, credentials: Credentials) -> None:
        with self._lock:
            self._credentials = credentials

    @property
    def login_result(self) -> LoginResult | None:
        with self._lock:
            return self._login_result

    def store_login_result(self, result: LoginResult) -> None:
        with self._lock:
            self._login_result = result

    def snapshot(self) -> tuple[str, str]:
        """Return ``(host, csrf_token)`` read under one lock acquisition."""
        with self._lock:
            token = self._login_result.csrf_token if self._login_result else ""
            return self._host, token
