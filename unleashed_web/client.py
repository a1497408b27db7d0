"""
Client facade: one object per controller, owning the session and exposing
the envelope operations and the resource accessors.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, Optional, TypeVar

import requests

from .auth.refresh import TokenRefresher
from .auth.session import ControllerSession
from .auth.state import Credentials, LoginResult
from .config import DEFAULT_HOST, DEFAULT_PASSWORD, DEFAULT_USER, REQUEST_TIMEOUT
from .envelope import execute_cmdstat, execute_conf
from .resources.aaa import AuthServers
from .resources.ap_groups import APGroups
from .resources.aps import APs
from .resources.snmp import Snmp
from .resources.stations import Stations
from .resources.sysinfo import Sysinfo, get_sysinfo
from .resources.wlans import Wlans

T = TypeVar("T")


class Client:
    """
    Talks to one Unleashed controller over its web-admin XML interface.

    Parameters
    ----------
    host : str
        Controller address (``host`` or ``host:port``); HTTPS is always used.
        Updated automatically when the controller redirects to a new master.
    username, password : str
        Administrator credentials; default to ``UNLEASHED_USER`` /
        ``UNLEASHED_PASSWORD``.
    verify_ssl : bool
        Verify the controller's TLS certificate (off for self-signed units).
    timeout : float or (connect, read) tuple
        Default per-request timeout; each call may override it.
    refresher : TokenRefresher, optional
        How a stale CSRF token is replaced; defaults to a plain
        check-then-login.
    http : requests.Session, optional
        Pre-configured session (tests mount a fake adapter on it).
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        username: str = DEFAULT_USER,
        password: str = DEFAULT_PASSWORD,
        *,
        verify_ssl: bool = True,
        timeout=REQUEST_TIMEOUT,
        refresher: TokenRefresher | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.session = ControllerSession(
            host,
            Credentials(username, password),
            http=http,
            verify_ssl=verify_ssl,
            refresher=refresher,
            timeout=timeout,
        )

    @property
    def host(self) -> str:
        return self.session.host

    def close(self) -> None:
        self.session.http.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Envelope operations
    # ------------------------------------------------------------------

    def login(self, timeout=None) -> LoginResult:
        """Log in unconditionally, replacing any cached token."""
        return self.session.login(timeout=timeout)

    def conf(
        self,
        action: str,
        comp: str,
        payload=None,
        decode: Optional[Callable[[ET.Element], T]] = None,
        decrypt: Optional[bool] = None,
        timeout=None,
    ) -> Optional[T]:
        return execute_conf(self.session, action, comp, payload, decode, decrypt=decrypt, timeout=timeout)

    def cmdstat(
        self,
        action: str,
        comp: str,
        payload=None,
        decode: Optional[Callable[[ET.Element], T]] = None,
        attrs: Optional[dict] = None,
        timeout=None,
    ):
        return execute_cmdstat(self.session, action, comp, payload, decode, attrs=attrs, timeout=timeout)

    def get(self, path: str, timeout=None) -> requests.Response:
        """GET a literal resource (e.g. a backup file) with a valid session."""
        return self.session.get(path, timeout=timeout)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def sysinfo(self, timeout=None) -> Sysinfo:
        return get_sysinfo(self, timeout=timeout)

    @property
    def aps(self) -> APs:
        return APs(self)

    @property
    def ap_groups(self) -> APGroups:
        return APGroups(self)

    @property
    def wlans(self) -> Wlans:
        return Wlans(self)

    @property
    def stations(self) -> Stations:
        return Stations(self)

    @property
    def snmp(self) -> Snmp:
        return Snmp(self)

    @property
    def auth_servers(self) -> AuthServers:
        return AuthServers(self)
