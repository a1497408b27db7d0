"""
The controller session: authenticated state plus the HTTP seam every
request goes through.

* Tracks the current host, following the master role across redirects.
* Caps every response body at ``MAX_RESPONSE_BYTES``, redirect hops included.
* Treats the cached CSRF token as valid only while the cookie jar still holds
  a cookie for that host.
* Wraps ``requests`` failures as :class:`TransportError` /
  :class:`ProtocolError`.
"""

from __future__ import annotations

import urllib.parse

import requests

from ..config import (
    CSRF_HEADER,
    MAX_REDIRECTS,
    MAX_RESPONSE_BYTES,
    REQUEST_TIMEOUT,
    XML_CONTENT_TYPE,
)
from ..errors import ProtocolError, TransportError
from ..logging_setup import log
from ..network.client import base_url, build_session, discard_limited, host_has_cookie, read_limited
from .login import login as _login
from .refresh import DoubleCheckedRefresher, TokenRefresher
from .state import Credentials, LoginResult, SessionState


class ControllerSession:
    """
    Authenticated connection to one Unleashed controller.

    Safe to share between threads.  Network calls never run under the state
    lock, so concurrent callers may each log in when they find the token
    stale; pass a :class:`~unleashed_web.auth.refresh.SingleFlightRefresher`
    to collapse those into one.
    """

    def __init__(
        self,
        host: str,
        credentials: Credentials,
        *,
        http: requests.Session | None = None,
        verify_ssl: bool = True,
        refresher: TokenRefresher | None = None,
        timeout=REQUEST_TIMEOUT,
    ) -> None:
        self.state = SessionState(host, credentials)
        self.http = http if http is not None else build_session(verify_ssl=verify_ssl)
        self.http.max_redirects = MAX_REDIRECTS
        self.http.hooks["response"].append(self._track_redirect)
        self.refresher = refresher if refresher is not None else DoubleCheckedRefresher()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Host tracking
    # ------------------------------------------------------------------

    def _track_redirect(self, resp: requests.Response, *args, **kwargs) -> None:
        if not resp.is_redirect:
            return
        target = urllib.parse.urljoin(resp.url, resp.headers["location"])
        host = urllib.parse.urlsplit(target).netloc
        if host:
            self.state.follow_host(host)
        # requests buffers each hop in full before following it.
        discard_limited(resp, MAX_RESPONSE_BYTES)

    @property
    def host(self) -> str:
        return self.state.host

    # ------------------------------------------------------------------
    # Token lifecycle
    # ------------------------------------------------------------------

    def has_cookie(self) -> bool:
        return host_has_cookie(self.http.cookies, self.state.host)

    def cached_token(self) -> str | None:
        """The last CSRF token, or None if absent or its cookies are gone."""
        host, token = self.state.snapshot()
        if token and host_has_cookie(self.http.cookies, host):
            return token
        return None

    def login(self, timeout=None) -> LoginResult:
        return _login(self, timeout=timeout)

    def ensure_token(self, timeout=None) -> str:
        return self.refresher.ensure_token(self, timeout=timeout)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        data=None,
        headers: dict[str, str] | None = None,
        timeout=None,
    ) -> requests.Response:
        """Issue a streamed request to the current host with the CSRF header."""
        host, token = self.state.snapshot()
        hdrs = {CSRF_HEADER: token}
        if headers:
            hdrs.update(headers)
        try:
            return self.http.request(
                method,
                base_url(host) + path,
                data=data,
                headers=hdrs,
                timeout=self.timeout if timeout is None else timeout,
                stream=True,
            )
        except requests.TooManyRedirects as exc:
            raise ProtocolError(f"stopped after {MAX_REDIRECTS} redirects") from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    def read_body(self, resp: requests.Response, limit: int = MAX_RESPONSE_BYTES) -> bytes:
        try:
            return read_limited(resp, limit)
        except requests.RequestException as exc:
            raise TransportError(f"reading response failed: {exc}") from exc

    def post_form(self, path: str, values: dict[str, str], timeout=None) -> requests.Response:
        return self.request("POST", path, data=values, timeout=timeout)

    def post_xml(self, path: str, body: bytes, timeout=None) -> bytes:
        """
        POST an XML envelope and return the (size-capped) response body.

        Raises:
            TransportError: connection failure, timeout or a non-200 status
        """
        log.debug("xml request: %s", body.decode("utf-8", errors="replace"))
        resp = self.request(
            "POST", path, data=body,
            headers={"Content-Type": XML_CONTENT_TYPE},
            timeout=timeout,
        )
        if resp.status_code != 200:
            resp.close()
            raise TransportError(
                f"XML post returned status code {resp.status_code}",
                status=resp.status_code,
            )
        data = self.read_body(resp)
        log.debug("xml response: %s", data.decode("utf-8", errors="replace"))
        return data

    def get(self, path: str, timeout=None) -> requests.Response:
        """GET a literal resource; the caller reads and closes the response."""
        self.ensure_token(timeout=timeout)
        return self.request("GET", path, timeout=timeout)
