"""
HTTP client configuration for controller communication.

Provides a keep-alive ``requests.Session`` (no automatic retries: callers see
the first error), URL building, and streamed body reads that refuse to
buffer more than a fixed number of bytes.
"""

from http.cookiejar import CookieJar

import requests
import urllib3
from requests.adapters import HTTPAdapter
from requests.cookies import get_cookie_header
from urllib3.util.retry import Retry

from unleashed_web.config import MAX_REDIRECTS
from unleashed_web.errors import ResponseTooLarge
from unleashed_web.logging_setup import log

_CHUNK_SIZE = 64 * 1024


def build_session(verify_ssl: bool = True) -> requests.Session:
    """
    Return a requests.Session with keep-alive and a browser User-Agent.

    Args:
        verify_ssl: Whether to verify the controller's TLS certificate

    Returns:
        Configured requests.Session instance
    """
    session = requests.Session()
    # Every failure surfaces to the caller; redirects are left to requests.
    retry = Retry(total=0, redirect=False, raise_on_redirect=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    if not verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        log.warning("TLS certificate verification is DISABLED")
    session.max_redirects = MAX_REDIRECTS
    # The admin UI is built for browsers; present as one and reuse the
    # TCP connection across envelope calls.
    session.headers.update({
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "Connection": "keep-alive",
    })
    return session


def base_url(host: str) -> str:
    """
    Build the base URL for the controller.

    Args:
        host: Controller hostname or IP, optionally with ``:port``

    Returns:
        Base URL string (e.g., 'https://192.168.0.1')
    """
    return f"https://{host}"


def host_has_cookie(jar: CookieJar, host: str) -> bool:
    """
    Return True when *jar* would send at least one live cookie to *host*.

    The jar applies its own domain, path and expiry rules, including the
    ``.local`` suffix it gives host-only cookies set by a dotless host.
    """
    request = requests.Request("GET", base_url(host) + "/").prepare()
    return bool(get_cookie_header(jar, request))


def discard_limited(resp: requests.Response, limit: int) -> None:
    """
    Drain and drop the body of an intermediate (redirect) response.

    Raises:
        ResponseTooLarge: the body is longer than *limit*; *resp* is closed
    """
    total = 0
    while True:
        chunk = resp.raw.read(_CHUNK_SIZE)
        if not chunk:
            return
        total += len(chunk)
        if total > limit:
            resp.close()
            raise ResponseTooLarge(
                f"redirect body exceeds {limit} bytes", status=resp.status_code
            )


def read_limited(resp: requests.Response, limit: int) -> bytes:
    """
    Read a streamed response body, refusing to buffer more than *limit* bytes.

    Raises:
        ResponseTooLarge: the body is longer than *limit*
    """
    buf = bytearray()
    try:
        for chunk in resp.iter_content(_CHUNK_SIZE):
            buf += chunk
            if len(buf) > limit:
                raise ResponseTooLarge(
                    f"response body exceeds {limit} bytes", status=resp.status_code
                )
    finally:
        resp.close()
    return bytes(buf)
