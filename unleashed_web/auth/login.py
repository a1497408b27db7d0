"""Login form submission and admin-page scraping."""

from __future__ import annotations

import re
from collections import deque

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..config import LOGIN_BUTTON, LOGIN_PATH
from ..errors import AuthError, ProtocolError, TransportError
from ..logging_setup import log
from .state import LoginResult

# LoginResult field → pattern run over the first <script> block of the
# admin page.  "csfrToken" is the controller's own spelling.
LOGIN_FIELDS: dict[str, re.Pattern[str]] = {
    "privilege":  re.compile(r'var privilege = "([^"]+)"'),
    "version":    re.compile(r'var frameVersion = "([^"]+)"'),
    "csrf_token": re.compile(r"var csfrToken = '([^']+)'"),
}


def _first_script(soup: BeautifulSoup) -> str:
    """
    Walk the document breadth-first and return the text of the first
    ``<script>`` element.

    An ``<meta http-equiv="X-Auth">`` reached before any script is the
    controller's way of rejecting the credentials.
    """
    queue: deque = deque([soup])
    while queue:
        node = queue.popleft()
        if not isinstance(node, Tag):
            continue

        if node.name == "script":
            return "".join(
                str(child) for child in node.children
                if isinstance(child, NavigableString) and not isinstance(child, Comment)
            )

        if node.name == "meta" and node.get("http-equiv") == "X-Auth":
            raise AuthError(node.get("content", ""))

        queue.extend(node.children)
    return ""


def parse_login_page(html: bytes | str) -> LoginResult:
    """
    Extract privilege, frame version and CSRF token from the page served
    after a login POST.

    Fields that do not appear are left empty.

    Raises:
        AuthError: the page carries an ``X-Auth`` rejection
        ProtocolError: the page has no script to scrape
    """
    soup = BeautifulSoup(html, "lxml")
    script = _first_script(soup)
    if not script:
        raise ProtocolError("login failed: bad response")

    found = {}
    for field, pattern in LOGIN_FIELDS.items():
        m = pattern.search(script)
        if m:
            found[field] = m.group(1)
    return LoginResult(**found)


def login(session, timeout=None) -> LoginResult:
    """
    Authenticate *session* (a :class:`~unleashed_web.auth.session.ControllerSession`)
    and store the resulting :class:`LoginResult` on its state.

    The POST follows redirects, so a controller that hands the master role
    to another AP re-pins the session host on the way.
    """
    creds = session.state.credentials
    resp = session.post_form(
        LOGIN_PATH,
        {"username": creds.username, "password": creds.password, "ok": LOGIN_BUTTON},
        timeout=timeout,
    )
    if resp.status_code != 200:
        resp.close()
        raise TransportError(
            f"login returned status code {resp.status_code}", status=resp.status_code
        )
    body = session.read_body(resp)

    result = parse_login_page(body)
    if not result.csrf_token:
        log.warning("Login page carried no CSRF token; later calls will log in again")
    session.state.store_login_result(result)

    log.info(
        "Login successful on %s (privilege=%s, version=%s). Active cookies: %s",
        session.state.host,
        result.privilege or "?",
        result.version or "?",
        list(session.http.cookies.keys()),
    )
    return result
