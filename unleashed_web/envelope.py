"""
unleashed_web.envelope
======================
The ``<ajax-request>`` / ``<ajax-response>`` envelopes every controller call
is wrapped in.

Two flavours exist:

* **conf** (``/admin/_conf.jsp``): configuration reads and writes.  The
  response may carry an ``<xmsg>`` element reporting an application error
  inside an otherwise successful HTTP 200; it always wins over any payload.
* **cmdstat** (``/admin/_cmdstat.jsp``): live statistics and device
  commands.  The nested ``<response>`` element is returned as-is and callers
  inspect any status attributes themselves.

Payloads are :class:`xml.etree.ElementTree.Element` objects, or anything with
a ``to_element()`` method.  Results are produced by a *decode* callable that
receives the payload element.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from .config import CMDSTAT_PATH, CONF_PATH
from .errors import ApplicationError, DecodeError
from .scalars import encode_bool

T = TypeVar("T")

ERROR_TAG = "xmsg"


# ---------------------------------------------------------------------------
# Request envelopes
# ---------------------------------------------------------------------------

def _as_element(payload) -> Optional[ET.Element]:
    if payload is None or isinstance(payload, ET.Element):
        return payload
    to_element = getattr(payload, "to_element", None)
    if to_element is None:
        raise TypeError(f"cannot serialise {type(payload).__name__} as an envelope payload")
    return to_element()


@dataclass(frozen=True)
class ConfRequest:
    action: str                     # getconf, setconf, addobj, updobj, delobj
    comp: str
    decrypt: Optional[bool] = None  # DECRYPT_X; omitted when None
    payload: Optional[ET.Element] = None

    def to_element(self) -> ET.Element:
        root = ET.Element("ajax-request", {"action": self.action})
        if self.decrypt is not None:
            root.set("DECRYPT_X", encode_bool(self.decrypt))
        root.set("updater", "")
        root.set("comp", self.comp)
        if self.payload is not None:
            root.append(self.payload)
        return root


@dataclass(frozen=True)
class CmdstatRequest:
    action: str                     # getstat, docmd
    comp: str
    payload: Optional[ET.Element] = None
    attrs: dict = field(default_factory=lambda: {"caller": ""})

    def to_element(self) -> ET.Element:
        root = ET.Element("ajax-request", {"action": self.action})
        for name, value in self.attrs.items():
            root.set(name, value)
        root.set("updater", "")
        root.set("comp", self.comp)
        if self.payload is not None:
            root.append(self.payload)
        return root


def encode_envelope(request) -> bytes:
    return ET.tostring(request.to_element(), encoding="utf-8")


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Xmsg:
    """The controller's in-band error report."""
    type: str = ""
    msg: str = ""
    name: str = ""
    lmsg: str = ""

    def to_error(self) -> ApplicationError:
        return ApplicationError(type=self.type, msg=self.msg, name=self.name, lmsg=self.lmsg)


@dataclass(frozen=True)
class ConfResponse:
    type: str
    id: str
    xmsg: Optional[Xmsg]
    raw: bytes
    payload: Optional[ET.Element] = field(default=None, repr=False)


def _parse(body: bytes) -> ET.Element:
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise DecodeError(f"malformed response XML: {exc}") from exc


def _inner_xml(element: ET.Element) -> bytes:
    parts = [(element.text or "").encode("utf-8")]
    parts.extend(ET.tostring(child, encoding="utf-8") for child in element)
    return b"".join(parts)


def decode_conf_response(body: bytes) -> ConfResponse:
    root = _parse(body)
    if root.tag != "ajax-response":
        raise DecodeError(f"expected <ajax-response>, got <{root.tag}>")
    response = root.find("response")
    if response is None:
        raise DecodeError("<ajax-response> has no <response> element")

    xmsg = None
    error = response.find(ERROR_TAG)
    if error is not None:
        xmsg = Xmsg(
            type=error.get("type", ""),
            msg=error.get("msg", ""),
            name=error.get("name", ""),
            lmsg=error.get("lmsg", ""),
        )

    payload = next((child for child in response if child.tag != ERROR_TAG), None)
    return ConfResponse(
        type=response.get("type", ""),
        id=response.get("id", ""),
        xmsg=xmsg,
        raw=_inner_xml(response),
        payload=payload,
    )


def decode_cmdstat_response(body: bytes) -> Optional[ET.Element]:
    """Return the nested ``<response>`` element, or None when there is none."""
    root = _parse(body)
    # Command acknowledgements have been seen echoing the request root.
    if root.tag not in ("ajax-response", "ajax-request"):
        raise DecodeError(f"expected <ajax-response>, got <{root.tag}>")
    return root.find("response")


def _apply(decode: Callable[[ET.Element], T], element: ET.Element) -> T:
    try:
        return decode(element)
    except (ValueError, TypeError) as exc:
        raise DecodeError(f"unexpected <{element.tag}> content: {exc}") from exc


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def execute_conf(
    session,
    action: str,
    comp: str,
    payload=None,
    decode: Optional[Callable[[ET.Element], T]] = None,
    decrypt: Optional[bool] = None,
    timeout=None,
) -> Optional[T]:
    """
    Run one configuration operation.

    Returns ``decode(payload element)`` or, without *decode*, None.

    Raises:
        TransportError: HTTP failure or non-200 status (body not decoded)
        DecodeError: malformed envelope or payload
        ApplicationError: the controller reported an ``<xmsg>`` error
    """
    session.ensure_token(timeout=timeout)

    request = ConfRequest(action, comp, decrypt, _as_element(payload))
    body = session.post_xml(CONF_PATH, encode_envelope(request), timeout=timeout)
    response = decode_conf_response(body)

    if response.xmsg is not None:
        raise response.xmsg.to_error()
    if decode is None:
        return None
    if response.payload is None:
        raise DecodeError(f"{action} {comp}: response carries no payload")
    return _apply(decode, response.payload)


def execute_cmdstat(
    session,
    action: str,
    comp: str,
    payload=None,
    decode: Optional[Callable[[ET.Element], T]] = None,
    attrs: Optional[dict] = None,
    timeout=None,
):
    """
    Run one statistics query or device command.

    *attrs* replaces the default ``caller=""`` request attribute (commands
    send ``xcmd`` instead).  Returns ``decode(<response>)`` or, without
    *decode*, the ``<response>`` element itself (None if absent).
    """
    session.ensure_token(timeout=timeout)

    request = CmdstatRequest(action, comp, _as_element(payload), {"caller": ""} if attrs is None else attrs)
    body = session.post_xml(CMDSTAT_PATH, encode_envelope(request), timeout=timeout)
    response = decode_cmdstat_response(body)

    if decode is None:
        return response
    if response is None:
        raise DecodeError(f"{action} {comp}: response carries no <response> element")
    return _apply(decode, response)
