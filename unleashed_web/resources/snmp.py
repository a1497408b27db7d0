"""
SNMP agent settings (``system`` component).

Three independent blocks share the component and are read and written one
at a time: ``<snmp>`` (v2c agent), ``<snmpv3>`` (v3 agent users) and
``<snmp-trap>`` (trap destinations).  Reads answer inside a ``<resultset>``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable

from ..errors import DecodeError
from .aps import IPAddress
from .base import BOOL, INT, IP, Attr, children, read_attrs, write_attrs


# ---------------------------------------------------------------------------
# v2c agent
# ---------------------------------------------------------------------------

_V2_ATTRS = (
    Attr("snmpv2-ap", "snmpv2_ap", BOOL),
    Attr("ver", "ver", INT),
    Attr("enabled", "enabled", BOOL),
    Attr("sys-contact", "sys_contact"),
    Attr("sys-location", "sys_location"),
    Attr("ro-community", "ro_community"),
    Attr("rw-community", "rw_community"),
)


@dataclass
class SnmpV2:
    snmpv2_ap: bool = False
    ver: int = 2
    enabled: bool = False
    sys_contact: str = ""
    sys_location: str = ""
    ro_community: str = field(default="", repr=False)
    rw_community: str = field(default="", repr=False)

    @classmethod
    def from_element(cls, element: ET.Element) -> "SnmpV2":
        return cls(**read_attrs(element, _V2_ATTRS))

    def to_element(self) -> ET.Element:
        return write_attrs(ET.Element("snmp"), self, _V2_ATTRS)


# ---------------------------------------------------------------------------
# v3 agent
# ---------------------------------------------------------------------------

_USER_ATTRS = (
    Attr("role", "role"),
    Attr("name", "name"),
    Attr("auth", "auth"),
    Attr("authPP", "auth_passphrase"),
    Attr("priv", "priv"),
    Attr("privPP", "priv_passphrase"),
)


@dataclass
class SnmpUser:
    role: str = ""
    name: str = ""
    auth: str = ""
    auth_passphrase: str = field(default="", repr=False)
    priv: str = ""
    priv_passphrase: str = field(default="", repr=False)

    @classmethod
    def from_element(cls, element: ET.Element) -> "SnmpUser":
        return cls(**read_attrs(element, _USER_ATTRS))

    def to_element(self) -> ET.Element:
        return write_attrs(ET.Element("snmpusr"), self, _USER_ATTRS)


_V3_ATTRS = (
    Attr("enabled", "enabled", BOOL),
    Attr("ver", "ver", INT),
)


@dataclass
class SnmpV3:
    enabled: bool = False
    ver: int = 3
    users: list[SnmpUser] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element) -> "SnmpV3":
        return cls(
            **read_attrs(element, _V3_ATTRS),
            users=children(element, "snmpusr", SnmpUser.from_element),
        )

    def to_element(self) -> ET.Element:
        element = write_attrs(ET.Element("snmpv3"), self, _V3_ATTRS)
        element.extend(user.to_element() for user in self.users)
        return element


# ---------------------------------------------------------------------------
# Traps
# ---------------------------------------------------------------------------

_TRAP_USER_ATTRS = (
    Attr("id", "id", INT),
    Attr("name", "name"),
    Attr("enabled", "enabled", BOOL),
    Attr("ip", "ip", IP),
    Attr("auth", "auth"),
    Attr("authPP", "auth_passphrase"),
    Attr("priv", "priv"),
    Attr("privPP", "priv_passphrase"),
)


@dataclass
class SnmpTrapUser:
    """A v3 trap receiver."""
    id: int = 0
    name: str = ""
    enabled: bool = False
    ip: IPAddress = None
    auth: str = ""
    auth_passphrase: str = field(default="", repr=False)
    priv: str = ""
    priv_passphrase: str = field(default="", repr=False)

    @classmethod
    def from_element(cls, element: ET.Element) -> "SnmpTrapUser":
        return cls(**read_attrs(element, _TRAP_USER_ATTRS))

    def to_element(self) -> ET.Element:
        return write_attrs(ET.Element("trapusr"), self, _TRAP_USER_ATTRS)


_TRAP_ATTRS = (
    Attr("enabled", "enabled", BOOL),
    Attr("community", "community"),
    Attr("ver", "ver", INT),
    Attr("password", "password"),
    Attr("ip1", "ip1", IP),
    Attr("ip2", "ip2", IP),
    Attr("ip3", "ip3", IP),
    Attr("ip4", "ip4", IP),
)


@dataclass
class SnmpTrap:
    """
    Trap destinations.  A v2 trap goes to up to four addresses (``ip1`` to
    ``ip4``); a v3 trap goes to each of ``users``.
    """
    enabled: bool = False
    community: str = field(default="", repr=False)
    ver: int = 2
    password: str = field(default="", repr=False)
    ip1: IPAddress = None
    ip2: IPAddress = None
    ip3: IPAddress = None
    ip4: IPAddress = None
    users: list[SnmpTrapUser] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element) -> "SnmpTrap":
        return cls(
            **read_attrs(element, _TRAP_ATTRS),
            users=children(element, "trapusr", SnmpTrapUser.from_element),
        )

    def to_element(self) -> ET.Element:
        element = write_attrs(ET.Element("snmp-trap"), self, _TRAP_ATTRS)
        element.extend(user.to_element() for user in self.users)
        return element


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def _from_resultset(tag: str, decode: Callable[[ET.Element], object]):
    def from_resultset(resultset: ET.Element):
        if resultset.tag != "resultset":
            raise DecodeError(f"expected <resultset>, got <{resultset.tag}>")
        element = resultset.find(tag)
        if element is None:
            raise DecodeError(f"<resultset> has no <{tag}> element")
        return decode(element)
    return from_resultset


class Snmp:
    """SNMP settings bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def _get(self, tag: str, decode, timeout):
        return self._client.conf(
            "getconf", "system",
            payload=ET.Element(tag),
            decode=_from_resultset(tag, decode),
            timeout=timeout,
        )

    def _set(self, settings, timeout) -> None:
        self._client.conf("setconf", "system", payload=settings, timeout=timeout)

    def get_v2(self, timeout=None) -> SnmpV2:
        return self._get("snmp", SnmpV2.from_element, timeout)

    def set_v2(self, settings: SnmpV2, timeout=None) -> None:
        self._set(settings, timeout)

    def get_v3(self, timeout=None) -> SnmpV3:
        return self._get("snmpv3", SnmpV3.from_element, timeout)

    def set_v3(self, settings: SnmpV3, timeout=None) -> None:
        self._set(settings, timeout)

    def get_trap(self, timeout=None) -> SnmpTrap:
        return self._get("snmp-trap", SnmpTrap.from_element, timeout)

    def set_trap(self, settings: SnmpTrap, timeout=None) -> None:
        self._set(settings, timeout)
