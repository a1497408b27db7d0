"""
Authentication servers (``authsvr-list``): RADIUS and Active Directory.

Both kinds arrive as ``<authsvr>`` elements told apart by ``type``; one
record carries the union of their attributes and leaves the other kind's
at their defaults.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from .base import BOOL, ENABLED, INT, Attr, children, read_attrs

COMP = "authsvr-list"

_ENDPOINT_ATTRS = (
    Attr("ip", "ip"),
    Attr("port", "port", INT),
    Attr("secret", "secret"),
    Attr("x-secret", "x_secret"),
    Attr("timeout", "timeout", INT),
    Attr("retry", "retry", INT),
)


@dataclass
class RadiusEndpoint:
    ip: str = ""
    port: int = 0
    secret: str = field(default="", repr=False)
    x_secret: str = field(default="", repr=False)
    timeout: int = 0
    retry: int = 0

    @classmethod
    def from_element(cls, element: Optional[ET.Element]) -> Optional["RadiusEndpoint"]:
        if element is None:
            return None
        return cls(**read_attrs(element, _ENDPOINT_ATTRS))


_SERVER_ATTRS = (
    Attr("id", "id", INT),
    Attr("name", "name"),
    Attr("EDITABLE", "editable", BOOL),
    Attr("type", "type"),
    Attr("encryption", "encryption", ENABLED),
    Attr("timeout", "timeout", INT),
    Attr("group-string", "group_string"),
    # RADIUS
    Attr("backup", "backup", ENABLED),
    Attr("algorithm", "algorithm"),
    Attr("failover-retry", "failover_retry", INT),
    Attr("retry-consecutive-packet", "retry_consecutive_packet", INT),
    Attr("retry-primary-interval", "retry_primary_interval", INT),
    # Active Directory
    Attr("global-catalog", "global_catalog", ENABLED),
    Attr("server1", "server1"),
    Attr("port", "port", INT),
    Attr("search-base", "search_base"),
    Attr("admin-dn", "admin_dn"),
    Attr("admin-pwd", "admin_pwd"),
    Attr("x-admin-pwd", "x_admin_pwd"),
)


@dataclass
class AuthServer:
    id: int = 0
    name: str = ""
    editable: bool = False
    type: str = ""
    encryption: bool = False
    timeout: int = 0
    group_string: str = ""

    backup: bool = False
    algorithm: str = ""
    failover_retry: int = 0
    retry_consecutive_packet: int = 0
    retry_primary_interval: int = 0
    primary_radius: Optional[RadiusEndpoint] = None
    secondary_radius: Optional[RadiusEndpoint] = None

    global_catalog: bool = False
    server1: str = ""
    port: int = 0
    search_base: str = ""
    admin_dn: str = ""
    admin_pwd: str = field(default="", repr=False)
    x_admin_pwd: str = field(default="", repr=False)

    @property
    def is_radius(self) -> bool:
        return self.primary_radius is not None

    @classmethod
    def from_element(cls, element: ET.Element) -> "AuthServer":
        return cls(
            **read_attrs(element, _SERVER_ATTRS),
            primary_radius=RadiusEndpoint.from_element(element.find("primary-radius")),
            secondary_radius=RadiusEndpoint.from_element(element.find("secondary-radius")),
        )


class AuthServers:
    """Authentication-server operations bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def list(self, timeout=None) -> list[AuthServer]:
        return self._client.conf(
            "getconf", COMP,
            decrypt=True,
            decode=lambda el: children(el, "authsvr", AuthServer.from_element),
            timeout=timeout,
        )
