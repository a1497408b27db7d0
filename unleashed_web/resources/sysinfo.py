"""Controller identity and uptime (``getstat`` on the ``system`` component)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from ..errors import DecodeError
from .base import INT, Attr, read_attrs

_ATTRS = (
    Attr("uptime", "uptime", INT),
    Attr("version", "version"),
    Attr("version-num", "version_num"),
    Attr("build-num", "build_num"),
    Attr("model", "model"),
    Attr("uuid", "uuid"),
    Attr("serial", "serial"),
    Attr("maxap", "max_ap", INT),
    Attr("fixed-ctry-code", "fixed_country_code"),
    Attr("eth-num", "eth_num", INT),
    Attr("poe-port", "poe_port"),
    Attr("max_connect_ap", "max_connect_ap", INT),
)


@dataclass
class Sysinfo:
    uptime: int = 0
    version: str = ""
    version_num: str = ""
    build_num: str = ""
    model: str = ""
    uuid: str = ""
    serial: str = ""
    max_ap: int = 0
    fixed_country_code: str = ""
    eth_num: int = 0
    poe_port: str = ""
    max_connect_ap: int = 0

    @classmethod
    def from_element(cls, element: ET.Element) -> "Sysinfo":
        return cls(**read_attrs(element, _ATTRS))


def _from_response(response: ET.Element) -> Sysinfo:
    # The system component nests a second <response> around <sysinfo>.
    element = response.find("response/sysinfo")
    if element is None:
        raise DecodeError("getstat system: no <sysinfo> in response")
    return Sysinfo.from_element(element)


def get_sysinfo(client, timeout=None) -> Sysinfo:
    return client.cmdstat(
        "getstat", "system",
        payload=ET.Element("sysinfo"),
        decode=_from_response,
        timeout=timeout,
    )
