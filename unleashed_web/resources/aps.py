"""Access points: configured records and live status with traffic history."""

from __future__ import annotations

import ipaddress
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..scalars import ByteSeries, MacAddress, SignalSeries
from .base import BOOL, BYTES, INT, INT_BOOL, IP, MAC, SIGNAL, TIMESTAMP, Attr, children, read_attrs


# ---------------------------------------------------------------------------
# Configuration (ap-list)
# ---------------------------------------------------------------------------

_RADIO_ATTRS = (
    Attr("radio-type", "radio_type"),
    Attr("ieee80211-radio-type", "ieee80211_radio_type"),
    Attr("radio-id", "radio_id", INT),
    Attr("channel", "channel"),
    Attr("channel_seg2", "channel_seg2"),
    Attr("tx-power", "tx_power"),
    Attr("wmm-ac", "wmm_ac"),
    Attr("vap-enabled", "vap_enabled"),
    Attr("wlangroup-id", "wlangroup_id"),
    Attr("channel-select", "channel_select"),
    Attr("enabled", "enabled", INT_BOOL),
    Attr("channelization", "channelization"),
)


@dataclass
class APRadio:
    radio_type: str = ""
    ieee80211_radio_type: str = ""
    radio_id: int = 0
    channel: str = ""
    channel_seg2: str = ""
    tx_power: str = ""
    wmm_ac: str = ""
    vap_enabled: str = ""
    wlangroup_id: str = ""
    channel_select: str = ""
    enabled: bool = False
    channelization: str = ""

    @classmethod
    def from_element(cls, element: ET.Element) -> "APRadio":
        return cls(**read_attrs(element, _RADIO_ATTRS))


_AP_ATTRS = (
    Attr("id", "id", INT),
    Attr("mac", "mac", MAC),
    Attr("name", "name"),
    Attr("devname", "devname"),
    Attr("description", "description"),
    Attr("model", "model"),
    Attr("serial", "serial"),
    Attr("version", "version"),
    Attr("build-version", "build_version"),
    Attr("approved", "approved"),
    Attr("ip", "ip", IP),
    Attr("netmask", "netmask", IP),
    Attr("gateway", "gateway", IP),
    Attr("dns1", "dns1", IP),
    Attr("dns2", "dns2", IP),
    Attr("ipv6-addr", "ipv6_addr", IP),
    Attr("ext-ip", "ext_ip", IP),
    Attr("ext-port", "ext_port", INT),
    Attr("udp-port", "udp_port", INT),
    Attr("config-state", "config_state", INT),
    Attr("mesh-mode", "mesh_mode"),
    Attr("mesh-enabled", "mesh_enabled", BOOL),
    Attr("support-11ac", "support_11ac", BOOL),
    Attr("support-11ax", "support_11ax", BOOL),
    Attr("usb-installed", "usb_installed", BOOL),
    Attr("poe-mode", "poe_mode", INT),
    Attr("last-seen", "last_seen", TIMESTAMP),
    Attr("location", "location"),
    Attr("gps", "gps"),
    Attr("group-id", "group_id", INT),
    Attr("by-dhcp", "by_dhcp", BOOL),
    Attr("working-radio", "working_radio"),
    Attr("led-off", "led_off"),
)

IPAddress = Optional[ipaddress.IPv4Address | ipaddress.IPv6Address]


@dataclass
class AccessPoint:
    id: int = 0
    mac: Optional[MacAddress] = None
    name: str = ""
    devname: str = ""
    description: str = ""
    model: str = ""
    serial: str = ""
    version: str = ""
    build_version: str = ""
    approved: str = ""
    ip: IPAddress = None
    netmask: IPAddress = None
    gateway: IPAddress = None
    dns1: IPAddress = None
    dns2: IPAddress = None
    ipv6_addr: IPAddress = None
    ext_ip: IPAddress = None
    ext_port: int = 0
    udp_port: int = 0
    config_state: int = 0
    mesh_mode: str = ""
    mesh_enabled: bool = False
    support_11ac: bool = False
    support_11ax: bool = False
    usb_installed: bool = False
    poe_mode: int = 0
    last_seen: Optional[datetime] = None
    location: str = ""
    gps: str = ""
    group_id: int = 0
    by_dhcp: bool = False
    working_radio: str = ""
    led_off: str = ""
    radios: list[APRadio] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element) -> "AccessPoint":
        return cls(
            **read_attrs(element, _AP_ATTRS),
            radios=children(element, "radio", APRadio.from_element),
        )


# ---------------------------------------------------------------------------
# Live status (getstat stamgr)
# ---------------------------------------------------------------------------

_HISTORY_ATTRS = (
    Attr("rx-bytes-2.4g", "rx_bytes_24g", BYTES),
    Attr("tx-bytes-2.4g", "tx_bytes_24g", BYTES),
    Attr("rx-bytes-5g", "rx_bytes_5g", BYTES),
    Attr("tx-bytes-5g", "tx_bytes_5g", BYTES),
    Attr("rssi", "rssi", SIGNAL),
)


@dataclass
class APHistory:
    rx_bytes_24g: ByteSeries = field(default_factory=ByteSeries)
    tx_bytes_24g: ByteSeries = field(default_factory=ByteSeries)
    rx_bytes_5g: ByteSeries = field(default_factory=ByteSeries)
    tx_bytes_5g: ByteSeries = field(default_factory=ByteSeries)
    rssi: SignalSeries = field(default_factory=SignalSeries)

    @classmethod
    def from_element(cls, element: Optional[ET.Element]) -> "APHistory":
        if element is None:
            return cls()
        return cls(**read_attrs(element, _HISTORY_ATTRS))


_STATUS_ATTRS = (
    Attr("mac", "mac", MAC),
    Attr("id", "id", INT),
    Attr("devname", "devname"),
    Attr("model", "model"),
    Attr("state", "state"),
    Attr("mesh-state", "mesh_state"),
    Attr("firmware-version", "firmware_version"),
    Attr("group-id", "group_id", INT),
    Attr("ip", "ip", IP),
    Attr("last-seen", "last_seen", TIMESTAMP),
    Attr("mesh-depth", "mesh_depth", INT),
    Attr("serial-number", "serial_number"),
    Attr("role", "role"),
    Attr("channel-11ng", "channel_11ng", INT),
    Attr("channel-11na", "channel_11na", INT),
)


@dataclass
class APStatus:
    mac: Optional[MacAddress] = None
    id: int = 0
    devname: str = ""
    model: str = ""
    state: str = ""
    mesh_state: str = ""
    firmware_version: str = ""
    group_id: int = 0
    ip: IPAddress = None
    last_seen: Optional[datetime] = None
    mesh_depth: int = 0
    serial_number: str = ""
    role: str = ""
    channel_11ng: int = 0
    channel_11na: int = 0
    history: APHistory = field(default_factory=APHistory)

    @classmethod
    def from_element(cls, element: ET.Element) -> "APStatus":
        return cls(
            **read_attrs(element, _STATUS_ATTRS),
            history=APHistory.from_element(element.find("history")),
        )


def _stat_request(tag: str) -> ET.Element:
    return ET.Element(tag, {"LEVEL": "1", "PERIOD": "3600"})


class APs:
    """Access-point operations bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def list(self, timeout=None) -> list[AccessPoint]:
        return self._client.conf(
            "getconf", "ap-list",
            decrypt=False,
            decode=lambda el: children(el, "ap", AccessPoint.from_element),
            timeout=timeout,
        )

    def list_statuses(self, timeout=None) -> list[APStatus]:
        return self._client.cmdstat(
            "getstat", "stamgr",
            payload=_stat_request("ap"),
            decode=lambda resp: children(resp, "apstamgr-stat/ap", APStatus.from_element),
            timeout=timeout,
        )
