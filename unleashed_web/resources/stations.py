"""Associated client stations and the per-station ``docmd`` commands."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..logging_setup import log
from ..scalars import MacAddress, encode_bool, encode_int_bool, encode_mac
from .aps import IPAddress
from .base import INT, INT_BOOL, IP, MAC, TIMESTAMP, Attr, children, read_attrs

_ATTRS = (
    Attr("mac", "mac", MAC),
    Attr("status", "status", INT),
    Attr("ext-status", "ext_status", INT),
    Attr("first-assoc", "first_assoc", TIMESTAMP),
    Attr("ap", "ap", MAC),
    Attr("ap-name", "ap_name"),
    Attr("user", "user"),
    Attr("vap-nasid", "vap_nasid"),
    Attr("num-interval-stats", "num_interval_stats", INT),
    Attr("called-station-id-type", "called_station_id_type", INT),
    Attr("acct-multi-session-id", "acct_multi_session_id"),
    Attr("acct-session-id", "acct_session_id"),
    Attr("location", "location"),
    Attr("wlan-id", "wlan_id", INT),
    Attr("wlan", "wlan"),
    Attr("ssid", "ssid"),
    Attr("vap-mac", "vap_mac", MAC),
    Attr("encryption", "encryption"),
    Attr("group-id", "group_id", INT),
    Attr("dpsk-id", "dpsk_id", INT),
    Attr("wpa-passphrase", "wpa_passphrase"),
    Attr("wpa-passphrase-len", "wpa_passphrase_len", INT),
    Attr("ip", "ip", IP),
    Attr("ipv6", "ipv6", IP),
    Attr("vlan", "vlan", INT),
    Attr("description", "description"),
    Attr("hostname", "hostname"),
    Attr("role-id", "role_id", INT),
    Attr("dvcinfo", "device_info"),
    Attr("dvctype", "device_type"),
    Attr("dvcinfo-group", "device_info_group"),
    Attr("model", "model"),
    Attr("favourite", "favourite", INT_BOOL),
    Attr("iot", "legacy", INT_BOOL),
    Attr("blocked", "blocked", INT_BOOL),
    Attr("oldname", "original_name"),
    Attr("channelization", "channelization"),
    Attr("ieee80211-radio-type", "ieee80211_radio_type"),
    Attr("radio-type-text", "radio_type_text"),
    Attr("rssi", "rssi", INT),
    Attr("received-signal-strength", "received_signal_strength", INT),
    Attr("noise-floor", "noise_floor", INT),
    Attr("rssi-level", "rssi_level"),
    Attr("auth-method", "auth_method"),
    Attr("avg-rssi", "avg_rssi", INT),
    Attr("channel", "channel", INT),
    Attr("radio-type", "radio_type"),
    Attr("radio-band", "radio_band"),
    Attr("total-rx-pkts", "total_rx_pkts", INT),
    Attr("total-tx-pkts", "total_tx_pkts", INT),
    Attr("total-retry-bytes", "total_retry_bytes", INT),
    Attr("total-rx-dup", "total_rx_dup", INT),
    Attr("total-tx-reassoc", "total_tx_reassoc", INT),
    Attr("total-rx-crc-errs", "total_rx_crc_errs", INT),
    Attr("total-usage-bytes", "total_usage_bytes", INT),
    Attr("total-rx-bytes", "total_rx_bytes", INT),
    Attr("total-tx-bytes", "total_tx_bytes", INT),
    Attr("total-retries", "total_retries", INT),
    Attr("total-rx-management", "total_rx_management", INT),
    Attr("total-tx-management", "total_tx_management", INT),
    Attr("tx-drop-data", "tx_drop_data", INT),
    Attr("tx-drop-mgmt", "tx_drop_mgmt", INT),
)


@dataclass
class Station:
    # far side
    mac: Optional[MacAddress] = None
    status: int = 0
    ext_status: int = 0
    first_assoc: Optional[datetime] = None

    # near side
    ap: Optional[MacAddress] = None
    ap_name: str = ""

    # accounting
    user: str = ""
    vap_nasid: str = ""
    num_interval_stats: int = 0
    called_station_id_type: int = 0
    acct_multi_session_id: str = ""
    acct_session_id: str = ""

    location: str = ""

    wlan_id: int = 0
    wlan: str = ""
    ssid: str = ""
    vap_mac: Optional[MacAddress] = None     # BSSID
    encryption: str = ""

    group_id: int = 0
    dpsk_id: int = 0
    wpa_passphrase: str = ""
    wpa_passphrase_len: int = 0

    ip: IPAddress = None
    ipv6: IPAddress = None
    vlan: int = 0

    description: str = ""
    hostname: str = ""
    role_id: int = 0

    # fingerprinting
    device_info: str = ""
    device_type: str = ""
    device_info_group: str = ""
    model: str = ""

    favourite: bool = False
    legacy: bool = False
    blocked: bool = False
    original_name: str = ""                  # name before any rename

    # radio
    channelization: str = ""
    ieee80211_radio_type: str = ""
    radio_type_text: str = ""
    rssi: int = 0
    received_signal_strength: int = 0
    noise_floor: int = 0
    rssi_level: str = ""
    auth_method: str = ""
    avg_rssi: int = 0
    channel: int = 0
    radio_type: str = ""
    radio_band: str = ""

    # counters
    total_rx_pkts: int = 0
    total_tx_pkts: int = 0
    total_retry_bytes: int = 0
    total_rx_dup: int = 0
    total_tx_reassoc: int = 0
    total_rx_crc_errs: int = 0
    total_usage_bytes: int = 0
    total_rx_bytes: int = 0
    total_tx_bytes: int = 0
    total_retries: int = 0
    total_rx_management: int = 0
    total_tx_management: int = 0
    tx_drop_data: int = 0
    tx_drop_mgmt: int = 0

    @classmethod
    def from_element(cls, element: ET.Element) -> "Station":
        return cls(**read_attrs(element, _ATTRS))


def _decode_clients(response: ET.Element) -> list[Station]:
    return children(response, "apstamgr-stat/client", Station.from_element)


class Stations:
    """Client-station operations bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def list(self, timeout=None) -> list[Station]:
        return self._client.cmdstat(
            "getstat", "stamgr",
            payload=ET.Element("client"),
            decode=_decode_clients,
            timeout=timeout,
        )

    def list_by_wlan(self, wlan_name: str, timeout=None) -> list[Station]:
        """Stations associated with the WLAN named *wlan_name* (exact match)."""
        return self._client.cmdstat(
            "getstat", "stamgr",
            payload=ET.Element("client", {"wlan": wlan_name, "USE_REGEX": encode_bool(False)}),
            decode=_decode_clients,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _docmd(self, attrs: dict[str, str], timeout=None) -> None:
        xcmd = ET.Element("xcmd", {"cmd": attrs.pop("cmd"), "tag": "client"})
        xcmd.attrib.update(attrs)
        log.debug("stamgr %s %s", xcmd.get("cmd"), xcmd.get("client"))
        self._client.cmdstat(
            "docmd", "stamgr",
            payload=xcmd,
            attrs={"xcmd": "stamgr"},
            timeout=timeout,
        )

    def set_favorite(self, mac: MacAddress, favorite: bool, timeout=None) -> None:
        self._docmd(
            {"cmd": "favourite", "enable": encode_int_bool(favorite), "client": encode_mac(mac)},
            timeout=timeout,
        )

    def set_legacy(self, mac: MacAddress, legacy: bool, timeout=None) -> None:
        """Mark the station as a legacy (IoT) device."""
        self._docmd(
            {"cmd": "mark-iot", "enable": encode_int_bool(legacy), "client": encode_mac(mac)},
            timeout=timeout,
        )

    def set_name(self, mac: MacAddress, name: str, timeout=None) -> None:
        """
        Override the station's automatic name.

        A renamed station is remembered after it disconnects (the controller
        keeps roughly 500 of them); an empty *name* forgets it again.
        """
        self._docmd({"cmd": "rename", "client": encode_mac(mac), "rename": name}, timeout=timeout)
