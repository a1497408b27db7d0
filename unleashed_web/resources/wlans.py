"""
WLAN services (``wlansvc-list``): configuration records, CRUD and live
per-WLAN statistics.

The controller performs no validation of its own when a WLAN is created or
updated, and has been seen crash-looping on bad records until the offending
WLAN is deleted from its CLI.  :meth:`Wlan.validate` runs before every write.
"""

from __future__ import annotations

import dataclasses
import enum
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from ..errors import FormatError, ValidationError
from ..logging_setup import log
from ..scalars import (
    ByteSeries,
    QueuePriority,
    SignalSeries,
    WeeklySchedule,
    decode_queue_priority,
    decode_schedule,
    encode_queue_priority,
    encode_schedule,
)
from .base import BOOL, BYTES, ENABLED, INT, INT_BOOL, SIGNAL, Codec, Attr, children, read_attrs, write_attrs

COMP = "wlansvc-list"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class WlanEncryption(str, enum.Enum):
    NONE = "none"
    WPA2 = "wpa2"
    WPA2_WPA3_MIXED = "wpa23mixed"
    WPA3 = "wpa3"
    OWE = "owe"

    @property
    def needs_psk(self) -> bool:
        return self in (WlanEncryption.WPA2, WlanEncryption.WPA2_WPA3_MIXED)

    @property
    def needs_sae(self) -> bool:
        return self in (WlanEncryption.WPA3, WlanEncryption.WPA2_WPA3_MIXED)


class WlanAuthentication(str, enum.Enum):
    OPEN = "open"
    EAP_8021X = "802.1x-eap"
    MAC = "mac-auth"


class WlanEapType(str, enum.Enum):
    PEAP = "PEAP"


class WlanEnablement(enum.IntEnum):
    ALWAYS_ON = 0
    ALWAYS_OFF = 1
    SCHEDULED = 2


def _text_enum(cls, first: int = 0):
    """Codec for a string enum that also accepts the member's ordinal, counted from *first*."""
    members = list(cls)

    def decode(text: str):
        try:
            return cls(text)
        except ValueError:
            pass
        if text.isdigit() and 0 <= int(text) - first < len(members):
            return members[int(text) - first]
        raise FormatError(f"invalid {cls.__name__} value: {text!r}", text)

    return Codec(decode, lambda member: member.value)


ENCRYPTION = _text_enum(WlanEncryption)
AUTHENTICATION = _text_enum(WlanAuthentication)
EAP_TYPE = _text_enum(WlanEapType, first=1)
ENABLEMENT = Codec(lambda text: WlanEnablement(int(text)), lambda e: str(int(e)))


# ---------------------------------------------------------------------------
# Nested blocks
# ---------------------------------------------------------------------------

_PSK_HEX_RE = re.compile(r"[0-9A-Fa-f]{64}")

_WPA_ATTRS = (
    Attr("x-passphrase", "x_passphrase"),
    Attr("passphrase", "passphrase"),
    Attr("cipher", "cipher"),
    Attr("x-sae-passphrase", "x_sae_passphrase"),
    Attr("sae-passphrase", "sae_passphrase"),
    Attr("dynamic-psk", "dynamic_psk", ENABLED),
    Attr("dynamic-psk-len", "dynamic_psk_len"),
    Attr("dpsk-type", "dpsk_type"),
)


def _check_psk(key: str, passphrase: str) -> None:
    if len(passphrase) < 8:
        raise ValidationError(f"invalid {key}: too short")
    if len(passphrase) > 63 and not _PSK_HEX_RE.fullmatch(passphrase):
        raise ValidationError(f"invalid {key}: too long")
    if passphrase.startswith(" ") or passphrase.endswith(" "):
        raise ValidationError(f"invalid {key}: must not start or end with a space")


def _check_sae(key: str, passphrase: str) -> None:
    if len(passphrase) < 8:
        raise ValidationError(f"invalid {key}: too short")
    if len(passphrase) > 63:
        raise ValidationError(f"invalid {key}: too long")
    if passphrase.startswith(" ") or passphrase.endswith(" "):
        raise ValidationError(f"invalid {key}: must not start or end with a space")


@dataclass
class WlanWpa:
    """
    WPA settings.  ``passphrase`` may be 8-63 characters or exactly 64 hex
    digits; the SAE passphrases 8-63 characters.  None may start or end with
    a space.
    """
    x_passphrase: str = field(default="", repr=False)
    passphrase: str = field(default="", repr=False)
    cipher: str = "aes"
    x_sae_passphrase: str = field(default="", repr=False)
    sae_passphrase: str = field(default="", repr=False)
    dynamic_psk: bool = False
    dynamic_psk_len: str = ""
    dpsk_type: str = ""

    @classmethod
    def from_element(cls, element: ET.Element) -> "WlanWpa":
        return cls(**read_attrs(element, _WPA_ATTRS))

    def to_element(self) -> ET.Element:
        return write_attrs(ET.Element("wpa"), self, _WPA_ATTRS)

    def validate(self, encryption: WlanEncryption) -> None:
        if encryption.needs_psk:
            _check_psk("passphrase", self.passphrase)
            _check_psk("x_passphrase", self.x_passphrase)
        if encryption.needs_sae:
            _check_sae("sae_passphrase", self.sae_passphrase)
            _check_sae("x_sae_passphrase", self.x_sae_passphrase)


_QOS_ATTRS = (
    Attr("uplink-preset", "uplink_preset"),
    Attr("downlink-preset", "downlink_preset"),
    Attr("perssid-uplink-preset", "perssid_uplink_preset", INT),
    Attr("perssid-downlink-preset", "perssid_downlink_preset", INT),
)


@dataclass
class WlanQos:
    uplink_preset: str = "DISABLE"
    downlink_preset: str = "DISABLE"
    perssid_uplink_preset: int = 0
    perssid_downlink_preset: int = 0

    @classmethod
    def from_element(cls, element: ET.Element) -> "WlanQos":
        return cls(**read_attrs(element, _QOS_ATTRS))

    def to_element(self) -> ET.Element:
        return write_attrs(ET.Element("qos"), self, _QOS_ATTRS)


# Single-element blocks flattened onto Wlan fields, in wire order.
_POLICY_BLOCKS = (
    ("rrm", (Attr("neighbor-report", "neighbor_report", ENABLED),)),
    ("smartcast", (Attr("mcast-filter", "mcast_filter", ENABLED),)),
)
_TRAILING_BLOCKS = (
    ("avp-policy", (
        Attr("avp-enabled", "avp_enabled", ENABLED),
        Attr("avpdeny-id", "avpdeny_id", INT),
    )),
    ("urlfiltering-policy", (
        Attr("urlfiltering-enabled", "urlfiltering_enabled", ENABLED),
        Attr("urlfiltering-id", "urlfiltering_id", INT),
    )),
    ("wificalling-policy", (
        Attr("wificalling-enabled", "wificalling_enabled", ENABLED),
        Attr("profile-id", "wificalling_profile_id", INT),
    )),
)


# ---------------------------------------------------------------------------
# WLAN record
# ---------------------------------------------------------------------------

_WLAN_ATTRS = (
    Attr("id", "id", INT),
    Attr("name", "name"),
    Attr("ssid", "ssid"),
    Attr("description", "description"),
    Attr("usage", "usage"),
    Attr("is-guest", "is_guest", BOOL),
    Attr("authentication", "authentication", AUTHENTICATION),
    Attr("eap-type", "eap_type", EAP_TYPE),
    Attr("encryption", "encryption", ENCRYPTION),
    Attr("enable-type", "enable_type", ENABLEMENT),
    Attr("allow-iot-connect", "allow_iot_connect", ENABLED),
    Attr("acctsvr-id", "acctsvr_id", INT),
    Attr("acct-upd-interval", "acct_upd_interval", INT),
    Attr("auto-provisioning", "auto_provisioning", ENABLED),
    Attr("close-system", "close_system", BOOL),
    Attr("vlan-id", "vlan_id", INT),
    Attr("dvlan", "dvlan", ENABLED),
    Attr("max-clients-per-radio", "max_clients_per_radio", INT),
    Attr("do-wmm-ac", "do_wmm_ac", ENABLED),
    Attr("acl-id", "acl_id", INT),
    Attr("policy-id", "policy_id"),
    Attr("devicepolicy-id", "devicepolicy_id"),
    Attr("fast-bss", "fast_bss", ENABLED),
    Attr("bgscan", "bgscan", INT_BOOL),
    Attr("balance", "balance", INT_BOOL),
    Attr("band-balance", "band_balance", INT_BOOL),
    Attr("do-802-11d", "do_80211d", ENABLED),
    Attr("wlan_bind", "wlan_bind", INT_BOOL),
    Attr("force-dhcp", "force_dhcp", INT_BOOL),
    Attr("force-dhcp-timeout", "force_dhcp_timeout", INT),
    Attr("max-idle-timeout", "max_idle_timeout", INT),
    Attr("idle-timeout", "idle_timeout", BOOL),
    Attr("client-isolation", "client_isolation", ENABLED),
    Attr("ci-whitelist-id", "ci_whitelist_id", INT),
    Attr("dtim-period", "dtim_period", INT),
    Attr("directed-mbc", "directed_mbc", INT),
    Attr("client-flow-log", "client_flow_log", ENABLED),
    Attr("export-client-log", "export_client_log", BOOL),
    Attr("wifi6", "wifi6", BOOL),
    Attr("do-802-11w", "do_80211w", INT_BOOL),
    Attr("web-auth", "web_auth", ENABLED),
    Attr("https-redirection", "https_redirection", ENABLED),
    Attr("ofdm-rate-only", "ofdm_rate_only", BOOL),
    Attr("bss-minrate", "bss_minrate", INT),
    Attr("tx-rate-config", "tx_rate_config", INT),
    Attr("called-station-id-type", "called_station_id_type", INT),
    Attr("option82", "option82", INT),
    Attr("option82-opt1", "option82_opt1", INT),
    Attr("option82-opt2", "option82_opt2", INT),
    Attr("option82-opt150", "option82_opt150", INT),
    Attr("option82-opt151", "option82_opt151", INT),
    Attr("dis-dgaf", "dis_dgaf", INT),
    Attr("parp", "parp", INT),
    Attr("authstats", "authstats", INT),
    Attr("sta-info-extraction", "sta_info_extraction", INT_BOOL),
    Attr("pool-id", "pool_id"),
    Attr("local-bridge", "local_bridge", INT_BOOL),
    Attr("dhcpsvr-id", "dhcpsvr_id", INT),
    Attr("precedence-id", "precedence_id", INT),
    Attr("role-based-access-ctrl", "role_based_access_ctrl", BOOL),
    Attr("option82-areaName", "option82_area_name"),
    Attr("guestservice-id", "guestservice_id", INT),
    Attr("authsvr-id", "authsvr_id"),
    Attr("wlan-survivability", "wlan_survivability"),
    Attr("mac-addr-format", "mac_addr_format"),
)


@dataclass
class Wlan:
    id: Optional[int] = None
    name: str = ""
    ssid: str = ""
    description: str = ""
    usage: str = ""
    is_guest: bool = False

    authentication: WlanAuthentication = WlanAuthentication.OPEN
    eap_type: Optional[WlanEapType] = None
    encryption: WlanEncryption = WlanEncryption.NONE
    # Required for WPA2/WPA3 encryption, forbidden for none and OWE.
    wpa: Optional[WlanWpa] = None
    enable_type: WlanEnablement = WlanEnablement.ALWAYS_ON

    allow_iot_connect: bool = False
    acctsvr_id: int = 0
    acct_upd_interval: int = 0
    auto_provisioning: bool = False
    close_system: bool = False
    vlan_id: int = 0
    dvlan: bool = False
    max_clients_per_radio: int = 0
    do_wmm_ac: bool = False
    acl_id: int = 0
    policy_id: str = ""
    devicepolicy_id: str = ""
    fast_bss: bool = False
    bgscan: bool = False
    balance: bool = False
    band_balance: bool = False
    do_80211d: bool = False
    wlan_bind: bool = False
    force_dhcp: bool = False
    force_dhcp_timeout: int = 0
    max_idle_timeout: int = 0
    idle_timeout: bool = False
    client_isolation: bool = False
    ci_whitelist_id: int = 0
    dtim_period: int = 0
    directed_mbc: int = 0
    client_flow_log: bool = False
    export_client_log: bool = False
    wifi6: bool = False
    do_80211w: bool = False
    web_auth: bool = False
    https_redirection: bool = False
    ofdm_rate_only: bool = False
    bss_minrate: int = 0
    tx_rate_config: int = 0
    called_station_id_type: int = 0
    option82: int = 0
    option82_opt1: int = 0
    option82_opt2: int = 0
    option82_opt150: int = 0
    option82_opt151: int = 0
    dis_dgaf: int = 0
    parp: int = 0
    authstats: int = 0
    sta_info_extraction: bool = False
    pool_id: str = ""
    local_bridge: bool = False
    dhcpsvr_id: int = 0
    precedence_id: int = 0
    role_based_access_ctrl: bool = False
    option82_area_name: str = ""
    guestservice_id: int = 0
    authsvr_id: str = ""
    wlan_survivability: str = ""
    mac_addr_format: str = ""

    queue_priority: QueuePriority = QueuePriority.LOW
    qos: WlanQos = field(default_factory=WlanQos)
    neighbor_report: bool = False
    mcast_filter: bool = False
    schedule: WeeklySchedule = field(default_factory=WeeklySchedule)
    avp_enabled: bool = False
    avpdeny_id: int = 0
    urlfiltering_enabled: bool = False
    urlfiltering_id: int = 0
    wificalling_enabled: bool = False
    wificalling_profile_id: int = 0

    @classmethod
    def from_element(cls, element: ET.Element) -> "Wlan":
        values = read_attrs(element, _WLAN_ATTRS)

        wpa = element.find("wpa")
        if wpa is not None:
            values["wpa"] = WlanWpa.from_element(wpa)
        priority = element.find("queue-priority")
        if priority is not None:
            values["queue_priority"] = decode_queue_priority(priority)
        qos = element.find("qos")
        if qos is not None:
            values["qos"] = WlanQos.from_element(qos)
        schedule = element.find("wlan-schedule")
        if schedule is not None:
            text = schedule.get("value")
            if text is None:
                raise FormatError("invalid WLAN schedule: no value attribute")
            values["schedule"] = decode_schedule(text)
        for tag, table in _POLICY_BLOCKS + _TRAILING_BLOCKS:
            block = element.find(tag)
            if block is not None:
                values.update(read_attrs(block, table))
        return cls(**values)

    def to_element(self, tag: str = "wlansvc") -> ET.Element:
        element = write_attrs(ET.Element(tag), self, _WLAN_ATTRS)
        if self.wpa is not None:
            element.append(self.wpa.to_element())
        element.append(encode_queue_priority(self.queue_priority))
        element.append(self.qos.to_element())
        for block, table in _POLICY_BLOCKS:
            write_attrs(ET.SubElement(element, block), self, table)
        ET.SubElement(element, "wlan-schedule", {"value": encode_schedule(self.schedule)})
        for block, table in _TRAILING_BLOCKS:
            write_attrs(ET.SubElement(element, block), self, table)
        return element

    def validate(self) -> None:
        """Raise :class:`ValidationError` if the controller must not see this record."""
        if not self.name:
            raise ValidationError("WLAN name must be set")
        if not self.description:
            raise ValidationError("WLAN description must be set")
        if not 2 <= len(self.ssid) <= 32:
            raise ValidationError("SSID must be between 2 and 32 characters")

        needs_wpa = self.encryption.needs_psk or self.encryption.needs_sae
        if needs_wpa and self.wpa is None:
            raise ValidationError(f"{self.encryption.value} encryption requires WPA settings")
        if self.wpa is not None and not needs_wpa:
            raise ValidationError(f"{self.encryption.value} encryption forbids WPA settings")
        if self.wpa is not None:
            self.wpa.validate(self.encryption)


def new_wlan(name: str) -> Wlan:
    """An open, always-on WLAN with the web UI's defaults."""
    return Wlan(
        name=name,
        ssid=name,
        description=name,
        usage="user",
        authentication=WlanAuthentication.OPEN,
        acct_upd_interval=10,
        vlan_id=1,
        max_clients_per_radio=100,
        enable_type=WlanEnablement.ALWAYS_ON,
        acl_id=1,
        do_80211d=True,
        force_dhcp_timeout=10,
        max_idle_timeout=300,
        idle_timeout=True,
        dtim_period=1,
        directed_mbc=1,
        wifi6=True,
        tx_rate_config=1,
        sta_info_extraction=True,
        precedence_id=1,
        queue_priority=QueuePriority.HIGH,
        qos=WlanQos(),
    )


# ---------------------------------------------------------------------------
# Live status
# ---------------------------------------------------------------------------

_HISTORY_ATTRS = (
    Attr("rx-bytes", "rx_bytes", BYTES),
    Attr("tx-bytes", "tx_bytes", BYTES),
    Attr("rssi", "rssi", SIGNAL),
)

_STATUS_ATTRS = (
    Attr("id", "id", INT),
    Attr("ssid", "ssid"),
    Attr("assoc-stas", "assoc_stas", INT),
    Attr("state", "state"),
)


@dataclass
class WlanHistory:
    rx_bytes: ByteSeries = field(default_factory=ByteSeries)
    tx_bytes: ByteSeries = field(default_factory=ByteSeries)
    rssi: SignalSeries = field(default_factory=SignalSeries)


@dataclass
class WlanStatus:
    id: int = 0
    ssid: str = ""
    assoc_stas: int = 0
    state: str = ""
    history: WlanHistory = field(default_factory=WlanHistory)

    @classmethod
    def from_element(cls, element: ET.Element) -> "WlanStatus":
        history = element.find("history")
        return cls(
            **read_attrs(element, _STATUS_ATTRS),
            history=WlanHistory() if history is None else WlanHistory(**read_attrs(history, _HISTORY_ATTRS)),
        )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class Wlans:
    """WLAN operations bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def list(self, timeout=None) -> list[Wlan]:
        return self._client.conf(
            "getconf", COMP,
            decrypt=True,
            decode=lambda el: children(el, "wlansvc", Wlan.from_element),
            timeout=timeout,
        )

    def create(self, wlan: Wlan, timeout=None) -> Wlan:
        """Add *wlan* (its ``id`` is ignored) and return the stored record."""
        wlan = dataclasses.replace(wlan, id=None)
        wlan.validate()
        log.info("Creating WLAN %r", wlan.name)
        return self._client.conf("addobj", COMP, payload=wlan, decode=Wlan.from_element, timeout=timeout)

    def update(self, wlan: Wlan, timeout=None) -> None:
        """Replace the stored record with the same ``id``."""
        if wlan.id is None:
            raise ValidationError("WLAN id must be set to update")
        wlan.validate()
        log.info("Updating WLAN %d (%r)", wlan.id, wlan.name)
        self._client.conf("updobj", COMP, payload=wlan, timeout=timeout)

    def delete(self, wlan_id: int, timeout=None) -> None:
        log.info("Deleting WLAN %d", wlan_id)
        self._client.conf(
            "delobj", COMP,
            payload=ET.Element("wlansvc", {"id": str(wlan_id)}),
            timeout=timeout,
        )

    def list_statuses(self, timeout=None) -> list[WlanStatus]:
        return self._client.cmdstat(
            "getstat", "stamgr",
            payload=ET.Element("wlan", {"LEVEL": "1", "PERIOD": "3600"}),
            decode=lambda resp: children(resp, "apstamgr-stat/wlan", WlanStatus.from_element),
            timeout=timeout,
        )
