"""AP groups (``apgroup-list``): shared radio, mesh and LLDP settings."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .base import BOOL, ENABLED, INT, INT_BOOL, Attr, children, read_attrs

COMP = "apgroup-list"

_RADIO_ATTRS = (
    Attr("radio-type", "radio_type"),
    Attr("channel", "channel"),
    Attr("channelization", "channelization"),
    Attr("auto-channel-set", "auto_channel_set", BOOL),
    Attr("channel-set", "channel_set"),
    Attr("tx-power", "tx_power", INT),
    Attr("mix-mode", "mix_mode", INT),
    Attr("wlangroup-id", "wlangroup_id", INT),
    Attr("channel-outdoor", "channel_outdoor"),
    Attr("channel-select", "channel_select"),
    Attr("channel-outdoor-select", "channel_outdoor_select"),
    Attr("channel-indoor-select", "channel_indoor_select"),
    Attr("wmm-ac", "wmm_ac", INT_BOOL),
    Attr("spectralink-comp", "spectralink_comp"),
    Attr("vap-enabled", "vap_enabled", INT_BOOL),
)


@dataclass
class APGroupRadio:
    radio_type: str = ""
    channel: str = ""
    channelization: str = ""
    auto_channel_set: bool = False
    channel_set: str = ""
    tx_power: int = 0
    mix_mode: int = 0
    wlangroup_id: int = 0
    channel_outdoor: str = ""
    channel_select: str = ""
    channel_outdoor_select: str = ""
    channel_indoor_select: str = ""
    wmm_ac: bool = False
    spectralink_comp: str = ""
    vap_enabled: bool = False

    @classmethod
    def from_element(cls, element: ET.Element) -> "APGroupRadio":
        return cls(**read_attrs(element, _RADIO_ATTRS))


@dataclass
class LldpPort:
    id: str = ""
    lldp_on: bool = False

    @classmethod
    def from_element(cls, element: ET.Element) -> "LldpPort":
        return cls(**read_attrs(element, (
            Attr("id", "id"),
            Attr("lldp-on", "lldp_on", ENABLED),
        )))


_GROUP_ATTRS = (
    Attr("id", "id", INT),
    Attr("name", "name"),
    Attr("description", "description"),
)

# Single-element children of <ap-property>, flattened onto APGroup fields.
_PROPERTY_BLOCKS = (
    ("network", (Attr("ipmode", "ipmode", INT),)),
    ("mesh", (
        Attr("mesh-mode", "mesh_mode"),
        Attr("max-hops", "mesh_max_hops", INT),
    )),
    ("chanfly", (
        Attr("turnOff", "chanfly_turn_off", BOOL),
        Attr("turnOff-time", "chanfly_turn_off_time", INT),
    )),
    ("bonjourfencing", (
        Attr("enable", "bonjour_fencing", INT_BOOL),
        Attr("policy", "bonjour_fencing_policy", INT),
    )),
)

_LLDP_ATTRS = (
    Attr("lldp-interval", "lldp_interval", INT),
    Attr("lldp-holdtime", "lldp_holdtime", INT),
    Attr("enabled", "lldp_enabled", BOOL),
    Attr("lldp-mgmt", "lldp_mgmt", ENABLED),
)


@dataclass
class APGroup:
    id: int = 0
    name: str = ""
    description: str = ""

    radios: list[APGroupRadio] = field(default_factory=list)
    ipmode: int = 0
    mesh_mode: str = ""
    mesh_max_hops: int = 0
    chanfly_turn_off: bool = False
    chanfly_turn_off_time: int = 0
    bonjour_fencing: bool = False
    bonjour_fencing_policy: int = 0

    lldp_interval: int = 0
    lldp_holdtime: int = 0
    lldp_enabled: bool = False
    lldp_mgmt: bool = False
    lldp_ports: list[LldpPort] = field(default_factory=list)

    # Ids of the WLANs the group's APs broadcast.
    wlan_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element) -> "APGroup":
        values = read_attrs(element, _GROUP_ATTRS)

        prop = element.find("ap-property")
        if prop is not None:
            values["radios"] = children(prop, "radio", APGroupRadio.from_element)
            for tag, table in _PROPERTY_BLOCKS:
                block = prop.find(tag)
                if block is not None:
                    values.update(read_attrs(block, table))

        lldp = element.find("lldp")
        if lldp is not None:
            values.update(read_attrs(lldp, _LLDP_ATTRS))
            values["lldp_ports"] = children(lldp, "port", LldpPort.from_element)

        values["wlan_ids"] = children(element, "wlangroup/wlansvc", lambda w: int(w.get("id")))
        return cls(**values)


class APGroups:
    """AP-group operations bound to a :class:`~unleashed_web.client.Client`."""

    def __init__(self, client) -> None:
        self._client = client

    def list(self, timeout=None) -> list[APGroup]:
        return self._client.conf(
            "getconf", COMP,
            decrypt=False,
            decode=lambda el: children(el, "apgroup", APGroup.from_element),
            timeout=timeout,
        )
