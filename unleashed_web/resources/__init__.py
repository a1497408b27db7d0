"""
unleashed_web.resources
=======================
Typed accessors for the controller's configuration and statistics
components, each bound to a :class:`~unleashed_web.client.Client`.
"""

from .aaa       import AuthServer, AuthServers, RadiusEndpoint
from .ap_groups import APGroup, APGroupRadio, APGroups, LldpPort
from .aps       import APs, APHistory, APRadio, APStatus, AccessPoint
from .snmp      import Snmp, SnmpTrap, SnmpTrapUser, SnmpUser, SnmpV2, SnmpV3
from .stations  import Station, Stations
from .sysinfo   import Sysinfo, get_sysinfo
from .wlans     import (
    Wlan,
    WlanAuthentication,
    WlanEapType,
    WlanEnablement,
    WlanEncryption,
    WlanHistory,
    WlanQos,
    WlanStatus,
    WlanWpa,
    Wlans,
    new_wlan,
)

__all__ = [
    "AuthServer", "AuthServers", "RadiusEndpoint",
    "APGroup", "APGroupRadio", "APGroups", "LldpPort",
    "APs", "APHistory", "APRadio", "APStatus", "AccessPoint",
    "Snmp", "SnmpTrap", "SnmpTrapUser", "SnmpUser", "SnmpV2", "SnmpV3",
    "Station", "Stations",
    "Sysinfo", "get_sysinfo",
    "Wlan", "WlanAuthentication", "WlanEapType", "WlanEnablement",
    "WlanEncryption", "WlanHistory", "WlanQos", "WlanStatus", "WlanWpa",
    "Wlans", "new_wlan",
]
