"""
unleashed_web
=============
Python client for the XML web-admin interface of Ruckus Unleashed wireless
controllers: log in, keep the CSRF token fresh, and read or change
configuration and live statistics.

Package structure
-----------------
unleashed_web/
├── __init__.py       – package init and public API
├── config.py         – configuration constants (paths, limits, env defaults)
├── errors.py         – exception hierarchy
├── logging_setup.py  – shared logger and colour handler
├── scalars.py        – wire codecs: booleans, MACs, timestamps, series, schedule
├── envelope.py       – <ajax-request>/<ajax-response> conf and cmdstat calls
├── client.py         – Client facade
├── network/          – requests.Session factory and capped body reads
├── auth/             – session state, login page parsing, token refresh
└── resources/        – sysinfo, APs, AP groups, WLANs, stations, SNMP, AAA servers

Quick start
-----------
    from unleashed_web import Client

    with Client("192.168.0.1", "admin", "secret", verify_ssl=False) as c:
        print(c.sysinfo().version)
        for wlan in c.wlans.list():
            print(wlan.id, wlan.ssid, wlan.encryption.value)
"""

from .auth     import Credentials, LoginResult, SingleFlightRefresher
from .client   import Client
from .errors   import (
    ApplicationError,
    AuthError,
    DecodeError,
    FormatError,
    ProtocolError,
    ResponseTooLarge,
    TransportError,
    UnleashedError,
    ValidationError,
)
from .scalars  import MacAddress, QueuePriority, WeeklySchedule

__all__ = [
    "Client",
    "Credentials",
    "LoginResult",
    "SingleFlightRefresher",
    "ApplicationError",
    "AuthError",
    "DecodeError",
    "FormatError",
    "ProtocolError",
    "ResponseTooLarge",
    "TransportError",
    "UnleashedError",
    "ValidationError",
    "MacAddress",
    "QueuePriority",
    "WeeklySchedule",
]
