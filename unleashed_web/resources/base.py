"""Attribute mapping shared by the resource records."""

from __future__ import annotations

import ipaddress
import xml.etree.ElementTree as ET
from typing import Any, Callable, NamedTuple

from .. import scalars


class Codec(NamedTuple):
    decode: Callable[[str], Any]
    encode: Callable[[Any], str]


TEXT      = Codec(str, str)
INT       = Codec(int, str)
BOOL      = Codec(scalars.parse_bool, scalars.encode_bool)
ENABLED   = Codec(scalars.decode_enabled_bool, scalars.encode_enabled_bool)
INT_BOOL  = Codec(scalars.decode_int_bool, scalars.encode_int_bool)
MAC       = Codec(scalars.decode_mac, scalars.encode_mac)
TIMESTAMP = Codec(scalars.decode_timestamp, scalars.encode_timestamp)
IP        = Codec(ipaddress.ip_address, str)
BYTES     = Codec(scalars.decode_byte_series, scalars.encode_byte_series)
SIGNAL    = Codec(scalars.decode_signal_series, scalars.encode_signal_series)


class Attr(NamedTuple):
    """One XML attribute ↔ dataclass field mapping."""
    xml: str
    field: str
    codec: Codec = TEXT


def read_attrs(element: ET.Element, table: tuple[Attr, ...]) -> dict[str, Any]:
    """
    Decode the attributes of *element* listed in *table*.

    Absent attributes are skipped so the record's defaults apply; an empty
    string is only kept for text fields.
    """
    values = {}
    for a in table:
        raw = element.get(a.xml)
        if raw is None or (raw == "" and a.codec is not TEXT):
            continue
        values[a.field] = a.codec.decode(raw)
    return values


def write_attrs(element: ET.Element, record: Any, table: tuple[Attr, ...]) -> ET.Element:
    for a in table:
        value = getattr(record, a.field)
        if value is not None:
            element.set(a.xml, a.codec.encode(value))
    return element


def children(element: ET.Element, tag: str, decode: Callable[[ET.Element], Any]) -> list:
    return [decode(child) for child in element.findall(tag)]
