"""
unleashed_web.scalars
=====================
Text codecs for the primitives the controller encodes unconventionally.

Every decoder raises :class:`~unleashed_web.errors.FormatError` naming the
offending text; encoders never fail for well-typed input.

* ``enabled``/``disabled`` and ``1``/``0`` booleans
* hardware (MAC) addresses
* Unix-epoch timestamps
* byte-counter and signal-quality time series (flat comma lists)
* the WLAN queue priority (a 4-attribute element with two legal shapes)
* the weekly WLAN schedule (28 colon-separated hex words)
"""

from __future__ import annotations

import enum
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import NamedTuple

from .errors import FormatError

_UINT64_MAX = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Booleans
# ---------------------------------------------------------------------------

def encode_enabled_bool(value: bool) -> str:
    return "enabled" if value else "disabled"


def decode_enabled_bool(text: str) -> bool:
    if text == "enabled":
        return True
    if text == "disabled":
        return False
    raise FormatError(f"invalid enabled/disabled boolean: {text!r}", text)


def encode_int_bool(value: bool) -> str:
    return "1" if value else "0"


def decode_int_bool(text: str) -> bool:
    if text == "1":
        return True
    if text == "0":
        return False
    raise FormatError(f"invalid integer boolean: {text!r}", text)


_PLAIN_BOOLS = {
    "1": True, "t": True, "true": True,
    "0": False, "f": False, "false": False,
}


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_bool(text: str) -> bool:
    """Parse the controller's plain ``true``/``false`` attributes."""
    try:
        return _PLAIN_BOOLS[text.lower()]
    except KeyError:
        raise FormatError(f"invalid boolean: {text!r}", text) from None


# ---------------------------------------------------------------------------
# Hardware addresses
# ---------------------------------------------------------------------------

_MAC_LENGTHS = (6, 8, 20)   # EUI-48, EUI-64, 20-octet IPoIB
_OCTET_RE = re.compile(r"[0-9A-Fa-f]{2}")


def _parse_mac(text: str) -> bytes:
    if "." in text:
        # Dotted notation: 0000.5e00.5301
        groups = text.split(".")
        if any(len(g) != 4 for g in groups):
            raise ValueError("dotted groups must be 4 hex digits")
        octets = [g[i:i + 2] for g in groups for i in (0, 2)]
    else:
        octets = text.split(":" if ":" in text else "-")
    if len(octets) not in _MAC_LENGTHS:
        raise ValueError(f"unexpected address length {len(octets)}")
    for octet in octets:
        if not _OCTET_RE.fullmatch(octet):
            raise ValueError(f"invalid octet {octet!r}")
    return bytes(int(o, 16) for o in octets)


class MacAddress:
    """An immutable hardware address rendered as ``aa:bb:cc:dd:ee:ff``."""

    __slots__ = ("_octets",)

    def __init__(self, octets: bytes) -> None:
        if len(octets) not in _MAC_LENGTHS:
            raise ValueError(f"hardware address must be 6, 8 or 20 octets, got {len(octets)}")
        self._octets = bytes(octets)

    @classmethod
    def parse(cls, text: str) -> "MacAddress":
        try:
            return cls(_parse_mac(text))
        except ValueError as exc:
            raise FormatError(f"invalid hardware address {text!r}: {exc}", text) from exc

    @property
    def octets(self) -> bytes:
        return self._octets

    def __str__(self) -> str:
        return ":".join(f"{b:02x}" for b in self._octets)

    def __repr__(self) -> str:
        return f"MacAddress('{self}')"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MacAddress):
            return self._octets == other._octets
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._octets)


def encode_mac(mac: MacAddress) -> str:
    return str(mac)


def decode_mac(text: str) -> MacAddress:
    return MacAddress.parse(text)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def encode_timestamp(at: datetime) -> str:
    return str(int(at.timestamp()))


def _epoch(text: str) -> datetime:
    if not re.fullmatch(r"-?[0-9]+", text):
        raise FormatError(f"invalid timestamp: {text!r}", text)
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise FormatError(f"timestamp out of range: {text!r}", text) from exc


def decode_timestamp(text: str) -> datetime:
    return _epoch(text)


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

def _counter(text: str, limit: int = _UINT64_MAX) -> int:
    if not re.fullmatch(r"[0-9]+", text):
        raise FormatError(f"invalid counter: {text!r}", text)
    value = int(text)
    if value > limit:
        raise FormatError(f"counter out of range: {text!r}", text)
    return value


def _tokens(text: str) -> list[str]:
    return text.split(",") if text else []


class ByteSample(NamedTuple):
    at: datetime
    count: int


class ByteSeries(list):
    """Byte counters sampled over time, oldest first."""


def encode_byte_series(series: list[ByteSample]) -> str:
    return ",".join(f"{encode_timestamp(s.at)},{s.count}" for s in series)


def decode_byte_series(text: str) -> ByteSeries:
    tokens = _tokens(text)
    if len(tokens) % 2:
        raise FormatError("invalid time series: odd number of elements", text)
    series = ByteSeries()
    for i in range(0, len(tokens), 2):
        series.append(ByteSample(_epoch(tokens[i]), _counter(tokens[i + 1])))
    return series


class SignalSample(NamedTuple):
    at: datetime
    excellent: int
    moderate: int
    poor: int


class SignalSeries(list):
    """
    Per-sample counts of stations with excellent, moderate and poor signal.

    ``trailing`` holds a lone final token the controller sometimes appends
    after the last complete record; it is ``None`` otherwise.
    """

    def __init__(self, samples=(), trailing: int | None = None) -> None:
        super().__init__(samples)
        self.trailing = trailing

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SignalSeries):
            return list.__eq__(self, other) and self.trailing == other.trailing
        return list.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result


_U32_MAX = (1 << 32) - 1


def encode_signal_series(series: list[SignalSample]) -> str:
    parts = [
        f"{encode_timestamp(s.at)},{s.excellent},{s.moderate},{s.poor}"
        for s in series
    ]
    trailing = getattr(series, "trailing", None)
    if trailing is not None:
        parts.append(str(trailing))
    return ",".join(parts)


def decode_signal_series(text: str, strict: bool = False) -> SignalSeries:
    """
    Decode a flat ``epoch,excellent,moderate,poor,…`` list.

    A single leftover token after the last complete record is kept as
    ``SignalSeries.trailing`` unless *strict* is set.
    """
    tokens = _tokens(text)
    leftover = len(tokens) % 4
    if leftover and (strict or leftover != 1):
        raise FormatError(
            "invalid time series: number of elements not divisible by 4", text
        )
    series = SignalSeries()
    whole = len(tokens) - leftover
    for i in range(0, whole, 4):
        series.append(SignalSample(
            _epoch(tokens[i]),
            _counter(tokens[i + 1], _U32_MAX),
            _counter(tokens[i + 2], _U32_MAX),
            _counter(tokens[i + 3], _U32_MAX),
        ))
    if leftover:
        series.trailing = _counter(tokens[-1])
    return series


# ---------------------------------------------------------------------------
# WLAN queue priority
# ---------------------------------------------------------------------------

PRIORITY_FIELDS = ("voice", "video", "data", "background")


class QueuePriority(enum.Enum):
    """
    Access-category queue mapping of a WLAN.

    The member values are the only ``(voice, video, data, background)``
    tuples the controller accepts; decoding looks the tuple up here and
    encoding writes the member's tuple back out.
    """

    HIGH = (0, 2, 4, 6)
    LOW = (1, 3, 5, 7)

    @classmethod
    def from_bool(cls, high: bool) -> "QueuePriority":
        return cls.HIGH if high else cls.LOW


def decode_queue_priority(element: ET.Element) -> QueuePriority:
    try:
        values = tuple(int(element.get(name) or 0) for name in PRIORITY_FIELDS)
    except ValueError as exc:
        raise FormatError(f"invalid queue priority: {exc}", ET.tostring(element, encoding="unicode")) from exc
    try:
        return QueuePriority(values)
    except ValueError:
        raise FormatError(
            f"queue priority {values} is neither HIGH nor LOW", str(values)
        ) from None


def encode_queue_priority(priority: QueuePriority, tag: str = "queue-priority") -> ET.Element:
    return ET.Element(tag, {name: str(v) for name, v in zip(PRIORITY_FIELDS, priority.value)})


# ---------------------------------------------------------------------------
# Weekly schedule
# ---------------------------------------------------------------------------

DAYS_PER_WEEK = 7
SLOTS_PER_DAY = 96      # 15-minute slots, UTC
SLOTS_PER_WORD = 24
WORDS_PER_DAY = SLOTS_PER_DAY // SLOTS_PER_WORD
SCHEDULE_WORDS = DAYS_PER_WEEK * WORDS_PER_DAY

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")


class WeeklySchedule:
    """
    When a WLAN is enabled over a 7-day week.

    ``days[0]`` is Sunday; slot 0 of a day is 00:00-00:15 UTC, slot 1 is
    00:15-00:30 UTC and so on up to slot 95.
    """

    def __init__(self, days: list[list[bool]] | None = None) -> None:
        if days is None:
            days = [[False] * SLOTS_PER_DAY for _ in range(DAYS_PER_WEEK)]
        if len(days) != DAYS_PER_WEEK or any(len(d) != SLOTS_PER_DAY for d in days):
            raise ValueError("schedule must be 7 days of 96 slots")
        self.days = [list(map(bool, d)) for d in days]

    @classmethod
    def always(cls) -> "WeeklySchedule":
        return cls([[True] * SLOTS_PER_DAY for _ in range(DAYS_PER_WEEK)])

    def is_enabled(self, day: int, slot: int) -> bool:
        return self.days[day][slot]

    def set(self, day: int, slot: int, enabled: bool = True) -> None:
        self.days[day][slot] = enabled

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WeeklySchedule):
            return self.days == other.days
        return NotImplemented

    def __repr__(self) -> str:
        return f"WeeklySchedule({encode_schedule(self)!r})"


def encode_schedule(schedule: WeeklySchedule) -> str:
    words = []
    for day in schedule.days:
        for chunk in range(WORDS_PER_DAY):
            word = 0
            for bit in range(SLOTS_PER_WORD):
                if day[chunk * SLOTS_PER_WORD + bit]:
                    word |= 1 << bit
            words.append(f"0x{word:x}")
    return ":".join(words)


def decode_schedule(text: str) -> WeeklySchedule:
    # Anything past the 28th separator stays in the last word and fails there.
    words = text.split(":", SCHEDULE_WORDS - 1)
    if len(words) < SCHEDULE_WORDS:
        raise FormatError("invalid WLAN schedule: not enough words", text)

    schedule = WeeklySchedule()
    for i, raw in enumerate(words):
        if len(raw) < 3 or not raw.startswith("0x"):
            raise FormatError(f"invalid WLAN schedule: invalid word {raw!r}", text)
        digits = raw[2:]
        if not _HEX_RE.fullmatch(digits):
            raise FormatError(f"invalid WLAN schedule: invalid word {raw!r}", text)
        word = int(digits, 16)
        if word > _UINT64_MAX:
            raise FormatError(f"invalid WLAN schedule: word {raw!r} out of range", text)

        day = schedule.days[i // WORDS_PER_DAY]
        base = (i % WORDS_PER_DAY) * SLOTS_PER_WORD
        for bit in range(SLOTS_PER_WORD):
            day[base + bit] = bool(word & 1)
            word >>= 1
        if word:
            raise FormatError(f"invalid WLAN schedule: word {raw!r} has too many bits", text)
    return schedule
