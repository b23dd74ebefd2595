"""
Parsers for the text printed by the reader programs.

    cputemp:  "41 C"
    dht22:    "0 24.8 C 50.3 %"   (status, temperature, unit, humidity, unit)

Numbers are read the lenient way the readers' consumers always have: the
longest numeric prefix of a token wins ("24.8C" -> 24.8) and a token with no
numeric prefix becomes NaN. These functions never raise on bad input.
"""
from __future__ import annotations

import math
import re
from typing import Optional

from ..domain.models import ParsedSample, SensorKind

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FIELD_SEP = re.compile(r"[ \t]+")

# dht22 record layout
STATUS_IDX = 0
TEMPERATURE_IDX = 1
HUMIDITY_IDX = 3


def parse_float(token: Optional[str]) -> float:
    if token is None:
        return math.nan
    m = _FLOAT_PREFIX.match(token)
    if not m:
        return math.nan
    return float(m.group(1).replace("Infinity", "inf"))


def parse_int(token: Optional[str]) -> Optional[int]:
    if token is None:
        return None
    m = _INT_PREFIX.match(token)
    return int(m.group(1)) if m else None


def _token(tokens: list[str], idx: int) -> Optional[str]:
    return tokens[idx] if idx < len(tokens) else None


def parse_temperature_only(text: str) -> ParsedSample:
    return ParsedSample(
        temperature=parse_float(text),
        raw_tokens=tuple(text.split()),
    )


def parse_temperature_humidity(text: str) -> ParsedSample:
    tokens = _FIELD_SEP.split(text.strip())
    return ParsedSample(
        status_code=parse_int(_token(tokens, STATUS_IDX)),
        temperature=parse_float(_token(tokens, TEMPERATURE_IDX)),
        humidity=parse_float(_token(tokens, HUMIDITY_IDX)),
        raw_tokens=tuple(tokens),
    )


def parse_output(kind: SensorKind, text: str) -> ParsedSample:
    if kind is SensorKind.TEMPERATURE_HUMIDITY:
        return parse_temperature_humidity(text)
    return parse_temperature_only(text)
