from __future__ import annotations

from typing import Optional

from ..domain.models import ParsedSample, StatusOutcome

# Status codes printed by the DHTXXD reader. On any non-zero status the reader
# repeats its last good temperature/humidity, so those values are not fresh.
DHT_GOOD = 0
DHT_BAD_CHECKSUM = 1
DHT_BAD_DATA = 2
DHT_TIMEOUT = 3

_OUTCOMES = {
    DHT_GOOD: StatusOutcome.GOOD,
    DHT_BAD_CHECKSUM: StatusOutcome.BAD_CHECKSUM,
    DHT_BAD_DATA: StatusOutcome.BAD_DATA,
    DHT_TIMEOUT: StatusOutcome.TIMEOUT,
}


def classify_status(status_code: Optional[int]) -> StatusOutcome:
    if status_code is None:
        return StatusOutcome.UNKNOWN
    return _OUTCOMES.get(status_code, StatusOutcome.UNKNOWN)


def classify(sample: ParsedSample, has_status: bool) -> StatusOutcome:
    """Single-channel readers print no status and count as good."""
    if not has_status:
        return StatusOutcome.GOOD
    return classify_status(sample.status_code)
