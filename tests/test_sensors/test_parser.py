"""Tests for reader output parsing."""

from __future__ import annotations

import math

import pytest

from dht_accessory.domain.models import SensorKind
from dht_accessory.sensors.parser import (
    parse_float,
    parse_int,
    parse_output,
    parse_temperature_humidity,
    parse_temperature_only,
)


class TestParseFloat:
    """Tests for lenient numeric prefix parsing."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("41", 41.0),
            ("24.8", 24.8),
            ("  -3.5", -3.5),
            ("24.8C", 24.8),
            (".5", 0.5),
            ("1e2", 100.0),
        ],
    )
    def test_numeric_prefix(self, token: str, expected: float) -> None:
        """The longest numeric prefix is used."""
        assert parse_float(token) == pytest.approx(expected)

    @pytest.mark.parametrize("token", ["", "bad", "C", "%", None])
    def test_no_number_is_nan(self, token: str | None) -> None:
        """Tokens without a numeric prefix become NaN."""
        assert math.isnan(parse_float(token))

    def test_parse_int(self) -> None:
        """Status codes parse as integers, garbage as None."""
        assert parse_int("0") == 0
        assert parse_int("3") == 3
        assert parse_int("2.9") == 2
        assert parse_int("x") is None
        assert parse_int(None) is None


class TestTemperatureOnly:
    """Tests for the single-channel "<number> C" format."""

    def test_cputemp_output(self) -> None:
        """The number before the unit is the temperature."""
        sample = parse_temperature_only("41 C\n")
        assert sample.temperature == 41.0
        assert sample.humidity is None
        assert sample.status_code is None

    def test_whitespace_tolerated(self) -> None:
        """Leading and trailing whitespace is ignored."""
        assert parse_temperature_only("  47.2 C  ").temperature == pytest.approx(47.2)

    def test_garbage_yields_nan(self) -> None:
        """Unparseable output never raises."""
        assert math.isnan(parse_temperature_only("temp=?? C").temperature)
        assert math.isnan(parse_temperature_only("").temperature)


class TestTemperatureHumidity:
    """Tests for the "<status> <temp> C <humidity> %" format."""

    def test_good_record(self) -> None:
        """All three numeric fields are extracted."""
        sample = parse_temperature_humidity("0 24.8 C 50.3 %\n")
        assert sample.status_code == 0
        assert sample.temperature == pytest.approx(24.8)
        assert sample.humidity == pytest.approx(50.3)

    def test_tabs_and_repeated_spaces(self) -> None:
        """Fields split on runs of spaces and tabs."""
        sample = parse_temperature_humidity("3\t22.0  C \t48.0\t%")
        assert sample.status_code == 3
        assert sample.temperature == pytest.approx(22.0)
        assert sample.humidity == pytest.approx(48.0)

    def test_bad_temperature_keeps_humidity(self) -> None:
        """Each field converts independently."""
        sample = parse_temperature_humidity("0 bad C 50.3 %")
        assert sample.status_code == 0
        assert math.isnan(sample.temperature)
        assert sample.humidity == pytest.approx(50.3)

    def test_truncated_record(self) -> None:
        """Missing fields become NaN instead of raising."""
        sample = parse_temperature_humidity("0 24.8")
        assert sample.temperature == pytest.approx(24.8)
        assert math.isnan(sample.humidity)

    def test_unparseable_status(self) -> None:
        """A non-numeric status has no code."""
        assert parse_temperature_humidity("ERR 24.8 C 50.3 %").status_code is None


def test_parse_output_dispatches_on_kind() -> None:
    """parse_output picks the format from the sensor kind."""
    assert parse_output(SensorKind.TEMPERATURE_ONLY, "41 C").temperature == 41.0
    assert parse_output(SensorKind.TEMPERATURE_HUMIDITY, "0 24.8 C 50.3 %").humidity == pytest.approx(50.3)
