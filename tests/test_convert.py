"""Tests for the wire converters."""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import httpx
import pytest
from randomorg_wire import convert
from randomorg_wire.convert import ApiKeyStatus


class TestDecimals:
    def test_integral_decimal_is_written_as_integer(self):
        assert json.dumps(convert.decimal_to_json(Decimal("5.0"))) == "5"
        assert json.dumps(convert.decimal_to_json(Decimal("-3.000"))) == "-3"

    def test_fractional_decimal_is_written_as_float(self):
        assert json.dumps(convert.decimal_to_json(Decimal("5.25"))) == "5.25"

    @pytest.mark.parametrize("literal", ["5", "5.25", "-0.5", "1e-05", "123456.789"])
    def test_json_literal_reads_back_exactly(self, literal):
        value = json.loads(literal)
        assert convert.json_to_decimal(value) == Decimal(literal)

    def test_parse_float_decimal_is_kept(self):
        value = json.loads("0.1234567890123456789", parse_float=Decimal)
        assert convert.json_to_decimal(value) == Decimal("0.1234567890123456789")

    @pytest.mark.parametrize("bad", [True, "1.5", None, [1]])
    def test_non_numbers_rejected(self, bad):
        with pytest.raises(ValueError):
            convert.json_to_decimal(bad)

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError, match="non-finite"):
            convert.decimal_to_json(Decimal("NaN"))

    def test_json_to_int_rejects_bool_and_float(self):
        assert convert.json_to_int(7) == 7
        with pytest.raises(ValueError):
            convert.json_to_int(True)
        with pytest.raises(ValueError):
            convert.json_to_int(7.0)


class TestTimestamps:
    def test_parse_seven_digit_fraction(self):
        ts = convert.parse_timestamp("2018-05-06 18:24:45.1234567Z")
        assert ts == datetime(2018, 5, 6, 18, 24, 45, 123456, tzinfo=timezone.utc)
        assert ts.ticks == 7
        assert convert.format_timestamp(ts) == "2018-05-06 18:24:45.1234567Z"

    def test_seventh_digit_without_microseconds(self):
        ts = convert.Timestamp(2018, 5, 6, 18, 24, 45, 0, tzinfo=timezone.utc, ticks=3)
        assert convert.format_timestamp(ts) == "2018-05-06 18:24:45.0000003Z"
        with pytest.raises(ValueError):
            convert.Timestamp(2018, 5, 6, ticks=10)

    def test_arithmetic_gives_a_plain_instant(self):
        ts = convert.parse_timestamp("2018-05-06 18:24:45.1234567Z")
        later = ts + timedelta(seconds=1)
        assert later == datetime(2018, 5, 6, 18, 24, 46, 123456, tzinfo=timezone.utc)
        assert getattr(later, "ticks", 0) == 0

    def test_parse_without_fraction(self):
        ts = convert.parse_timestamp("2011-10-10 13:19:12Z")
        assert ts == datetime(2011, 10, 10, 13, 19, 12, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "text",
        ["2011-10-10T13:19:12Z", "2011-10-10 13:19:12", "2011-10-10 13:19:12.12345678Z", "", 5],
    )
    def test_parse_rejects(self, text):
        with pytest.raises(ValueError):
            convert.parse_timestamp(text)

    @pytest.mark.parametrize(
        "text",
        [
            "2011-10-10 13:19:12Z",
            "2018-05-06 18:24:45.5Z",
            "2018-05-06 18:24:45.123456Z",
            "2018-05-06 18:24:45.1234567Z",
            "2018-05-06 18:24:45.0000001Z",
        ],
    )
    def test_format_writes_back_what_was_parsed(self, text):
        assert convert.format_timestamp(convert.parse_timestamp(text)) == text

    def test_round_trip_to_microsecond(self):
        ts = datetime(2020, 2, 29, 23, 59, 59, 999999, tzinfo=timezone.utc)
        assert convert.parse_timestamp(convert.format_timestamp(ts)) == ts

    def test_naive_is_utc_and_aware_is_converted(self):
        naive = datetime(2020, 1, 1, 12, 0, 0)
        plus_two = datetime(2020, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert convert.format_timestamp(naive) == "2020-01-01 12:00:00Z"
        assert convert.format_timestamp(plus_two) == "2020-01-01 12:00:00Z"


class TestDurations:
    def test_milliseconds(self):
        assert convert.milliseconds_to_timedelta(1500) == timedelta(seconds=1.5)
        assert convert.timedelta_to_milliseconds(timedelta(seconds=2, milliseconds=5)) == 2005

    def test_milliseconds_must_be_integer(self):
        with pytest.raises(ValueError):
            convert.milliseconds_to_timedelta(1.5)


class TestBinary:
    def test_base64(self):
        assert convert.bytes_to_base64(b"\x00\xffhi") == "AP9oaQ=="
        assert convert.base64_to_bytes("AP9oaQ==") == b"\x00\xffhi"

    @pytest.mark.parametrize("bad", ["not base64!", "AP9oaQ=", 12])
    def test_invalid_base64(self, bad):
        with pytest.raises(ValueError):
            convert.base64_to_bytes(bad)


class TestEnumerantsAndUrls:
    @pytest.mark.parametrize("status", list(ApiKeyStatus))
    def test_known_statuses(self, status):
        assert convert.parse_api_key_status(status.value) is status

    def test_unknown_status(self):
        with pytest.raises(ValueError, match="unknown API key status"):
            convert.parse_api_key_status("suspended")

    def test_url(self):
        url = convert.parse_url("https://api.random.org/licenses/developer")
        assert isinstance(url, httpx.URL)
        assert url.host == "api.random.org"
        assert convert.url_to_json(url) == "https://api.random.org/licenses/developer"

    def test_absent_url_stays_absent(self):
        assert convert.parse_url(None) is None
        assert convert.url_to_json(None) is None

    def test_url_must_be_string(self):
        with pytest.raises(ValueError):
            convert.parse_url(42)
