"""Tests for the argument checks."""

from decimal import Decimal

import pytest
from randomorg import validation
from randomorg.errors import (
    RandomOrgParameterError,
    RandomOrgRangeError,
    RandomOrgShapeError,
)


class TestApiKey:
    def test_valid(self):
        key = "6b1e65b9-4186-45c2-8981-b77a9842c4f0"
        assert validation.validate_api_key(key) == key

    @pytest.mark.parametrize("bad", ["", "6b1e65b9418645c28981b77a9842c4f0", "not-a-key", 42])
    def test_invalid_format(self, bad):
        with pytest.raises(RandomOrgParameterError, match="api_key"):
            validation.validate_api_key(bad)

    def test_missing(self):
        with pytest.raises(RandomOrgShapeError):
            validation.validate_api_key(None)


class TestCounts:
    @pytest.mark.parametrize("count, maximum", [(0, 10_000), (10_001, 10_000), (1_001, 1_000), (101, 100)])
    def test_out_of_range(self, count, maximum):
        with pytest.raises(RandomOrgRangeError) as exc_info:
            validation.validate_count(count, maximum)
        assert exc_info.value.parameter == "count"
        assert exc_info.value.value == count

    def test_bool_is_not_a_count(self):
        with pytest.raises(RandomOrgParameterError):
            validation.validate_count(True)


class TestIntegers:
    def test_valid(self):
        assert validation.validate_integers(8, 1, 256, True) == (8, 1, 256, True)

    @pytest.mark.parametrize(
        "args, parameter",
        [
            ((1, -1_000_000_001, 0, True), "minimum"),
            ((1, 0, 1_000_000_001, True), "maximum"),
            ((0, 0, 1, True), "count"),
        ],
    )
    def test_out_of_range(self, args, parameter):
        with pytest.raises(RandomOrgRangeError) as exc_info:
            validation.validate_integers(*args)
        assert exc_info.value.parameter == parameter

    def test_limits_are_inclusive(self):
        validation.validate_integers(10_000, -1_000_000_000, 1_000_000_000, False)

    def test_replacement_is_required(self):
        with pytest.raises(RandomOrgShapeError):
            validation.validate_integers(1, 0, 1, None)


class TestIntegerSequences:
    def test_valid(self):
        result = validation.validate_integer_sequences([2, 3], [0, 1], [9, 5], [True, False])
        assert result == ((2, 3), (0, 1), (9, 5), (True, False))

    def test_mismatched_lengths(self):
        with pytest.raises(RandomOrgShapeError):
            validation.validate_integer_sequences([2, 3], [0], [9, 5], [True, False])

    def test_too_many_sequences(self):
        n = validation.MAX_SEQUENCES + 1
        with pytest.raises(RandomOrgShapeError):
            validation.validate_integer_sequences([1] * n, [0] * n, [1] * n, [True] * n)

    def test_empty(self):
        with pytest.raises(RandomOrgShapeError):
            validation.validate_integer_sequences([], [], [], [])

    def test_null_array(self):
        with pytest.raises(RandomOrgShapeError, match="minimums"):
            validation.validate_integer_sequences([1], None, [1], [True])

    def test_null_element(self):
        with pytest.raises(RandomOrgShapeError, match="maximums"):
            validation.validate_integer_sequences([1, 1], [0, 0], [1, None], [True, True])

    def test_element_out_of_range(self):
        with pytest.raises(RandomOrgRangeError) as exc_info:
            validation.validate_integer_sequences([1, 1], [0, -2_000_000_000], [1, 1], [True, True])
        assert exc_info.value.parameter == "minimums[1]"

    def test_sum_of_counts(self):
        with pytest.raises(RandomOrgRangeError) as exc_info:
            validation.validate_integer_sequences(
                [6_000, 5_000], [0, 0], [1, 1], [True, True]
            )
        assert exc_info.value.value == 11_000


class TestDecimalsAndGaussians:
    @pytest.mark.parametrize("places", [0, 21])
    def test_decimal_places(self, places):
        with pytest.raises(RandomOrgRangeError):
            validation.validate_decimal_fractions(1, places, True)

    def test_gaussians_return_decimals(self):
        count, mean, deviation, digits = validation.validate_gaussians(3, 0.5, 2, 8)
        assert (count, mean, deviation, digits) == (3, Decimal("0.5"), Decimal(2), 8)

    @pytest.mark.parametrize(
        "args, parameter",
        [
            ((1, Decimal("1000000.1"), 1, 5), "mean"),
            ((1, 0, -1_000_001, 5), "standard_deviation"),
            ((1, 0, 1, 1), "significant_digits"),
            ((1, 0, 1, 21), "significant_digits"),
        ],
    )
    def test_gaussian_ranges(self, args, parameter):
        with pytest.raises(RandomOrgRangeError) as exc_info:
            validation.validate_gaussians(*args)
        assert exc_info.value.parameter == parameter

    def test_mean_must_be_a_number(self):
        with pytest.raises(RandomOrgParameterError):
            validation.validate_gaussians(1, "zero", 1, 5)


class TestStrings:
    def test_valid(self):
        assert validation.validate_strings(5, 10, "abcdef", False) == (5, 10, "abcdef", False)

    def test_characters_required(self):
        with pytest.raises(RandomOrgShapeError):
            validation.validate_strings(5, 10, None, True)

    @pytest.mark.parametrize("characters", ["", "x" * 81])
    def test_characters_length(self, characters):
        with pytest.raises(RandomOrgRangeError):
            validation.validate_strings(5, 10, characters, True)

    @pytest.mark.parametrize("length", [0, 21])
    def test_length(self, length):
        with pytest.raises(RandomOrgRangeError):
            validation.validate_strings(5, length, "abc", True)


class TestBlobs:
    def test_valid(self):
        assert validation.validate_blobs(4, 128) == (4, 128)

    def test_size_must_be_whole_bytes(self):
        with pytest.raises(RandomOrgRangeError, match="divisible by 8"):
            validation.validate_blobs(1, 12)

    def test_total_size(self):
        with pytest.raises(RandomOrgRangeError, match="total size"):
            validation.validate_blobs(2, 1_048_576)

    def test_uuid_count(self):
        assert validation.validate_uuids(1_000) == 1_000
        with pytest.raises(RandomOrgRangeError):
            validation.validate_uuids(1_001)


class TestUserDataAndSignedArgs:
    def test_user_data(self):
        assert validation.validate_user_data(None) is None
        assert validation.validate_user_data("x" * 1_000) == "x" * 1_000
        with pytest.raises(RandomOrgRangeError):
            validation.validate_user_data("x" * 1_001)

    def test_serial_number(self):
        assert validation.validate_serial_number(0) == 0
        with pytest.raises(RandomOrgRangeError):
            validation.validate_serial_number(-1)

    def test_signature(self):
        assert validation.validate_signature(bytearray(b"\x01")) == b"\x01"
        with pytest.raises(RandomOrgShapeError):
            validation.validate_signature(None)
        with pytest.raises(RandomOrgParameterError):
            validation.validate_signature("AQ==")
