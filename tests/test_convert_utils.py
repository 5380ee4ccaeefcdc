"""
Tests for size conversion utilities used by the --min-size filter and the summary line.
"""
import pytest
from hardlinker.utils.convert_utils import ConvertUtils


class TestHumanToBytes:
    """Test conversion from human-readable sizes (e.g., "500KB") to bytes."""

    def test_bytes_without_suffix(self):
        """Plain numbers should be interpreted as bytes."""
        assert ConvertUtils.human_to_bytes("0") == 0
        assert ConvertUtils.human_to_bytes("1") == 1
        assert ConvertUtils.human_to_bytes("500000") == 500000

    def test_bytes_with_b_suffix(self):
        assert ConvertUtils.human_to_bytes("0B") == 0
        assert ConvertUtils.human_to_bytes("1024B") == 1024

    def test_binary_multipliers(self):
        """K/M/G are powers of 1024, with or without the trailing B."""
        assert ConvertUtils.human_to_bytes("1K") == 1024
        assert ConvertUtils.human_to_bytes("1KB") == 1024
        assert ConvertUtils.human_to_bytes("1.5KB") == 1536
        assert ConvertUtils.human_to_bytes("1M") == 1024 ** 2
        assert ConvertUtils.human_to_bytes("0.5GB") == 512 * 1024 ** 2
        assert ConvertUtils.human_to_bytes("2TB") == 2 * 1024 ** 4

    def test_case_and_whitespace(self):
        assert ConvertUtils.human_to_bytes("1kb") == 1024
        assert ConvertUtils.human_to_bytes("1Mb") == 1024 ** 2
        assert ConvertUtils.human_to_bytes(" 1KB ") == 1024
        assert ConvertUtils.human_to_bytes("4 K") == 4096

    def test_rejects_negative_values(self):
        with pytest.raises(ValueError, match="Negative size not allowed"):
            ConvertUtils.human_to_bytes("-1")
        with pytest.raises(ValueError, match="Negative size not allowed"):
            ConvertUtils.human_to_bytes("-1KB")

    @pytest.mark.parametrize("value", ["", "invalid", "1.2.3KB", "1KB2", "1 XB", "KB"])
    def test_rejects_invalid_formats(self, value):
        with pytest.raises(ValueError):
            ConvertUtils.human_to_bytes(value)


class TestBytesToHuman:

    def test_zero_bytes(self):
        assert ConvertUtils.bytes_to_human(0) == "0.00B"

    def test_units(self):
        assert ConvertUtils.bytes_to_human(1023) == "1023.00B"
        assert ConvertUtils.bytes_to_human(1536) == "1.50KB"
        assert ConvertUtils.bytes_to_human(1024 ** 2) == "1.00MB"
        assert ConvertUtils.bytes_to_human(500 * 1024 ** 3) == "500.00GB"

    def test_precision(self):
        assert ConvertUtils.bytes_to_human(1500) == "1.46KB"

    def test_negative_clamped(self):
        assert ConvertUtils.bytes_to_human(-5) == "0B"


class TestIsValidSizeFormat:

    def test_valid_and_invalid(self):
        assert ConvertUtils.is_valid_size_format("10MB")
        assert ConvertUtils.is_valid_size_format("0")
        assert not ConvertUtils.is_valid_size_format("ten")
        assert not ConvertUtils.is_valid_size_format("-1K")
