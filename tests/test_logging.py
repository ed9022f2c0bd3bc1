"""Tests for log sanitizers"""
from marketplace.logging import sanitize_address_for_logging, sanitize_string_for_logging


def test_address_is_abbreviated():
    assert sanitize_address_for_logging("0x" + "ab" * 20) == "0xabab...abab"
    assert sanitize_address_for_logging("0x1234") == "0x1234"
    assert sanitize_address_for_logging(None) == "N/A"


def test_string_is_escaped_and_truncated():
    assert sanitize_string_for_logging("Lamp\nFAKE ENTRY") == "Lamp\\nFAKE ENTRY"
    assert sanitize_string_for_logging("x" * 60, max_length=10) == "x" * 10 + "..."
    assert sanitize_string_for_logging("") == "N/A"
