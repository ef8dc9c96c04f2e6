"""Tests for sender and receiver extraction."""

import pytest

from eml_print.contact_extractor import (
    Contact,
    parse_email_header,
    first_contact,
    extract_parties,
)


class TestParseEmailHeader:
    """Tests for parse_email_header function."""

    def test_simple_email(self):
        """Test parsing a simple email address."""
        result = parse_email_header("john@example.com")
        assert len(result) == 1
        assert result[0] == ("john", "john@example.com")

    def test_email_with_name(self):
        """Test parsing 'Name <email>' format."""
        result = parse_email_header("John Doe <john@example.com>")
        assert len(result) == 1
        assert result[0] == ("John Doe", "john@example.com")

    def test_multiple_addresses(self):
        """Test parsing comma-separated addresses."""
        result = parse_email_header("John <john@example.com>, Jane <jane@example.com>")
        assert len(result) == 2
        assert result[0] == ("John", "john@example.com")
        assert result[1] == ("Jane", "jane@example.com")

    def test_empty_value(self):
        """Test parsing empty values."""
        assert parse_email_header("") == []
        assert parse_email_header(None) == []

    def test_email_lowercase(self):
        """Test that emails are normalized to lowercase but names keep case."""
        result = parse_email_header("John@EXAMPLE.COM")
        assert result[0] == ("John", "john@example.com")

    def test_quoted_name(self):
        """Test parsing a quoted display name."""
        result = parse_email_header('"Doe, Jane" <jane@example.com>')
        assert result == [("Doe, Jane", "jane@example.com")]


class TestFirstContact:
    """Tests for first_contact function."""

    def test_first_of_many(self):
        contact = first_contact("Alice <a@example.com>, Bob <b@example.com>", "To")
        assert contact == Contact(name="Alice", email="a@example.com", contact_type="To")

    def test_no_address(self):
        assert first_contact("", "From") is None


class TestExtractParties:
    """Tests for extract_parties function."""

    def test_display_name_and_local_part(self):
        """Display name wins; the local part is the fallback."""
        sender, receiver = extract_parties("Jane Doe <jane@example.com>", "john@example.com")
        assert sender == "Jane_Doe"
        assert receiver == "john"

    def test_missing_headers(self):
        """Missing headers use the fixed placeholders."""
        assert extract_parties("", "") == ("unknown_sender", "unknown_receiver")

    @pytest.mark.parametrize("header,expected", [
        ('"Zoë O\'Brien" <zoe@example.com>', "Zo__O_Brien"),
        ('"a/b:c" <x@example.com>', "a_b_c"),
        ('"first.last-name_1" <x@example.com>', "first.last-name_1"),
    ])
    def test_sanitized(self, header, expected):
        sender, _ = extract_parties(header, "")
        assert sender == expected
