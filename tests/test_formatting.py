"""Tests for GData entity formatting."""

import pytest

from gcontacts.records.formatting import (
    REL_PREFIX,
    format_address,
    format_entity,
    format_phone_number,
    parse_birthday,
)


class TestFormatEntityPrimary:
    """Test primary flag handling."""

    @pytest.mark.parametrize("value", ["true", True])
    def test_truthy_primary(self, value):
        """"true" and True should become True."""
        assert format_entity({"primary": value})["primary"] is True

    @pytest.mark.parametrize("value", ["false", False, "yes", None])
    def test_other_primary(self, value):
        """Anything else should become False."""
        assert format_entity({"primary": value})["primary"] is False

    def test_missing_primary_defaults_false(self):
        """A missing flag should default to False."""
        assert format_entity({})["primary"] is False


class TestFormatEntityRel:
    """Test relation handling."""

    def test_prefix_stripped(self):
        """The GData relation prefix should be removed."""
        assert format_entity({"rel": REL_PREFIX + "home"})["rel"] == "home"

    def test_other_uri_kept(self):
        """Relations outside the GData prefix should be kept."""
        rel = "http://schemas.google.com/contact/2008#custom"
        assert format_entity({"rel": rel})["rel"] == rel

    def test_default_rel(self):
        """A missing relation should use the default."""
        assert format_entity({}, "work")["rel"] == "work"

    def test_missing_rel_without_default(self):
        """A missing relation without default should be None."""
        assert format_entity({"label": "lab"}) == {
            "label": "lab",
            "rel": None,
            "primary": False,
        }

    def test_present_rel_beats_default(self):
        """A present relation should win over the default."""
        assert format_entity({"rel": REL_PREFIX + "home"}, "work")["rel"] == "home"


class TestFormatEntityKeys:
    """Test key conversion and text unwrapping."""

    def test_nested_text_nodes_unwrapped(self):
        """Namespaced child elements should become flat values."""
        result = format_entity(
            {
                "gd$formattedAddress": {"$t": "1 Main St"},
                "gd$city": {"$t": "Springfield"},
                "mailClass": REL_PREFIX + "both",
            }
        )

        assert result == {
            "formatted_address": "1 Main St",
            "city": "Springfield",
            "mail_class": REL_PREFIX + "both",
            "rel": None,
            "primary": False,
        }

    def test_text_key_default(self):
        """Entity text should go under t without a value key."""
        assert format_entity({"$t": "value"})["t"] == "value"

    def test_text_key_with_value_key(self):
        """Entity text should go under the value key."""
        result = format_entity({"$t": "+1 555 0100"}, value_key="number")

        assert result["number"] == "+1 555 0100"
        assert "t" not in result

    def test_idempotent(self):
        """Formatting formatted output should change nothing."""
        raw = {
            "rel": REL_PREFIX + "mobile",
            "primary": "true",
            "uri": "tel:+1-555-0100",
            "$t": "+1 555 0100",
        }
        once = format_entity(raw, None, "number")
        assert format_entity(once, None, "number") == once

    def test_input_not_mutated(self):
        """The raw entity should be left unchanged."""
        raw = {"rel": REL_PREFIX + "home", "primary": "true"}
        format_entity(raw)
        assert raw == {"rel": REL_PREFIX + "home", "primary": "true"}


class TestFormatHelpers:
    """Test address and phone number formatters."""

    def test_address_defaults_to_work(self):
        """Addresses without relation should be work addresses."""
        assert format_address({"gd$city": {"$t": "Ockham"}}) == {
            "city": "Ockham",
            "rel": "work",
            "primary": False,
        }

    def test_phone_number(self):
        """Phone numbers should keep text under number."""
        assert format_phone_number(
            {"rel": REL_PREFIX + "home", "$t": "555-0100"}
        ) == {"rel": "home", "number": "555-0100", "primary": False}


class TestParseBirthday:
    """Test birthday parsing."""

    def test_full_date(self):
        """A full date should yield all parts."""
        assert parse_birthday("1990-04-23") == {"year": 1990, "month": 4, "day": 23}

    def test_without_year(self):
        """A yearless date should yield year None."""
        assert parse_birthday("--04-23") == {"year": None, "month": 4, "day": 23}

    def test_invalid(self):
        """A malformed date should raise."""
        with pytest.raises((ValueError, IndexError)):
            parse_birthday("unknown")
