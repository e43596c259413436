"""
Unit tests for the contact XML template.

Rendered payloads are parsed back with ElementTree to check structure.
"""

import xml.etree.ElementTree as ET

import pytest

from gcontacts.records.template import (
    ACTION_CREATE,
    ACTION_UPDATE,
    GDATA_REL_PREFIX,
    ContactTemplate,
    gdata_rel,
    xml_bool,
)

NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "gd": "http://schemas.google.com/g/2005",
    "gContact": "http://schemas.google.com/contact/2008",
}


def parse(xml):
    """Parse rendered XML into its root element."""
    return ET.fromstring(xml.encode("utf-8"))


@pytest.fixture
def attrs():
    """A full attribute set as built by attrs_for_update."""
    return {
        "name_prefix": None,
        "given_name": "Ada",
        "additional_name": None,
        "family_name": "Lovelace",
        "name_suffix": None,
        "content": "Notes & <things>",
        "emails": [
            {"rel": "home", "address": "ada@example.com", "primary": True},
            {"label": "club", "address": "ada@club.example.com", "primary": False},
        ],
        "phone_numbers": [
            {
                "rel": "mobile",
                "uri": "tel:+44-20-7946-0000",
                "number": "+44 20 7946 0000",
                "primary": True,
            }
        ],
        "addresses": [
            {
                "rel": "home",
                "mail_class": "both",
                "street": "12 St James's Square",
                "city": "London",
                "primary": False,
            },
            {"city": "Ockham", "rel": None, "primary": False},
        ],
        "organizations": [
            {"rel": "work", "org_name": "Analytical Engines Ltd", "primary": False}
        ],
        "websites": [{"href": "http://example.com/ada", "rel": "home-page"}],
    }


class TestFilters:
    """Tests for the template filters."""

    def test_gdata_rel_expands_token(self):
        """Test short tokens are expanded."""
        assert gdata_rel("work") == GDATA_REL_PREFIX + "work"

    def test_gdata_rel_keeps_uri(self):
        """Test full URIs are kept."""
        assert gdata_rel(GDATA_REL_PREFIX + "home") == GDATA_REL_PREFIX + "home"

    def test_xml_bool(self):
        """Test boolean rendering."""
        assert xml_bool(True) == "true"
        assert xml_bool("true") == "true"
        assert xml_bool(False) == "false"
        assert xml_bool(None) == "false"


class TestRenderCreate:
    """Tests for create payloads."""

    def test_well_formed_entry(self, template, attrs):
        """Test the payload is a well-formed Atom entry."""
        xml = template.render(attrs, ACTION_CREATE)

        assert xml.startswith("<?xml")
        root = parse(xml)
        assert root.tag == f"{{{NS['atom']}}}entry"
        assert root.find("atom:id", NS) is None
        assert root.find("atom:updated", NS) is None
        assert root.find("atom:category", NS) is not None

    def test_names(self, template, attrs):
        """Test only present name parts are rendered."""
        root = parse(template.render(attrs, ACTION_CREATE))

        name = root.find("gd:name", NS)
        assert name.find("gd:givenName", NS).text == "Ada"
        assert name.find("gd:familyName", NS).text == "Lovelace"
        assert name.find("gd:namePrefix", NS) is None

    def test_content_escaped(self, template, attrs):
        """Test text content is XML-escaped."""
        xml = template.render(attrs, ACTION_CREATE)

        assert "Notes &amp; &lt;things&gt;" in xml
        assert parse(xml).find("atom:content", NS).text == "Notes & <things>"

    def test_emails(self, template, attrs):
        """Test emails carry rel or label and the primary flag."""
        root = parse(template.render(attrs, ACTION_CREATE))

        home, club = root.findall("gd:email", NS)
        assert home.get("rel") == GDATA_REL_PREFIX + "home"
        assert home.get("address") == "ada@example.com"
        assert home.get("primary") == "true"
        assert club.get("label") == "club"
        assert club.get("rel") is None
        assert club.get("primary") is None

    def test_plain_string_email(self, template, attrs):
        """Test plain address strings are accepted."""
        attrs["emails"] = ["ada@example.com"]
        root = parse(template.render(attrs, ACTION_CREATE))

        email = root.find("gd:email", NS)
        assert email.get("address") == "ada@example.com"
        assert email.get("rel") == GDATA_REL_PREFIX + "other"

    def test_phone_numbers(self, template, attrs):
        """Test phone numbers keep their text and uri."""
        root = parse(template.render(attrs, ACTION_CREATE))

        phone = root.find("gd:phoneNumber", NS)
        assert phone.text == "+44 20 7946 0000"
        assert phone.get("uri") == "tel:+44-20-7946-0000"
        assert phone.get("rel") == GDATA_REL_PREFIX + "mobile"

    def test_addresses(self, template, attrs):
        """Test structured addresses and their default relation."""
        root = parse(template.render(attrs, ACTION_CREATE))

        home, other = root.findall("gd:structuredPostalAddress", NS)
        assert home.get("rel") == GDATA_REL_PREFIX + "home"
        assert home.get("mailClass") == GDATA_REL_PREFIX + "both"
        assert home.find("gd:street", NS).text == "12 St James's Square"
        assert other.get("rel") == GDATA_REL_PREFIX + "work"
        assert other.find("gd:city", NS).text == "Ockham"

    def test_organizations_and_websites(self, template, attrs):
        """Test organizations and websites are rendered."""
        root = parse(template.render(attrs, ACTION_CREATE))

        organization = root.find("gd:organization", NS)
        assert organization.find("gd:orgName", NS).text == "Analytical Engines Ltd"
        website = root.find("gContact:website", NS)
        assert website.get("href") == "http://example.com/ada"
        assert website.get("rel") == "home-page"

    def test_empty_attributes(self, template):
        """Test a payload with no values is still well formed."""
        root = parse(template.render({}, ACTION_CREATE))

        assert root.find("gd:name", NS) is not None
        assert root.findall("gd:email", NS) == []


class TestRenderUpdate:
    """Tests for update payloads."""

    def test_update_metadata(self, template, attrs):
        """Test id, updated and etag are included."""
        attrs.update(
            {
                "id": "http://www.google.com/m8/feeds/contacts/a%40b.com/base/1",
                "updated": "2024-01-02T03:04:05.678Z",
                "etag": '"QHc_fDVSLit7I2A9XRdQFUkITwc."',
            }
        )
        xml = template.render(attrs, ACTION_UPDATE)
        root = parse(xml)

        assert root.find("atom:id", NS).text.endswith("/base/1")
        assert root.find("atom:updated", NS).text == "2024-01-02T03:04:05.678Z"
        assert root.get(f"{{{NS['gd']}}}etag") == '"QHc_fDVSLit7I2A9XRdQFUkITwc."'


class TestContactTemplate:
    """Tests for template loading and validation."""

    def test_invalid_action(self, template, attrs):
        """Test unknown actions are rejected."""
        with pytest.raises(ValueError, match="Invalid action 'delete'"):
            template.render(attrs, "delete")

    def test_separate_instances_render_alike(self, template, attrs):
        """Test every instance loads the same template."""
        assert ContactTemplate().render(attrs, ACTION_CREATE) == template.render(
            attrs, ACTION_CREATE
        )
