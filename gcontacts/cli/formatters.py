"""CLI output formatting functions.

Renders contact records as indented, human-readable text.
"""

from typing import TYPE_CHECKING, Any

import click

if TYPE_CHECKING:
    from gcontacts.records.contact import ContactRecord


def _describe_entity(entity: dict[str, Any], value_key: str) -> str:
    value = entity.get(value_key) or ""
    details = []
    if entity.get("rel"):
        details.append(str(entity["rel"]))
    elif entity.get("label"):
        details.append(str(entity["label"]))
    if entity.get("primary"):
        details.append("primary")
    if details:
        return f"{value} ({', '.join(details)})"
    return str(value)


def format_birthday(birthday: dict[str, Any]) -> str:
    """Render a birthday as YYYY-MM-DD, or --MM-DD when the year is unknown."""
    year = f"{birthday['year']:04d}" if birthday.get("year") else "-"
    return f"{year}-{birthday['month']:02d}-{birthday['day']:02d}"


def format_contact(contact: "ContactRecord") -> list[str]:
    """
    Build the display lines for a contact.

    Empty sections are left out.
    """
    lines = [contact.full_name or contact.title or "(no name)"]

    if contact.id:
        lines.append(f"  id: {contact.id}")
    if contact.updated:
        lines.append(f"  updated: {contact.updated.isoformat()}")

    emails = contact.emails_full()
    if emails:
        lines.append("  emails:")
        lines.extend(f"    {_describe_entity(e, 'address')}" for e in emails)

    phones = contact.phone_numbers_full()
    if phones:
        lines.append("  phones:")
        lines.extend(f"    {_describe_entity(p, 'number')}" for p in phones)

    addresses = contact.addresses()
    if addresses:
        lines.append("  addresses:")
        for address in addresses:
            text = address.get("formatted_address") or ", ".join(
                str(address[key])
                for key in ("street", "city", "region", "postcode", "country")
                if address.get(key)
            )
            lines.append(f"    {_describe_entity({**address, 'text': text}, 'text')}")

    organizations = contact.organizations()
    if organizations:
        lines.append("  organizations:")
        for organization in organizations:
            name = organization.get("org_name") or ""
            if organization.get("org_title"):
                name = f"{name}, {organization['org_title']}"
            lines.append(f"    {name}")

    websites = contact.websites()
    if websites:
        lines.append("  websites:")
        lines.extend(f"    {_describe_entity(w, 'href')}" for w in websites)

    birthday = contact.birthday()
    if birthday:
        lines.append(f"  birthday: {format_birthday(birthday)}")

    spouse = contact.spouse()
    if spouse:
        lines.append(f"  spouse: {spouse}")

    if contact.content:
        lines.append(f"  notes: {contact.content}")

    return lines


def print_contact(contact: "ContactRecord") -> None:
    """Echo a contact to stdout."""
    for line in format_contact(contact):
        click.echo(line)
