"""
Command-line interface for gcontacts.

Provides CLI commands for reading and editing single contacts through the
Google Contacts API v3.

Usage:
    # Show help
    gcontacts --help

    # Show a contact
    gcontacts show https://www.google.com/m8/feeds/contacts/default/full/12345

    # Save its photo
    gcontacts photo <ID_URL> --output photo.jpg

    # Change fields
    gcontacts update <ID_URL> --family-name Lovelace --email ada@example.com

    # Create a contact
    gcontacts create --given-name Ada --email ada@example.com
"""

import sys
from pathlib import Path
from typing import Any, Optional

import click

from gcontacts import __version__
from gcontacts.api.contacts_api import ContactsAPI, ContactsAPIError
from gcontacts.cli.formatters import print_contact
from gcontacts.config.loader import DEFAULT_CONFIG_FILE, ConfigError, ConfigLoader
from gcontacts.config.settings import ClientSettings
from gcontacts.records.contact import ContactRecord
from gcontacts.records.photo import PhotoError
from gcontacts.utils.logging import get_logger, parse_log_level, setup_logging
from gcontacts.utils.paths import resolve_config_dir


def get_config_dir(config_dir: Optional[str]) -> Path:
    """Get the configuration directory path."""
    return resolve_config_dir(config_dir)


def get_config_file(config_file: Optional[str], config_dir: Path) -> Path:
    """Get the configuration file path."""
    if config_file:
        return Path(config_file)
    return config_dir / DEFAULT_CONFIG_FILE


def build_changes(
    given_name: Optional[str] = None,
    family_name: Optional[str] = None,
    emails: tuple[str, ...] = (),
    phones: tuple[str, ...] = (),
    notes: Optional[str] = None,
) -> dict[str, Any]:
    """
    Turn CLI option values into a change mapping.

    The first email and phone are marked primary. Options that were not
    given are left out so the record keeps its current values.
    """
    changes: dict[str, Any] = {}
    if given_name is not None:
        changes["given_name"] = given_name
    if family_name is not None:
        changes["family_name"] = family_name
    if emails:
        changes["emails"] = [
            {"address": address, "rel": "other", "primary": index == 0}
            for index, address in enumerate(emails)
        ]
    if phones:
        changes["phone_numbers"] = [
            {"number": number, "rel": "mobile", "primary": index == 0}
            for index, number in enumerate(phones)
        ]
    if notes is not None:
        changes["content"] = notes
    return changes


def get_api(ctx: click.Context) -> ContactsAPI:
    """Create the API client from the loaded settings."""
    settings: ClientSettings = ctx.obj["settings"]
    return ContactsAPI.from_settings(settings)


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="gcontacts")
@click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose output with detailed logging."
)
@click.option(
    "--config-dir",
    "-c",
    type=click.Path(exists=False, file_okay=False, dir_okay=True),
    envvar="GCONTACTS_CONFIG_DIR",
    help="Configuration directory path (default: ~/.gcontacts).",
)
@click.option(
    "--config-file",
    "-f",
    type=click.Path(exists=False, file_okay=True, dir_okay=False),
    envvar="GCONTACTS_CONFIG_FILE",
    help="Configuration file path (default: <config-dir>/config.yaml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    config_dir: Optional[str],
    config_file: Optional[str],
) -> None:
    """
    Google Contacts record tool.

    Reads and edits single contacts through the Google Contacts API v3.
    Credentials are read from the token file named in the configuration
    (default: <config-dir>/token.json).
    """
    ctx.ensure_object(dict)

    resolved_config_dir = get_config_dir(config_dir)
    resolved_config_file = get_config_file(config_file, resolved_config_dir)

    config: dict[str, Any] = {}
    try:
        loader = ConfigLoader(config_dir=resolved_config_dir)
        config = loader.load_from_file(resolved_config_file)
        if config:
            loader.validate(config)
    except ConfigError as e:
        # Keep working with defaults
        click.echo(
            click.style(f"Warning: Configuration error: {e}", fg="yellow"), err=True
        )
        config = {}

    settings = ClientSettings.from_dict(config, resolved_config_dir)
    effective_verbose = verbose or settings.verbose

    ctx.obj["config_dir"] = resolved_config_dir
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = effective_verbose

    setup_logging(
        level=parse_log_level(settings.log_level),
        verbose=effective_verbose,
        log_file=settings.log_file,
    )


# =============================================================================
# Show Command
# =============================================================================


@cli.command("show")
@click.argument("id_url")
@click.pass_context
def show_command(ctx: click.Context, id_url: str) -> None:
    """
    Show a contact.

    ID_URL is the contact's id or self link.
    """
    logger = get_logger(__name__)

    try:
        api = get_api(ctx)
        contact = ContactRecord.find(id_url, api)
    except ContactsAPIError as e:
        logger.error(f"Failed to load contact {id_url}: {e}")
        fail(str(e))
        return

    print_contact(contact)


# =============================================================================
# Photo Commands
# =============================================================================


@cli.command("photo")
@click.argument("id_url")
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False, writable=True),
    help="File to write the photo to.",
)
@click.pass_context
def photo_command(ctx: click.Context, id_url: str, output: str) -> None:
    """
    Save a contact's photo to a file.
    """
    logger = get_logger(__name__)

    try:
        api = get_api(ctx)
        contact = ContactRecord.find(id_url, api)
        photo = contact.photo_with_metadata()
    except ContactsAPIError as e:
        logger.error(f"Failed to load photo for {id_url}: {e}")
        fail(str(e))
        return

    if photo is None:
        click.echo(click.style("Contact has no photo.", fg="yellow"))
        sys.exit(1)

    Path(output).write_bytes(photo["data"])
    click.echo(
        click.style(
            f"Saved {len(photo['data'])} bytes ({photo['content_type']}) to {output}",
            fg="green",
        )
    )


@cli.command("set-photo")
@click.argument("id_url")
@click.argument(
    "image", type=click.Path(exists=True, dir_okay=False, readable=True)
)
@click.pass_context
def set_photo_command(ctx: click.Context, id_url: str, image: str) -> None:
    """
    Replace a contact's photo with an image file.
    """
    logger = get_logger(__name__)

    try:
        api = get_api(ctx)
        contact = ContactRecord.find(id_url, api)
        contact.update_photo(Path(image).read_bytes())
    except (ContactsAPIError, PhotoError, ValueError) as e:
        logger.error(f"Failed to update photo for {id_url}: {e}")
        fail(str(e))
        return

    click.echo(click.style("Photo updated.", fg="green"))


# =============================================================================
# Update / Create Commands
# =============================================================================


def contact_field_options(func: Any) -> Any:
    """Options shared by the update and create commands."""
    options = [
        click.option("--given-name", help="Given (first) name."),
        click.option("--family-name", help="Family (last) name."),
        click.option(
            "--email",
            "emails",
            multiple=True,
            help="Email address; repeat for several. The first is primary.",
        ),
        click.option(
            "--phone",
            "phones",
            multiple=True,
            help="Phone number; repeat for several. The first is primary.",
        ),
        click.option("--notes", help="Free-form notes."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command("update")
@click.argument("id_url")
@contact_field_options
@click.pass_context
def update_command(
    ctx: click.Context,
    id_url: str,
    given_name: Optional[str],
    family_name: Optional[str],
    emails: tuple[str, ...],
    phones: tuple[str, ...],
    notes: Optional[str],
) -> None:
    """
    Update fields of an existing contact.

    Fields that are not given keep their current values. Emails and phones
    given on the command line replace the whole list.
    """
    logger = get_logger(__name__)

    changes = build_changes(given_name, family_name, emails, phones, notes)
    if not changes:
        fail("Nothing to update. Pass at least one field option.")
        return

    try:
        api = get_api(ctx)
        contact = ContactRecord.find(id_url, api)
        contact.prep_changes(changes)
        contact.create_or_update()
    except ContactsAPIError as e:
        logger.error(f"Failed to update contact {id_url}: {e}")
        if e.status_code == 412:
            fail("Contact was modified since it was loaded. Run the update again.")
        else:
            fail(str(e))
        return

    click.echo(click.style("Contact updated.", fg="green"))
    print_contact(contact)


@cli.command("create")
@contact_field_options
@click.pass_context
def create_command(
    ctx: click.Context,
    given_name: Optional[str],
    family_name: Optional[str],
    emails: tuple[str, ...],
    phones: tuple[str, ...],
    notes: Optional[str],
) -> None:
    """
    Create a new contact.
    """
    logger = get_logger(__name__)

    changes = build_changes(given_name, family_name, emails, phones, notes)
    if not changes:
        fail("Nothing to create. Pass at least one field option.")
        return

    try:
        api = get_api(ctx)
        contact = ContactRecord.create(changes, api)
    except ContactsAPIError as e:
        logger.error(f"Failed to create contact: {e}")
        fail(str(e))
        return

    click.echo(click.style("Contact created.", fg="green"))
    print_contact(contact)
