"""CLI package for gcontacts."""

from gcontacts.cli.formatters import format_contact, print_contact
from gcontacts.cli.main import build_changes, cli, get_config_dir

__all__ = [
    "build_changes",
    "cli",
    "format_contact",
    "get_config_dir",
    "print_contact",
]
