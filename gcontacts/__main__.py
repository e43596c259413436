"""
Entry point for running gcontacts as a module.

Usage:
    python -m gcontacts --help
    python -m gcontacts show https://www.google.com/m8/feeds/contacts/default/full/12345
"""

from gcontacts.cli import cli

if __name__ == "__main__":
    cli()
