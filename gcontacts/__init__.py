"""
gcontacts - Google Contacts API v3 record adapter

Parses contact entries from the GData JSON feeds into ContactRecord objects
and writes staged changes back as Atom XML.
"""

__version__ = "0.1.0"
