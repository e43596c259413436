"""
Atom/GData XML rendering for contact create and update requests.

A :class:`ContactTemplate` reads ``templates/contact.xml`` once when it is
constructed and is then shared by reference: the API client owns one
instance and every record bound to that client renders through it.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader

# Template file inside the gcontacts/templates package directory
CONTACT_TEMPLATE = "contact.xml"

# Render modes
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTIONS = (ACTION_CREATE, ACTION_UPDATE)

# Prefix of the GData "kind" relation URIs
GDATA_REL_PREFIX = "http://schemas.google.com/g/2005#"

logger = logging.getLogger(__name__)


def gdata_rel(rel: str) -> str:
    """Expand a short relation token such as "work" into its GData URI."""
    if "://" in rel:
        return rel
    return GDATA_REL_PREFIX + rel


def xml_bool(value: Any) -> str:
    """Render a truthy value as the XML boolean literal."""
    return "true" if value in (True, "true") else "false"


class ContactTemplate:
    """
    Loaded contact XML template.

    Usage:
        template = ContactTemplate()
        xml = template.render(attrs, "create")
    """

    def __init__(self, package: str = "gcontacts", name: str = CONTACT_TEMPLATE):
        self.environment = Environment(
            loader=PackageLoader(package, "templates"),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.environment.filters["gdata_rel"] = gdata_rel
        self.environment.filters["xml_bool"] = xml_bool
        self.template = self.environment.get_template(name)
        logger.debug(f"Loaded contact template {name}")

    def render(self, contact: dict[str, Any], action: str) -> str:
        """
        Render a contact entry.

        Args:
            contact: Attribute set from ``ContactRecord.attrs_for_update``,
                     plus ``id``, ``etag`` and ``updated`` for updates
            action: "create" or "update"

        Raises:
            ValueError: For an unknown action
        """
        if action not in ACTIONS:
            raise ValueError(
                f"Invalid action '{action}'. Must be one of: {', '.join(ACTIONS)}"
            )
        return self.template.render(contact=contact, action=action)
