"""
Connector registry — board and API connectors by configuration name.
"""

import logging

from connectors.base import BoardConnector, Connector
from connectors.glassdoor import GlassdoorConnector
from connectors.linkedin import LinkedInConnector
from connectors.reed import ReedConnector

logger = logging.getLogger(__name__)


BOARD_CONNECTORS = {
    LinkedInConnector.name: LinkedInConnector,
    GlassdoorConnector.name: GlassdoorConnector,
    ReedConnector.name: ReedConnector,
}


def build_connectors(names: list[str], context) -> list[Connector]:
    """Instantiate the named connectors in order, skipping unknown names."""
    connectors = []
    for name in names:
        connector_cls = BOARD_CONNECTORS.get(name)
        if connector_cls is None:
            logger.warning("Unknown connector %r in config; known: %s", name, ", ".join(BOARD_CONNECTORS))
            continue
        connectors.append(connector_cls.from_context(context))
    return connectors


__all__ = [
    "BOARD_CONNECTORS",
    "BoardConnector",
    "Connector",
    "GlassdoorConnector",
    "LinkedInConnector",
    "ReedConnector",
    "build_connectors",
]
