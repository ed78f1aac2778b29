"""
Source Registry

Holds the catalog clients artwall knows about and which one is active. A registry is an
ordinary object: build one (default_registry does the usual met + artic setup) and pass it to
whoever needs it.
"""

import logging

from artwall.config import ArtwallConfig
from artwall.sources.artic import ArticClient
from artwall.sources.base import SourceDescriptor
from artwall.sources.base import make_session
from artwall.sources.met import MetClient

logger = logging.getLogger(__name__)


class UnknownSourceError(Exception):
    """
    Raised when switching to a source id that was never registered.
    """

    pass


class SourceRegistry:
    def __init__(self):
        self._sources: dict[str, tuple[SourceDescriptor, object]] = {}
        self._active_id: str = None

    def register(self, descriptor: SourceDescriptor, client):
        """Add a client under descriptor.id. The first source registered becomes active."""

        self._sources[descriptor.id] = (descriptor, client)

        if self._active_id is None:
            self._active_id = descriptor.id

    def set_active(self, source_id: str):
        """
        Make source_id the active source. Raises UnknownSourceError (leaving the active source
        unchanged) if nothing is registered under that id.
        """

        if source_id not in self._sources:
            raise UnknownSourceError(
                f"Unknown source: {source_id}. Available sources: {', '.join(self._sources) or 'none'}"
            )

        self._active_id = source_id
        logger.info("image source set to %s", self._sources[source_id][0].display_name)

    def get_active(self) -> str:
        return self._active_id

    def get(self, source_id: str):
        try:
            return self._sources[source_id][1]

        except KeyError:
            raise UnknownSourceError(f"Unknown source: {source_id}")

    def active_client(self):
        if self._active_id is None:
            raise UnknownSourceError("No sources are registered.")

        return self.get(self._active_id)

    def list_all(self) -> list[SourceDescriptor]:
        return [descriptor for descriptor, _ in self._sources.values()]


def default_registry(config: ArtwallConfig) -> SourceRegistry:
    """
    Build a registry with the Met and the Art Institute of Chicago, each client with its own
    session, and activate config.DEFAULT_SOURCE (falling back to the first source).
    """

    registry = SourceRegistry()

    for client_class in (MetClient, ArticClient):
        client = client_class(
            make_session(config.USER_AGENT), timeout=config.REQUEST_TIMEOUT
        )
        registry.register(client.descriptor, client)

    try:
        registry.set_active(config.DEFAULT_SOURCE)

    except UnknownSourceError as error:
        logger.warning("%s, using %s", error, registry.get_active())

    return registry
