"""
Metropolitan Museum of Art

Flat-list catalog source. API docs: https://metmuseum.github.io

The search endpoint returns every matching object id in one (large) response, so the id list is
cached by the CatalogCache and each randomly drawn id is resolved with a per-object request.
"""

import logging

import requests

from artwall.sources.base import ArtworkCandidate
from artwall.sources.base import NotFoundError
from artwall.sources.base import ParseError
from artwall.sources.base import ResolvedArtwork
from artwall.sources.base import SourceDescriptor
from artwall.sources.base import fetch_json

logger = logging.getLogger(__name__)

API_BASE = "https://collectionapi.metmuseum.org/public/collection/v1"


class MetClient:

    descriptor = SourceDescriptor(id="met", display_name="Metropolitan Museum of Art")
    kind = "flat"

    def __init__(self, session: requests.Session, timeout: float = 15):
        self.session = session
        self.timeout = timeout

    def list_identifiers(self) -> list:
        """
        Return the ids of all paintings that have images. This is the expensive call the
        catalog cache exists for.
        """

        result = fetch_json(
            self.session,
            f"{API_BASE}/search",
            params={"hasImages": "true", "medium": "Paintings", "q": "*"},
            timeout=self.timeout,
        )

        if not isinstance(result, dict):
            raise ParseError("Unexpected search response from the Met")

        ids = result.get("objectIDs")
        if ids is None or not isinstance(ids, list):
            if result.get("total") == 0:
                raise NotFoundError("No paintings found")
            raise ParseError("Search response from the Met has no objectIDs")

        if not ids:
            raise NotFoundError("No paintings found")

        logger.info("fetched %d painting ids from the Met", len(ids))
        return ids

    def list_candidates(self, page: int = None) -> list[ArtworkCandidate]:
        # the Met has no pagination: page is ignored and the full list is returned
        return [ArtworkCandidate(identifier=i) for i in self.list_identifiers()]

    def describe(self, identifier) -> ArtworkCandidate:
        """Fetch one object record and turn it into a candidate."""

        artwork = fetch_json(
            self.session, f"{API_BASE}/objects/{identifier}", timeout=self.timeout
        )

        if not isinstance(artwork, dict):
            raise ParseError(f"Unexpected object response for {identifier}")

        primary_image = artwork.get("primaryImage") or None

        return ArtworkCandidate(
            identifier=identifier,
            title=artwork.get("title") or None,
            artist_name=artwork.get("artistDisplayName") or None,
            has_image=primary_image is not None,
            is_eligible=bool(artwork.get("isPublicDomain", True)),
            image_url=primary_image,
        )

    def resolve(self, identifier) -> ResolvedArtwork:
        """
        Resolve an object id to a downloadable artwork. Raises NotFoundError if the object
        has no primary image or isn't public domain.
        """

        candidate = self.describe(identifier)

        if not candidate.has_image:
            raise NotFoundError(f'No image for "{candidate.title or identifier}"')

        if not candidate.is_eligible:
            raise NotFoundError(
                f'"{candidate.title or identifier}" is not in the public domain'
            )

        return candidate.resolved()
