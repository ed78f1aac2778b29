"""
Art Institute of Chicago

Paged catalog source. API docs: https://api.artic.edu/docs

Uses the plain /artworks listing rather than /artworks/search (the search endpoint answers
403 to anonymous clients). Each listing entry carries title, artist and IIIF image id, so an
image url is built without another request. Eligibility: public domain paintings only.
"""

import requests

from artwall.sources.base import ArtworkCandidate
from artwall.sources.base import ParseError
from artwall.sources.base import ResolvedArtwork
from artwall.sources.base import SourceDescriptor
from artwall.sources.base import fetch_json

API_BASE = "https://api.artic.edu/api/v1"
IIIF_BASE = "https://www.artic.edu/iiif/2"
IMAGE_WIDTH = 1686
PAGE_LIMIT = 100
FIELDS = "id,title,artist_title,image_id,is_public_domain,artwork_type_title"


def image_url(image_id: str, width: int = IMAGE_WIDTH) -> str:
    return f"{IIIF_BASE}/{image_id}/full/{width},/0/default.jpg"


class ArticClient:

    descriptor = SourceDescriptor(id="artic", display_name="Art Institute of Chicago")
    kind = "paged"

    # stay within the pagination the API serves without complaint
    max_page = 100

    def __init__(self, session: requests.Session, timeout: float = 15):
        # ARTIC asks API consumers to identify themselves with an AIC-User-Agent header too
        if "User-Agent" in session.headers:
            session.headers.setdefault("AIC-User-Agent", session.headers["User-Agent"])

        self.session = session
        self.timeout = timeout

    def list_candidates(self, page: int = 1) -> list[ArtworkCandidate]:
        """
        Return every artwork on the given listing page, unfiltered. Filtering on has_image and
        is_eligible is left to the selector.
        """

        result = fetch_json(
            self.session,
            f"{API_BASE}/artworks",
            params={"page": page, "limit": PAGE_LIMIT, "fields": FIELDS},
            timeout=self.timeout,
        )

        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, list):
            raise ParseError(f"Artworks page {page} from ARTIC has no data")

        candidates = []
        for artwork in data:
            if not isinstance(artwork, dict):
                continue

            image_id = artwork.get("image_id")
            candidates.append(
                ArtworkCandidate(
                    identifier=artwork.get("id"),
                    title=artwork.get("title") or None,
                    artist_name=artwork.get("artist_title") or None,
                    has_image=bool(image_id),
                    is_eligible=bool(artwork.get("is_public_domain"))
                    and artwork.get("artwork_type_title") == "Painting",
                    image_url=image_url(image_id) if image_id else None,
                )
            )

        return candidates

    def resolve(self, candidate: ArtworkCandidate) -> ResolvedArtwork:
        # the listing already carries everything, no request needed
        return candidate.resolved()
