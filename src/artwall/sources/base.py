"""
Catalog Sources - shared types

A catalog source wraps one museum API. Two access patterns exist and every client declares
which one it follows through its `kind` attribute:

    "flat"   the API exposes one global list of opaque object ids (cheap to cache, expensive
             to fetch). Each id is resolved by a separate per-object request.
    "paged"  the API exposes a paginated listing that already embeds title, artist and image id.
             The image url is constructed from the listing without another request.

The candidate selector dispatches on `kind`. Clients do not share a base class; they only need
to carry `descriptor`, `kind`, `session` and `timeout` plus the operations of their kind.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from artwall.image_handler import NetworkError

UNTITLED = "Untitled"
UNKNOWN_ARTIST = "Unknown Artist"


class ParseError(Exception):
    """
    Raised when a catalog API answers with a body that can't be decoded or doesn't have the
    expected shape.
    """

    pass


class NotFoundError(Exception):
    """
    Raised when a catalog entry exists but has no usable image (or is not eligible for display).
    """

    pass


@dataclass(frozen=True)
class SourceDescriptor:
    id: str
    display_name: str


@dataclass(frozen=True)
class ResolvedArtwork:
    """Terminal result of a successful selection: everything needed to download and credit an image."""

    image_url: str
    title: str = UNTITLED
    author: str = UNKNOWN_ARTIST


@dataclass(frozen=True)
class ArtworkCandidate:
    """
    One entry of a listing response. Eligibility is decided by the source (public domain flag,
    artwork type, ...). image_url is None when the source doesn't embed enough to build one.
    """

    identifier: object
    title: Optional[str] = None
    artist_name: Optional[str] = None
    has_image: bool = False
    is_eligible: bool = False
    image_url: Optional[str] = None

    def resolved(self) -> ResolvedArtwork:
        return ResolvedArtwork(
            image_url=self.image_url,
            title=self.title or UNTITLED,
            author=self.artist_name or UNKNOWN_ARTIST,
        )


def make_session(user_agent: str) -> requests.Session:
    """Return a Requests session identifying artwall to the catalog APIs."""

    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    return session


def fetch_json(
    session: requests.Session, url: str, params: dict = None, timeout: float = 15
):
    """
    GET url and decode the JSON body. Raises NetworkError for transport failures and
    non-200 responses, ParseError for bodies that aren't JSON.
    """

    try:
        r = session.get(url, params=params, timeout=timeout)

    except requests.exceptions.RequestException as error:
        raise NetworkError(f"API request to {url} failed: {error}")

    if r.status_code != 200:
        raise NetworkError(
            f"API request failed: {r.status_code} ({url})", status_code=r.status_code
        )

    try:
        return r.json()

    except ValueError:
        raise ParseError(f"Failed to parse API response from {url}")
