"""
conftest.py

Test configuration for artwall tests.

Defines pytest fixtures for supplying test data across the entire test suite: images generated
with Pillow, fake requests responses, fake catalog clients and an isolated config/storage
directory. Fixtures used within only a single module are defined directly in that module.
"""

import io
import random
from unittest.mock import MagicMock

import pytest
from PIL import Image

from artwall.config import ArtwallConfig
from artwall.image_handler import NetworkError
from artwall.sources.base import ArtworkCandidate
from artwall.sources.base import NotFoundError
from artwall.sources.base import ResolvedArtwork
from artwall.sources.base import SourceDescriptor


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Return the bytes of a small JPEG image."""

    buffer = io.BytesIO()
    Image.new("RGB", (32, 24), color=(120, 80, 40)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def test_image(tmp_path, jpeg_bytes):
    """Return a Path pointing to a JPEG image on disk."""

    path = tmp_path / "painting.jpg"
    path.write_bytes(jpeg_bytes)
    return path


@pytest.fixture
def make_response():
    """
    Return a factory for MagicMocks standing in for requests.Response objects.
    """

    def _make_response(status_code=200, content=b"", headers=None, json=None, url=""):
        response = MagicMock()
        response.status_code = status_code
        response.content = content
        response.headers = headers or {}
        response.url = url
        response.history = []

        if isinstance(json, Exception):
            response.json.side_effect = json
        else:
            response.json.return_value = json

        return response

    return _make_response


class ScriptedRandom(random.Random):
    """
    random.Random whose choice/randint answers come from scripts, so tests control every draw.
    shuffle keeps the given order unless told otherwise.
    """

    def __init__(self, choices=(), pages=(), shuffle=False):
        super().__init__(0)
        self.choices = list(choices)
        self.pages = list(pages)
        self.do_shuffle = shuffle

    def choice(self, seq):
        if self.choices:
            return self.choices.pop(0)
        return super().choice(seq)

    def randint(self, a, b):
        if self.pages:
            return self.pages.pop(0)
        return super().randint(a, b)

    def shuffle(self, x):
        if self.do_shuffle:
            super().shuffle(x)


class FakeFlatClient:
    """
    Flat-list catalog client. artworks maps identifier -> ResolvedArtwork, or to an exception
    instance raised when that identifier is resolved.
    """

    kind = "flat"

    def __init__(self, identifiers, artworks, source_id="flat"):
        self.descriptor = SourceDescriptor(id=source_id, display_name="Flat Museum")
        self.session = MagicMock()
        self.timeout = 1
        self.identifiers = list(identifiers)
        self.artworks = artworks
        self.list_calls = 0
        self.resolved = []

    def list_identifiers(self):
        self.list_calls += 1
        return list(self.identifiers)

    def resolve(self, identifier):
        self.resolved.append(identifier)
        artwork = self.artworks.get(identifier, NotFoundError(f"No image for {identifier}"))
        if isinstance(artwork, Exception):
            raise artwork
        return artwork


class FakePagedClient:
    """Paged catalog client. pages maps page number -> list of candidates, or an exception."""

    kind = "paged"
    max_page = 100

    def __init__(self, pages, source_id="paged"):
        self.descriptor = SourceDescriptor(id=source_id, display_name="Paged Museum")
        self.session = MagicMock()
        self.timeout = 1
        self.pages = pages
        self.requested = []

    def list_candidates(self, page=1):
        self.requested.append(page)
        result = self.pages.get(page, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def resolve(self, candidate):
        return candidate.resolved()


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def flat_client():
    return FakeFlatClient


@pytest.fixture
def paged_client():
    return FakePagedClient


@pytest.fixture
def artwork():
    return ResolvedArtwork(
        image_url="https://images.example.org/wheat-field.jpg",
        title="Wheat Field with Cypresses",
        author="Vincent van Gogh",
    )


@pytest.fixture
def candidate():
    """Factory for paged-listing candidates, eligible with an image unless told otherwise."""

    def _candidate(identifier, has_image=True, is_eligible=True, title=None):
        return ArtworkCandidate(
            identifier=identifier,
            title=title or f"Painting {identifier}",
            artist_name="Unknown Artist",
            has_image=has_image,
            is_eligible=is_eligible,
            image_url=f"https://iiif.example.org/{identifier}/full/1686,/0/default.jpg"
            if has_image
            else None,
        )

    return _candidate


@pytest.fixture
def network_error():
    return NetworkError


@pytest.fixture
def config(tmp_path, monkeypatch) -> ArtwallConfig:
    """
    Point artwall at a temporary config and storage directory and write a config.json there,
    so nothing in the user's home directory is touched.
    """

    config = ArtwallConfig(
        ARTWALL_CONFIG_DIR=tmp_path / "config",
        ARTWALL_STORAGE_DIR=tmp_path / "storage",
        RETRY_DELAY=0,
    )
    config.generate_config_json()
    monkeypatch.setenv("ARTWALL_CONFIG_DIR", str(config.ARTWALL_CONFIG_DIR))

    return config
