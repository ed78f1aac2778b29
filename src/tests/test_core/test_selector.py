"""
Tests for selector.py

Random draws are scripted with ScriptedRandom (conftest.py) so every scenario is deterministic.
Catalog clients are the fakes from conftest.py; no network is involved.
"""

import random

import pytest

from artwall.cache import CatalogCache
from artwall.image_handler import NetworkError
from artwall.selector import ExhaustedError
from artwall.selector import select_random_eligible
from artwall.sources.base import NotFoundError
from artwall.sources.base import ParseError
from artwall.sources.base import ResolvedArtwork


def art(identifier):
    return ResolvedArtwork(
        image_url=f"https://images.example.org/{identifier}.jpg",
        title=f"Painting {identifier}",
        author="Someone",
    )


def always(result):
    def _probe(url):
        return result

    return _probe


# flat-list strategy


def test_flat_scenario_skips_missing_image(flat_client, scripted_random):
    """
    Cached list [1, 2, 3]; 1 has no image, 2 has one: the selector returns 2 within three attempts.
    """

    client = flat_client([1, 2, 3], {1: NotFoundError("No image"), 2: art(2)})
    rng = scripted_random(choices=[1, 2])

    assert select_random_eligible(client, cache=CatalogCache(), rng=rng) == art(2)
    assert client.resolved == [1, 2]


@pytest.mark.parametrize(
    "error", [NotFoundError("no image"), NetworkError("timeout"), ParseError("garbage")]
)
def test_flat_attempt_errors_are_swallowed(flat_client, scripted_random, error):
    client = flat_client([1, 2], {1: error, 2: art(2)})

    artwork = select_random_eligible(
        client, cache=CatalogCache(), rng=scripted_random(choices=[1, 1, 2])
    )

    assert artwork == art(2)
    assert client.resolved == [1, 1, 2]


@pytest.mark.parametrize("max_attempts", [1, 3, 10])
def test_flat_exhausted_after_exact_bound(flat_client, max_attempts):
    client = flat_client([1, 2, 3], {})

    with pytest.raises(ExhaustedError, match=f"after {max_attempts} attempts"):
        select_random_eligible(
            client, cache=CatalogCache(), rng=random.Random(4), max_attempts=max_attempts
        )

    assert len(client.resolved) == max_attempts


def test_flat_default_bound_is_ten(flat_client):
    client = flat_client([1, 2, 3], {})

    with pytest.raises(ExhaustedError):
        select_random_eligible(client, cache=CatalogCache(), rng=random.Random(1))

    assert len(client.resolved) == 10


def test_flat_uses_cache(flat_client):
    client = flat_client([7], {7: art(7)})
    cache = CatalogCache()

    select_random_eligible(client, cache=cache)
    select_random_eligible(client, cache=cache)

    assert client.list_calls == 1
    assert cache.entry("flat").identifiers == (7,)


def test_flat_listing_failure_propagates(flat_client):
    client = flat_client([], {})

    def broken():
        raise NetworkError("API request failed: 500", status_code=500)

    client.list_identifiers = broken

    with pytest.raises(NetworkError):
        select_random_eligible(client, cache=CatalogCache())


def test_flat_returns_only_resolved_artworks(flat_client):
    """For any draw order the result is one of the artworks that resolved successfully."""

    artworks = {i: art(i) for i in range(0, 50, 7)}
    client = flat_client(range(50), artworks)

    for seed in range(20):
        try:
            artwork = select_random_eligible(
                client, cache=CatalogCache(), rng=random.Random(seed)
            )
        except ExhaustedError:
            continue
        assert artwork in artworks.values()


# paged strategy


def test_paged_scenario_one_page_retry(paged_client, candidate, scripted_random):
    """
    Page 1 has no eligible candidates, page 2 has one that validates: exactly one page-level retry.
    """

    client = paged_client(
        {
            1: [candidate(10, has_image=False), candidate(11, is_eligible=False)],
            2: [candidate(20)],
        }
    )

    artwork = select_random_eligible(
        client, rng=scripted_random(pages=[1, 2]), probe=always(True)
    )

    assert artwork == candidate(20).resolved()
    assert client.requested == [1, 2]


def test_paged_filters_and_probes_in_shuffled_order(paged_client, candidate, scripted_random):
    client = paged_client(
        {5: [candidate(1), candidate(2, has_image=False), candidate(3), candidate(4, is_eligible=False)]}
    )
    probed = []

    def probe(url):
        probed.append(url)
        return "/3/" in url

    artwork = select_random_eligible(client, rng=scripted_random(pages=[5]), probe=probe)

    assert artwork.title == "Painting 3"
    # only eligible candidates with images are probed
    assert probed == [candidate(1).image_url, candidate(3).image_url]


def test_paged_all_probes_fail_moves_to_next_page(paged_client, candidate, scripted_random):
    client = paged_client({1: [candidate(1), candidate(2)], 2: [candidate(3)]})

    def probe(url):
        return "/3/" in url

    artwork = select_random_eligible(client, rng=scripted_random(pages=[1, 2]), probe=probe)

    assert artwork.title == "Painting 3"
    assert client.requested == [1, 2]


def test_paged_probe_error_counts_as_failure(paged_client, candidate, scripted_random):
    client = paged_client({1: [candidate(1), candidate(2)]})

    def probe(url):
        if "/1/" in url:
            raise NetworkError("connection reset")
        return True

    artwork = select_random_eligible(client, rng=scripted_random(pages=[1]), probe=probe)

    assert artwork.title == "Painting 2"


@pytest.mark.parametrize("error", [NetworkError("API request failed: 403", status_code=403), ParseError("bad page")])
def test_paged_page_errors_move_to_next_page(paged_client, candidate, scripted_random, error):
    client = paged_client({3: error, 4: [candidate(40)]})

    artwork = select_random_eligible(
        client, rng=scripted_random(pages=[3, 4]), probe=always(True)
    )

    assert artwork.title == "Painting 40"


def test_paged_exhausted_after_page_bound(paged_client, candidate):
    client = paged_client({})

    with pytest.raises(ExhaustedError, match="after 6 pages"):
        select_random_eligible(client, rng=random.Random(0), probe=always(True), max_pages=6)

    assert len(client.requested) == 6


def test_paged_page_numbers_in_range(paged_client):
    client = paged_client({})

    with pytest.raises(ExhaustedError):
        select_random_eligible(client, rng=random.Random(3), probe=always(True), max_pages=50)

    assert all(1 <= page <= client.max_page for page in client.requested)


def test_paged_result_is_eligible(paged_client, candidate):
    """Whatever the draws, a returned artwork came from an eligible candidate with an image."""

    pages = {
        page: [
            candidate(page * 10 + i, has_image=i % 2 == 0, is_eligible=i % 3 == 0)
            for i in range(6)
        ]
        for page in range(1, 101)
    }
    eligible = {
        c.resolved()
        for candidates in pages.values()
        for c in candidates
        if c.has_image and c.is_eligible
    }
    client = paged_client(pages)

    for seed in range(10):
        artwork = select_random_eligible(client, rng=random.Random(seed), probe=always(True))
        assert artwork in eligible


def test_unknown_kind(flat_client):
    client = flat_client([1], {})
    client.kind = "carrier-pigeon"

    with pytest.raises(ValueError):
        select_random_eligible(client)
