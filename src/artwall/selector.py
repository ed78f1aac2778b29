"""
Candidate Selector

Pick a random eligible artwork from a catalog client. Which strategy runs depends on the kind
of the client (see artwall.sources.base):

    flat    draw ids at random from the cached id list and resolve them one at a time,
            up to max_attempts.
    paged   draw a random page, keep the candidates that have an image and are eligible,
            shuffle them and probe each image url until one answers. Empty pages and pages
            where every probe fails both move on to a new random page, up to max_pages.

Every draw is uniform and independent: no weighting, no memory of earlier picks. Errors from a
single attempt are swallowed (logged) and turned into "try the next one". Only running out of
attempts escapes, as ExhaustedError.
"""

import logging
import random
from functools import partial

from artwall import image_handler
from artwall.cache import CatalogCache
from artwall.image_handler import NetworkError
from artwall.sources.base import NotFoundError
from artwall.sources.base import ParseError
from artwall.sources.base import ResolvedArtwork

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10
MAX_PAGES = 10


class ExhaustedError(Exception):
    """
    Raised when no eligible artwork turned up within the attempt (or page) budget.
    """

    pass


def select_from_flat_list(
    client,
    cache: CatalogCache,
    rng: random.Random,
    max_attempts: int = MAX_ATTEMPTS,
    **kwargs,
) -> ResolvedArtwork:
    """
    Resolve randomly drawn identifiers until one yields an image. Failing to fetch the id list
    itself is not an attempt and propagates to the caller.
    """

    identifiers = cache.get_or_fetch(client.descriptor.id, client.list_identifiers)

    if not identifiers:
        raise ExhaustedError(f"{client.descriptor.display_name} listed no artworks")

    for attempt in range(1, max_attempts + 1):
        identifier = rng.choice(identifiers)

        try:
            return client.resolve(identifier)

        except (NetworkError, ParseError, NotFoundError) as error:
            logger.info(
                "attempt %d/%d: %s, trying another...", attempt, max_attempts, error
            )

    raise ExhaustedError(
        f"could not find an eligible artwork after {max_attempts} attempts"
    )


def select_from_pages(
    client,
    rng: random.Random,
    probe,
    max_pages: int = MAX_PAGES,
    **kwargs,
) -> ResolvedArtwork:
    """
    Draw random pages until one holds an eligible candidate whose image url answers the probe.
    """

    for attempt in range(1, max_pages + 1):
        page = rng.randint(1, client.max_page)

        try:
            candidates = client.list_candidates(page)

        except (NetworkError, ParseError) as error:
            logger.info("page %d unavailable (%s), trying another...", page, error)
            continue

        eligible = [c for c in candidates if c.has_image and c.is_eligible]

        if not eligible:
            logger.info("no eligible artworks on page %d, trying another...", page)
            continue

        rng.shuffle(eligible)

        for candidate in eligible:
            try:
                if probe(candidate.image_url):
                    return client.resolve(candidate)

            except NetworkError as error:
                logger.debug("probe error for %s: %s", candidate.image_url, error)

            logger.info('image unavailable for "%s", trying another...', candidate.title)

    raise ExhaustedError(
        f"could not find an eligible artwork after {max_pages} pages"
    )


STRATEGIES = {
    "flat": select_from_flat_list,
    "paged": select_from_pages,
}


def select_random_eligible(
    client,
    cache: CatalogCache = None,
    rng: random.Random = None,
    probe=None,
    max_attempts: int = MAX_ATTEMPTS,
    max_pages: int = MAX_PAGES,
) -> ResolvedArtwork:
    """
    Return a random eligible artwork from client, dispatching on client.kind.
    Raises ExhaustedError when the budget runs out.
    """

    try:
        strategy = STRATEGIES[client.kind]

    except KeyError:
        raise ValueError(f"No selection strategy for catalog kind {client.kind!r}")

    if probe is None:
        probe = partial(
            image_handler.probe,
            session=client.session,
            timeout=getattr(client, "timeout", image_handler.DEFAULT_TIMEOUT),
        )

    return strategy(
        client,
        cache=cache if cache is not None else CatalogCache(),
        rng=rng or random.Random(),
        probe=probe,
        max_attempts=max_attempts,
        max_pages=max_pages,
    )
