"""
Image Handler

Utilities for downloading and validating images.

Downloading images: source agnostic. A catalog client resolves an artwork to an image url
and hands it off here; no catalog API knowledge lives in this module. Requests follows
redirects; the session's max_redirects keeps the number of hops bounded.

Validation: Pillow reads the header of the downloaded bytes to make sure we actually got an
image back. Images are never re-encoded or resized.
"""

import logging

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
MAX_REDIRECTS = 10


class NetworkError(Exception):
    """
    Raised when a request fails at the transport level or the server answers with an
    unusable status. status_code is None when no response was received at all.
    """

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidImageError(Exception):
    """
    Raised when a provided binary input is not an image. Wrapper around the PIL
    UnidentifiedImageError for better identification of errors during debugging
    and custom error messaging.
    """

    pass


def validate_image(input) -> str:
    """
    Determine whether input is a valid image. PIL open method accepts a Path object, string, or file object (buffered stream).
    The PIL method reads the content header to determine file type but doesn't load the pixel data,
    so it is safe to use as a validation method. Returns the image format, e.g. 'JPEG'.
    """

    try:
        with Image.open(input) as image:

            return image.format

    except UnidentifiedImageError:
        raise InvalidImageError(f"Input {str(input)} does not appear to be an image.")

    except FileNotFoundError:
        raise InvalidImageError(f"Input {str(input)} could not be found.")


def download(
    url: str,
    session: requests.Session = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_redirects: int = MAX_REDIRECTS,
) -> bytes:
    """
    Download the resource at url and return the raw bytes.

    The get method from Requests follows redirects (3XX with a Location header) on our behalf,
    relative locations included, and r.history holds the hops it took. session.max_redirects
    bounds the chain: more than max_redirects hops raises NetworkError, as does any non-2XX
    final status (status_code is set on the error). A 3XX without a Location header is not
    followed and counts as a non-2XX status.
    """

    session = session or requests.Session()
    session.max_redirects = max_redirects

    try:
        r = session.get(url, timeout=timeout)

    except requests.exceptions.TooManyRedirects:
        raise NetworkError(
            f"Download error: too many redirects (>{max_redirects}) for {url}"
        )

    except requests.exceptions.RequestException as error:
        raise NetworkError(f"Download error: could not reach {url}: {error}")

    # r.url is the last effective url hit in a redirect sequence
    if r.history:
        logger.debug("followed %d redirect(s) %s -> %s", len(r.history), url, r.url)

    if not 200 <= r.status_code < 300:
        raise NetworkError(
            f"Download error: something went wrong trying to access {r.url} (status code {r.status_code})",
            status_code=r.status_code,
        )

    return r.content


def probe(
    url: str, session: requests.Session = None, timeout: float = DEFAULT_TIMEOUT
) -> bool:
    """
    Lightweight existence check for an image url. Issues a HEAD request and returns True only
    for a 200 response. Raises NetworkError if the request could not be made at all.
    """

    session = session or requests.Session()

    try:
        r = session.head(url, timeout=timeout)

    except requests.exceptions.RequestException as error:
        raise NetworkError(f"Probe error: could not reach {url}: {error}")

    return r.status_code == 200
