"""HTTP access with SSL certificate handling.

All network traffic in goupgrade goes through :class:`HttpClient`, which
verifies TLS against certifi's CA bundle and turns urllib failures into the
pipeline's error types. Components receive the client by injection so the
network can be replaced in tests.
"""

from __future__ import annotations

import ssl
from contextlib import contextmanager
from http.client import HTTPException
from typing import BinaryIO, Iterator, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import certifi

from goupgrade import __version__ as GOUPGRADE_VERSION
from goupgrade.core.errors import HTTPStatusError, NetworkError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

USER_AGENT = f"goupgrade/{GOUPGRADE_VERSION}"


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle.

    Returns:
        An SSL context configured with certifi's CA certificates.
    """
    return ssl.create_default_context(cafile=certifi.where())


class HttpClient:
    """Blocking HTTP GET client.

    Args:
        timeout: Socket timeout in seconds. ``None`` waits indefinitely.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._ssl_context: Optional[ssl.SSLContext] = None

    @property
    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = get_ssl_context()
        return self._ssl_context

    @contextmanager
    def get(self, url: str) -> Iterator[BinaryIO]:
        """Issue a GET request and yield the response body as a stream.

        The response is closed when the ``with`` block exits, on every path.

        Raises:
            HTTPStatusError: If the server answers with a status other than 200.
            NetworkError: If the request cannot be made or completed.
        """
        LOGGER.debug(f"GET {url}")
        request = Request(url, headers={"User-Agent": USER_AGENT})

        try:
            response = urlopen(request, timeout=self.timeout, context=self.ssl_context)  # nosec B310
        except HTTPError as e:
            e.close()
            raise HTTPStatusError(url, e.code, str(e.reason)) from e
        except URLError as e:
            raise NetworkError(f"couldn't reach {url}: {e.reason}") from e
        except (OSError, ValueError) as e:
            raise NetworkError(f"couldn't request {url}: {e}") from e

        with response:
            status = getattr(response, "status", 200)
            if status != 200:
                raise HTTPStatusError(url, status, getattr(response, "reason", None))
            try:
                yield response
            except (OSError, HTTPException) as e:
                # Reading the body failed after the headers arrived
                raise NetworkError(f"couldn't read response from {url}: {e}") from e
