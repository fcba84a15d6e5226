"""
Blocking HTTP client for the local catalog backend.

Every request goes to one fixed loopback origin. `get` keeps the simple
contract the rest of the adapter relies on: the response body as text, or an
empty string on any transport failure. Non-2xx statuses are not failures; the
backend puts its error payloads (`{"detail": ...}`) in those bodies.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote_plus

import requests

from .errors import RequestFailed
from .jsonscan import extract_bool

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "tunebridge/1.1"


def encode_query(value: str) -> str:
    """Percent-encode user text for a query string.

    Space becomes `+`, ASCII letters, digits and `-_.~` pass through, every
    other UTF-8 byte is `%XX`-encoded. Undecodable bytes smuggled in as lone
    surrogates (e.g. from `sys.argv`) come out as their original byte.
    """
    return quote_plus(value.encode("utf-8", "surrogateescape"), safe="")


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, path: str) -> str:
        """GET `path` and return the body text.

        Raises RequestFailed on connection errors, timeouts, undecodable or
        zero-length bodies.
        """
        url = f"{self.base_url}{path}"
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestFailed(f"GET {path} failed: {e}") from e
        try:
            body = r.content.decode(r.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError) as e:
            raise RequestFailed(f"GET {path} returned an undecodable body: {e}") from e
        if not body:
            raise RequestFailed(f"GET {path} returned an empty body (HTTP {r.status_code})")
        if r.status_code >= 400:
            logger.debug("GET %s -> HTTP %s", path, r.status_code)
        return body

    def get(self, path: str) -> str:
        """Body text of GET `path`, or "" on failure."""
        try:
            return self.fetch(path)
        except RequestFailed as e:
            logger.debug("%s", e)
            return ""

    def is_server_alive(self) -> bool:
        body = self.get("/")
        alive = bool(body) and '"status"' in body
        if alive:
            logger.debug("HttpClient: server is alive")
        else:
            logger.info("HttpClient: server not responding")
        return alive

    def is_authenticated(self) -> bool:
        body = self.get("/auth_status")
        if not body:
            return False
        auth = extract_bool(body, "authenticated")
        logger.info("HttpClient: authenticated = %s", auth)
        return auth

    def close(self) -> None:
        self.session.close()
