"""Shared HTTP session for the feed, chatbot and prediction upstreams."""

from __future__ import annotations

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from hazard_relay import __version__

USER_AGENT = f"hazard-relay/{__version__}"


def create_session(
    retries: int = 0,
    backoff_factor: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
) -> Session:
    """Create a requests Session with an optional exponential backoff retry.

    The default of zero retries makes every upstream call best-effort, once.
    When enabled, status and read retries apply only to GET requests (the
    feed); the chatbot and prediction POSTs are never replayed once sent.
    """
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = Session()
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session
