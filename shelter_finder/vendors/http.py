"""Shared HTTP session for the public OpenStreetMap services."""

import logging
from typing import Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from shelter_finder.core.config import Settings

logger = logging.getLogger(__name__)


def build_session(max_retries: int) -> requests.Session:
    """Create a session that retries idempotent GETs on throttling and 5xx.

    POST bodies (Overpass queries) are never replayed.
    """
    session = requests.Session()
    retries = Retry(
        total=max_retries,
        backoff_factor=1,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    logger.debug("Built HTTP session with max_retries=%d", max_retries)
    return session


def default_headers(settings: Settings) -> Dict[str, str]:
    return {"User-Agent": settings.user_agent, "Accept-Language": "en"}
