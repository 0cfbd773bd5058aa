import sys
from pathlib import Path

import pytest

# Ensure `shelter_finder` is importable when running pytest from the repository root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shelter_finder.core import config  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in (
        "NOMINATIM_URL",
        "OVERPASS_URL",
        "HTTP_USER_AGENT",
        "HTTP_TIMEOUT_SECONDS",
        "HTTP_MAX_RETRIES",
        "NOMINATIM_DELAY_SECONDS",
        "NOMINATIM_RESULT_LIMIT",
        "DEFAULT_LATITUDE",
        "DEFAULT_LONGITUDE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests

            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class DummySession:
    """Returns queued responses in order; an Exception entry is raised instead."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def _next(self):
        response = self.responses.pop(0) if self.responses else DummyResponse(payload=[])
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(("GET", url, params, headers, timeout))
        return self._next()

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append(("POST", url, data, headers, timeout))
        return self._next()
