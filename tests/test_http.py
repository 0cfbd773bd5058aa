from shelter_finder.core.config import Settings
from shelter_finder.vendors import http


def test_session_retries_only_get():
    session = http.build_session(max_retries=3)
    retry = session.get_adapter("https://nominatim.openstreetmap.org").max_retries

    assert retry.total == 3
    assert retry.is_retry("GET", 503)
    assert not retry.is_retry("POST", 503)
    assert 429 in retry.status_forcelist


def test_default_headers_identify_client():
    headers = http.default_headers(Settings(user_agent="ShelterFinder/9.9 (ops@example.org)"))
    assert headers["User-Agent"] == "ShelterFinder/9.9 (ops@example.org)"
