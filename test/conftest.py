"""
Shared test fixtures for transitview.

Provides:
- MBTA fixture data loaders
- Fake MBTA server for client and E2E tests
- Temporary config files
"""

import json
from pathlib import Path

import pytest
from pytest_httpserver import HTTPServer

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "mbta"


# ---------------------------------------------------------------------------
# Fixture data loaders
# ---------------------------------------------------------------------------

def load_fixture(name: str) -> dict:
    """Load a JSON fixture from test/fixtures/mbta/."""
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


def fixture_data(name: str):
    """Load a fixture and return its `data` member."""
    return load_fixture(name)["data"]


# ---------------------------------------------------------------------------
# Fake MBTA server
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_mbta_server():
    """
    A real HTTP server that impersonates the MBTA v3 API.

    Tests register the responses they need with expect_request().
    """
    server = HTTPServer(host="127.0.0.1")
    server.start()
    yield server
    server.clear()
    if server.is_running():
        server.stop()


@pytest.fixture()
def fake_mbta_url(fake_mbta_server):
    return f"http://{fake_mbta_server.host}:{fake_mbta_server.port}"


@pytest.fixture()
def config_file(fake_mbta_url, tmp_path):
    """
    Write a temporary config.yaml that points at the fake MBTA server.
    Returns the path to the config file.
    """
    config_content = f"""\
mbta_base_url: "{fake_mbta_url}"
request_timeout: 5
alert_max_chars: 140
display_timezone: "America/New_York"
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)
    return str(config_path)
