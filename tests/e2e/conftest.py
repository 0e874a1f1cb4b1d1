"""E2E test configuration for a running insta-mongo process.

Start the server first (e.g. ``insta-mongo --fixtures tests/e2e/fixtures``),
then run with ``INSTA_MONGO_E2E_URL=http://localhost:5000``.
"""

import os
import time

import httpx
import pytest


@pytest.fixture(scope="session")
def base_url() -> str:
    url = os.environ.get("INSTA_MONGO_E2E_URL")
    if not url:
        pytest.skip("INSTA_MONGO_E2E_URL not set")
    return url.rstrip("/")


@pytest.fixture(scope="session")
def http(base_url):
    """Wait for the server to answer /is-alive, then hand out a client."""
    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        for _ in range(60):
            try:
                if client.get("/is-alive").status_code == 200:
                    break
            except httpx.HTTPError:
                pass
            time.sleep(1)
        else:
            pytest.fail("insta-mongo did not become ready")
        yield client
