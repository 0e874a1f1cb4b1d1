"""Integration test configuration.

Integration tests drive the full app through FastAPI's TestClient, with the
store replaced by the in-memory mock from tests/fixtures/mongo_mock.py. The
shared fixtures (``api_client``, ``app``, ``mongo_server``, ``settings``) live
in tests/conftest.py.

Note: E2E tests against a real running process are in tests/e2e/.
"""
