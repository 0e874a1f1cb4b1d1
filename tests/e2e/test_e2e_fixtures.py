"""End-to-end lifecycle against a real insta-mongo process and mongod."""

from uuid import uuid4

import pytest


@pytest.fixture
def db_name() -> str:
    return f"e2e_{uuid4().hex[:8]}"


def _strip_ids(docs):
    return [{k: v for k, v in d.items() if k != "_id"} for d in docs]


def test_load_read_drop_cycle(http, db_name):
    assert http.get("/load-fixture", params={"db": db_name, "fix": "sample"}).status_code == 200

    response = http.get("/get-collection", params={"db": db_name, "col": "widgets"})
    assert response.status_code == 200
    assert _strip_ids(response.json()) == [{"id": 1, "name": "a"}]

    # reloading replaces rather than duplicates
    assert http.get("/load-fixture", params={"db": db_name, "fix": "sample"}).status_code == 200
    assert len(http.get("/get-collection", params={"db": db_name, "col": "widgets"}).json()) == 1

    assert http.get("/drop-collection", params={"db": db_name, "col": "widgets"}).status_code == 200
    assert http.get("/drop-collection", params={"db": db_name, "col": "widgets"}).status_code == 200
    assert http.get("/get-collection", params={"db": db_name, "col": "widgets"}).json() == []


def test_unload_twice(http, db_name):
    http.get("/load-fixture", params={"db": db_name, "fix": "sample"})
    for _ in range(2):
        assert http.get("/unload-fixture", params={"db": db_name, "fix": "sample"}).status_code == 200
    assert http.get("/get-collection", params={"db": db_name, "col": "widgets"}).json() == []


def test_missing_parameter(http):
    response = http.get("/load-fixture", params={"db": "x"})
    assert response.status_code == 400
    assert "fix" in response.text
