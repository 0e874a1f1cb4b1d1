import pytest
from pydantic import ValidationError

from insta_mongo.errors import MissingParameterError
from insta_mongo.schemas import (
    DB_PARAM_MESSAGE,
    DROP_COL_MESSAGE,
    LOAD_FIX_MESSAGE,
    UNLOAD_FIX_MESSAGE,
    CollectionRequest,
    FixtureRequest,
)


def test_fixture_request_from_query():
    req = FixtureRequest.from_query({"db": "testdb", "fix": "sample"})
    assert req.db == "testdb"
    assert req.fix == "sample"


def test_missing_db_reported_before_fix():
    with pytest.raises(MissingParameterError) as exc_info:
        FixtureRequest.from_query({})
    assert exc_info.value.param == "db"
    assert exc_info.value.message == DB_PARAM_MESSAGE
    assert exc_info.value.status_code == 400


def test_empty_value_counts_as_missing():
    with pytest.raises(MissingParameterError) as exc_info:
        FixtureRequest.from_query({"db": "testdb", "fix": ""}, UNLOAD_FIX_MESSAGE)
    assert exc_info.value.param == "fix"
    assert exc_info.value.message == UNLOAD_FIX_MESSAGE


def test_default_fix_message_is_load():
    with pytest.raises(MissingParameterError) as exc_info:
        FixtureRequest.from_query({"db": "testdb"})
    assert exc_info.value.message == LOAD_FIX_MESSAGE


def test_collection_request_from_query():
    req = CollectionRequest.from_query({"db": "testdb", "col": "widgets"}, DROP_COL_MESSAGE)
    assert (req.db, req.col) == ("testdb", "widgets")

    with pytest.raises(MissingParameterError) as exc_info:
        CollectionRequest.from_query({"db": "testdb"}, DROP_COL_MESSAGE)
    assert exc_info.value.param == "col"
    assert exc_info.value.message == DROP_COL_MESSAGE


def test_direct_construction_rejects_empty_identifiers():
    with pytest.raises(ValidationError):
        CollectionRequest(db="", col="widgets")
