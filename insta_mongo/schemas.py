from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from insta_mongo.errors import MissingParameterError


DB_PARAM_MESSAGE = "Query parameter 'db' specifies database name."
LOAD_FIX_MESSAGE = "Query parameter 'fix' specifies name of fixture to load into database."
UNLOAD_FIX_MESSAGE = "Query parameter 'fix' specifies name of fixture to unload from database."
DROP_COL_MESSAGE = "Query parameter 'col' specifies name of collection to drop."
GET_COL_MESSAGE = "Query parameter 'col' specifies name of collection to get."


def _require(params: Mapping[str, str], name: str, message: str) -> str:
	value: Optional[str] = params.get(name)
	if not value:
		raise MissingParameterError(name, message)
	return value


class FixtureRequest(BaseModel):
	model_config = ConfigDict(frozen=True)

	db: str = Field(min_length=1)
	fix: str = Field(min_length=1)

	@classmethod
	def from_query(cls, params: Mapping[str, str], fix_message: str = LOAD_FIX_MESSAGE) -> "FixtureRequest":
		"""Decode query parameters, rejecting the first missing one (``db`` first)."""
		db = _require(params, "db", DB_PARAM_MESSAGE)
		fix = _require(params, "fix", fix_message)
		return cls(db=db, fix=fix)


class CollectionRequest(BaseModel):
	model_config = ConfigDict(frozen=True)

	db: str = Field(min_length=1)
	col: str = Field(min_length=1)

	@classmethod
	def from_query(cls, params: Mapping[str, str], col_message: str = GET_COL_MESSAGE) -> "CollectionRequest":
		db = _require(params, "db", DB_PARAM_MESSAGE)
		col = _require(params, "col", col_message)
		return cls(db=db, col=col)


class IsAliveResponse(BaseModel):
	ok: bool = True
