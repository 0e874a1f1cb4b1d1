from __future__ import annotations

import datetime
import json
from typing import Any, Dict, List

from bson import ObjectId, json_util
from bson.json_util import RELAXED_JSON_OPTIONS


def _encode_value(value: Any) -> Any:
	if isinstance(value, ObjectId):
		return str(value)
	if isinstance(value, datetime.datetime):
		return value.isoformat()
	# Decimal128, Binary, Timestamp, Regex, ... keep their Extended JSON form
	return json_util.default(value, json_options=RELAXED_JSON_OPTIONS)


def encode_documents(documents: List[Dict[str, Any]]) -> List[Any]:
	"""Render store documents as plain JSON values.

	ObjectIds become their hex string and datetimes ISO-8601 strings; any
	other BSON type is written in relaxed Extended JSON.
	"""
	return json.loads(json.dumps(documents, default=_encode_value))


class CollectionOperations:
	"""Collection-level calls against the shared, long-lived client.

	No result is cached: the set of collections can change between calls.
	"""

	def __init__(self, client: Any) -> None:
		self._client = client

	async def exists(self, db: str, collection: str) -> bool:
		names = await self._client[db].list_collection_names()
		return collection in names

	async def drop(self, db: str, collection: str) -> None:
		await self._client[db].drop_collection(collection)

	async def read(self, db: str, collection: str) -> List[Dict[str, Any]]:
		cursor = self._client[db][collection].find()
		return await cursor.to_list(length=None)
