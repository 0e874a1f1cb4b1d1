"""Load and unload named fixtures into a database.

A fixture is a directory under the fixtures root holding one
``<collection>.json`` file per collection, each an array of documents in
MongoDB Extended JSON. Every call opens a private client, does its work and
closes the client again, so the loader never shares connections with the
long-lived client used for collection reads.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from bson import json_util

from insta_mongo.dependencies.mongo_client import ClientFactory, create_mongo_client
from insta_mongo.errors import FixtureFormatError, FixtureNotFoundError


logger = logging.getLogger("insta_mongo.fixtures")

FIXTURE_SUFFIX = ".json"


@dataclass
class FixtureSet:
	"""Parsed content of one fixture directory, keyed by collection name."""

	name: str
	path: Path
	collections: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

	@property
	def document_count(self) -> int:
		return sum(len(docs) for docs in self.collections.values())


def resolve_fixture_dir(fixtures_root: Path, fixture: str) -> Path:
	root = fixtures_root.resolve()
	path = (root / fixture).resolve()
	if path != root and root not in path.parents:
		raise FixtureNotFoundError(fixture, str(path))
	if path == root or not path.is_dir():
		raise FixtureNotFoundError(fixture, str(path))
	return path


def _parse_documents(path: Path, raw: str) -> List[Dict[str, Any]]:
	try:
		parsed = json_util.loads(raw)
	except ValueError as exc:
		raise FixtureFormatError(str(path), str(exc)) from exc
	if isinstance(parsed, dict):
		return [parsed]
	if not isinstance(parsed, list):
		raise FixtureFormatError(str(path), "expected a JSON array of documents")
	for index, doc in enumerate(parsed):
		if not isinstance(doc, dict):
			raise FixtureFormatError(str(path), f"item {index} is not a JSON object")
	return parsed


def read_fixture(fixtures_root: Path, fixture: str) -> FixtureSet:
	path = resolve_fixture_dir(fixtures_root, fixture)
	fixture_set = FixtureSet(name=fixture, path=path)
	for file_path in sorted(path.iterdir()):
		if not file_path.is_file() or file_path.suffix != FIXTURE_SUFFIX:
			continue
		raw = file_path.read_text(encoding="utf-8")
		fixture_set.collections[file_path.stem] = _parse_documents(file_path, raw)
	return fixture_set


def _split_for_unload(docs: List[Dict[str, Any]]) -> Tuple[List[Any], List[Dict[str, Any]]]:
	"""Split fixture documents into ``_id`` values and id-less documents to match by content."""
	ids = [doc["_id"] for doc in docs if "_id" in doc]
	# An empty document would match the whole collection.
	by_content = [doc for doc in docs if "_id" not in doc and doc]
	return ids, by_content


async def _delete_same_shape(collection: Any, doc: Dict[str, Any]) -> int:
	"""Delete stored documents equal to ``doc`` apart from their generated ``_id``.

	A field filter alone also matches documents carrying extra fields, so
	candidates are narrowed to those with exactly the fixture's field set.
	"""
	candidates = await collection.find(dict(doc)).to_list(length=None)
	fields = set(doc)
	matched = [c["_id"] for c in candidates if set(c) - {"_id"} == fields]
	if not matched:
		return 0
	result = await collection.delete_many({"_id": {"$in": matched}})
	return result.deleted_count


class FixtureLoader:
	"""Adapter over a fixture directory and a database reachable at ``store_uri``."""

	def __init__(
		self,
		store_uri: str,
		fixtures_root: Path,
		client_factory: ClientFactory = create_mongo_client,
	) -> None:
		self.store_uri = store_uri
		self.fixtures_root = fixtures_root
		self._client_factory = client_factory

	async def read(self, fixture: str) -> FixtureSet:
		return await asyncio.to_thread(read_fixture, self.fixtures_root, fixture)

	async def load(self, db: str, fixture: str) -> FixtureSet:
		"""Unload any previous copy of ``fixture`` from ``db``, then insert it."""
		fixture_set = await self.read(fixture)
		client = self._client_factory(self.store_uri)
		try:
			database = client[db]
			await self._unload(database, fixture_set)
			await self._load(database, fixture_set)
		finally:
			client.close()
		logger.info(
			"[fixtures.load] db=%s fixture=%s collections=%s documents=%s",
			db, fixture, sorted(fixture_set.collections), fixture_set.document_count,
		)
		return fixture_set

	async def unload(self, db: str, fixture: str) -> FixtureSet:
		fixture_set = await self.read(fixture)
		client = self._client_factory(self.store_uri)
		try:
			await self._unload(client[db], fixture_set)
		finally:
			client.close()
		logger.info("[fixtures.unload] db=%s fixture=%s", db, fixture)
		return fixture_set

	async def _unload(self, database: Any, fixture_set: FixtureSet) -> None:
		for collection_name, docs in fixture_set.collections.items():
			collection = database[collection_name]
			ids, by_content = _split_for_unload(docs)
			removed = 0
			if ids:
				result = await collection.delete_many({"_id": {"$in": ids}})
				removed += result.deleted_count
			for doc in by_content:
				removed += await _delete_same_shape(collection, doc)
			logger.debug(
				"[fixtures.unload.collection] fixture=%s collection=%s removed=%s",
				fixture_set.name, collection_name, removed,
			)

	async def _load(self, database: Any, fixture_set: FixtureSet) -> None:
		for collection_name, docs in fixture_set.collections.items():
			if not docs:
				continue
			# insert_many stamps _id onto its arguments; keep the parsed set clean
			await database[collection_name].insert_many([dict(doc) for doc in docs])
			logger.debug(
				"[fixtures.load.collection] fixture=%s collection=%s inserted=%s",
				fixture_set.name, collection_name, len(docs),
			)
