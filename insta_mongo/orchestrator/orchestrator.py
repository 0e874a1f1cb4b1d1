"""Fixture orchestrator: request-scoped coordination of store operations."""

from __future__ import annotations

import enum
import logging
from typing import Any, List

from insta_mongo.errors import FixtureOperationError
from insta_mongo.schemas import CollectionRequest, FixtureRequest
from insta_mongo.services.collections import CollectionOperations, encode_documents
from insta_mongo.services.fixture_loader import FixtureLoader

from .locks import KeyedLocks

logger = logging.getLogger("insta_mongo.orchestrator")


class DropOutcome(str, enum.Enum):
    DROPPED = "dropped"
    NOT_FOUND = "not_found"


class FixtureOrchestrator:
    """Drives one load, unload, drop or read per call.

    Callers hand in already-decoded requests, so identifiers are known to be
    non-empty by the time anything touches the store. Any collaborator
    exception is logged with its traceback and re-raised as
    :class:`FixtureOperationError` carrying only a short summary.

    Load and unload of the same ``(db, fixture)`` pair are serialized;
    different pairs, and all collection operations, run concurrently.
    """

    def __init__(self, *, loader: FixtureLoader, collections: CollectionOperations) -> None:
        self._loader = loader
        self._collections = collections
        self._fixture_locks = KeyedLocks()

    async def load_fixture(self, request: FixtureRequest) -> None:
        msg = f"Failed to load database fixture {request.fix} to database {request.db}"
        async with self._fixture_locks.hold((request.db, request.fix)):
            try:
                await self._loader.load(request.db, request.fix)
            except Exception as exc:
                raise self._failure(msg, exc) from exc
        logger.info("[orchestrator.load] Loaded database fixture: %s to database %s", request.fix, request.db)

    async def unload_fixture(self, request: FixtureRequest) -> None:
        msg = f"Failed to unload database fixture {request.fix} from database {request.db}"
        async with self._fixture_locks.hold((request.db, request.fix)):
            try:
                await self._loader.unload(request.db, request.fix)
            except Exception as exc:
                raise self._failure(msg, exc) from exc
        logger.info("[orchestrator.unload] Unloaded database fixture: %s from database %s", request.fix, request.db)

    async def drop_collection(self, request: CollectionRequest) -> DropOutcome:
        msg = f"Failed to drop collection {request.col} from database {request.db}"
        try:
            # Absence is a benign end state, so check first rather than let the
            # store report a missing namespace.
            if not await self._collections.exists(request.db, request.col):
                logger.info("[orchestrator.drop] Collection doesn't exist: %s db=%s", request.col, request.db)
                return DropOutcome.NOT_FOUND
            await self._collections.drop(request.db, request.col)
        except Exception as exc:
            raise self._failure(msg, exc) from exc
        logger.info("[orchestrator.drop] Dropped collection: %s db=%s", request.col, request.db)
        return DropOutcome.DROPPED

    async def get_collection(self, request: CollectionRequest) -> List[Any]:
        """Read a collection and return its documents as JSON-ready values."""
        msg = f"Failed to get collection {request.col} from database {request.db}"
        try:
            documents = encode_documents(await self._collections.read(request.db, request.col))
        except Exception as exc:
            raise self._failure(msg, exc) from exc
        logger.debug("[orchestrator.get] db=%s collection=%s count=%s", request.db, request.col, len(documents))
        return documents

    @staticmethod
    def _failure(msg: str, exc: Exception) -> FixtureOperationError:
        logger.error("[orchestrator.error] %s: %s", msg, exc, exc_info=exc)
        return FixtureOperationError(msg)
