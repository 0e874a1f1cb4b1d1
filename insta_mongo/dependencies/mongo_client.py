from __future__ import annotations

from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient


ClientFactory = Callable[[str], Any]


def create_mongo_client(uri: str) -> AsyncIOMotorClient:
	"""Open a motor client against ``uri``; connection happens lazily on first use."""
	return AsyncIOMotorClient(uri)


async def ping_mongo(client: Any) -> tuple[bool, Optional[str]]:
	try:
		await client.admin.command("ping")
		return (True, None)
	except Exception as exc:
		return (False, str(exc))
