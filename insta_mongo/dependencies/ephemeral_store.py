from __future__ import annotations

import logging
import os
from typing import Optional

from pymongo_inmemory import Mongod

from insta_mongo.errors import StoreStartupError


logger = logging.getLogger("insta_mongo.store")

# pymongo_inmemory reads its options from PYMONGOIM__* variables when Mongod
# is constructed.
_PORT_ENV = "PYMONGOIM__MONGOD_PORT"


class EphemeralStore:
	"""Owns one throwaway mongod process and exposes its connection URI."""

	def __init__(self, port: int, mongod_factory=Mongod) -> None:
		self.port = port
		self._mongod_factory = mongod_factory
		self._mongod = None
		self._uri: Optional[str] = None
		self._saved_port_env: Optional[str] = None

	@property
	def uri(self) -> str:
		if self._uri is None:
			raise StoreStartupError("Ephemeral store is not running")
		return self._uri

	@property
	def running(self) -> bool:
		return self._mongod is not None

	def start(self) -> str:
		if self._mongod is not None:
			return self.uri
		# The port variable is process-wide; it is put back in stop().
		self._saved_port_env = os.environ.get(_PORT_ENV)
		os.environ[_PORT_ENV] = str(self.port)
		try:
			mongod = self._mongod_factory()
			mongod.start()
		except Exception as exc:
			self._restore_port_env()
			logger.error("[store.start] port=%s error=%s", self.port, exc, exc_info=True)
			raise StoreStartupError(f"Failed to start MongoDB on port {self.port}: {exc}") from exc
		self._mongod = mongod
		uri = mongod.connection_string
		# The ephemeral store is addressed by host:port; database names are
		# chosen per request.
		self._uri = uri if uri.endswith("/") else uri + "/"
		logger.info("[store.start] MongoDB server running at %s", self._uri)
		return self._uri

	def stop(self) -> None:
		if self._mongod is None:
			return
		try:
			self._mongod.stop()
			logger.info("[store.stop] port=%s", self.port)
		except Exception:
			logger.exception("[store.stop.error] port=%s", self.port)
		finally:
			self._mongod = None
			self._uri = None
			self._restore_port_env()

	def _restore_port_env(self) -> None:
		if self._saved_port_env is None:
			os.environ.pop(_PORT_ENV, None)
		else:
			os.environ[_PORT_ENV] = self._saved_port_env
		self._saved_port_env = None

	def __enter__(self) -> "EphemeralStore":
		self.start()
		return self

	def __exit__(self, *exc_info) -> bool:
		self.stop()
		return False
