import os
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from insta_mongo.errors import ConfigurationError

# Load .env once when module is imported. Values already present in the
# environment win, so a shell export or CI variable overrides a checked-in .env.
load_dotenv(override=False)


DEFAULT_DB_PORT = 5001
DEFAULT_REST_PORT = 5000
DEFAULT_REST_HOST = "0.0.0.0"
DEFAULT_FIXTURES_DIR = "fixtures"


def get_env_value(name: str, default: Optional[str] = None) -> Optional[str]:
	"""Fetch an environment value, treating blank strings as unset."""

	value = os.environ.get(name)
	if value is None or value.strip() == "":
		return default
	return value


def _get_int_env(name: str, default: int) -> int:
	value = get_env_value(name)
	try:
		return int(value) if value is not None else default
	except (TypeError, ValueError):
		return default


@lru_cache(maxsize=1)
def get_db_port() -> int:
	return _get_int_env("INSTA_MONGO_DB_PORT", DEFAULT_DB_PORT)


@lru_cache(maxsize=1)
def get_rest_port() -> int:
	return _get_int_env("INSTA_MONGO_REST_PORT", DEFAULT_REST_PORT)


@lru_cache(maxsize=1)
def get_rest_host() -> str:
	return get_env_value("INSTA_MONGO_REST_HOST", DEFAULT_REST_HOST) or DEFAULT_REST_HOST


@lru_cache(maxsize=1)
def get_fixtures_dir() -> Path:
	raw = get_env_value("INSTA_MONGO_FIXTURES", DEFAULT_FIXTURES_DIR) or DEFAULT_FIXTURES_DIR
	return Path(raw).resolve()


@lru_cache(maxsize=1)
def get_initial_db() -> Optional[str]:
	return get_env_value("INSTA_MONGO_DB")


@lru_cache(maxsize=1)
def get_initial_fixture() -> Optional[str]:
	return get_env_value("INSTA_MONGO_LOAD")


@lru_cache(maxsize=1)
def get_log_level() -> str:
	return (get_env_value("LOG_LEVEL", "INFO") or "INFO").strip().upper()


def clear_config_cache() -> None:
	"""Forget cached env lookups (tests flip env vars between cases)."""
	for getter in (
		get_db_port,
		get_rest_port,
		get_rest_host,
		get_fixtures_dir,
		get_initial_db,
		get_initial_fixture,
		get_log_level,
	):
		getter.cache_clear()


@dataclass(frozen=True)
class Settings:
	"""Process-wide configuration, resolved once at startup and read-only after.

	``store_uri`` stays ``None`` until the ephemeral store is running; the CLI
	fills it in with :meth:`with_store_uri` before the app is created.
	"""

	db_port: int = DEFAULT_DB_PORT
	rest_port: int = DEFAULT_REST_PORT
	rest_host: str = DEFAULT_REST_HOST
	fixtures_root: Path = Path(DEFAULT_FIXTURES_DIR).resolve()
	initial_db: Optional[str] = None
	initial_fixture: Optional[str] = None
	store_uri: Optional[str] = None

	@classmethod
	def from_env(cls) -> "Settings":
		return cls(
			db_port=get_db_port(),
			rest_port=get_rest_port(),
			rest_host=get_rest_host(),
			fixtures_root=get_fixtures_dir(),
			initial_db=get_initial_db(),
			initial_fixture=get_initial_fixture(),
		)

	def with_overrides(self, **overrides) -> "Settings":
		"""Return a copy with every non-None override applied."""
		values = {key: value for key, value in overrides.items() if value is not None}
		if "fixtures_root" in values:
			values["fixtures_root"] = Path(values["fixtures_root"]).resolve()
		return replace(self, **values)

	def with_store_uri(self, store_uri: str) -> "Settings":
		return replace(self, store_uri=store_uri)

	def validate(self) -> None:
		if self.initial_fixture and not self.initial_db:
			raise ConfigurationError(
				"To load an initial database fixture please use --db=<database-name> "
				"to specify which database to load the fixture into."
			)
		for name, port in (("db_port", self.db_port), ("rest_port", self.rest_port)):
			if not 0 < port < 65536:
				raise ConfigurationError(f"Invalid {name}: {port}")

	@property
	def initial_load_requested(self) -> bool:
		return bool(self.initial_db and self.initial_fixture)
