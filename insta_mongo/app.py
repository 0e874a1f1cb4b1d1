import logging
import time as _time

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from insta_mongo import __version__
from insta_mongo.config import Settings, get_log_level
from insta_mongo.dependencies.mongo_client import ClientFactory, create_mongo_client, ping_mongo
from insta_mongo.errors import ConfigurationError, InstaMongoError, StoreStartupError
from insta_mongo.orchestrator import FixtureOrchestrator
from insta_mongo.routers.fixtures import router as fixtures_router
from insta_mongo.schemas import FixtureRequest
from insta_mongo.services.collections import CollectionOperations
from insta_mongo.services.fixture_loader import FixtureLoader

logger = logging.getLogger("insta_mongo.api")

# One handler on the package logger; module loggers (insta_mongo.orchestrator,
# insta_mongo.fixtures, ...) propagate up to it.
_pkg_logger = logging.getLogger("insta_mongo")
if not _pkg_logger.handlers:
	_handler = logging.StreamHandler()
	_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
	_pkg_logger.addHandler(_handler)
_level = getattr(logging, get_log_level(), logging.INFO)
if not isinstance(_level, int):
	_level = logging.INFO
_pkg_logger.setLevel(_level)


def format_rest_api_help(rest_port: int) -> str:
	return "\n".join([
		"",
		" Use the following endpoints to load and unload your database fixtures:",
		"",
		f" HTTP GET http://localhost:{rest_port}/load-fixture?db=<db-name>&fix=<your-fixture-name>",
		f" HTTP GET http://localhost:{rest_port}/unload-fixture?db=<db-name>&fix=<your-fixture-name>",
		f" HTTP GET http://localhost:{rest_port}/drop-collection?db=<db-name>&col=<collection-name>",
		f" HTTP GET http://localhost:{rest_port}/get-collection?db=<db-name>&col=<collection-name>",
	])


def create_app(settings: Settings, client_factory: ClientFactory = create_mongo_client) -> FastAPI:
	"""Build the control-plane app for a running store.

	``settings.store_uri`` must already point at the ephemeral store. The
	shared client and the orchestrator are created on startup and attached to
	``app.state``; handlers reach them only through FastAPI dependencies.
	"""
	if not settings.store_uri:
		raise ConfigurationError("Settings.store_uri is not set; start the ephemeral store first")

	app = FastAPI(title="insta-mongo", version=__version__)
	app.state.settings = settings

	@app.middleware("http")
	async def _log_requests(request: Request, call_next):
		start = _time.perf_counter()
		path = request.url.path
		method = request.method
		client = request.client.host if request.client else "-"
		try:
			response = await call_next(request)
			status = getattr(response, "status_code", 200)
		except Exception as exc:  # pragma: no cover
			elapsed_ms = int(((_time.perf_counter() - start) * 1000))
			logger.exception("[http] %s %s error=%s client=%s latency_ms=%s", method, path, exc.__class__.__name__, client, elapsed_ms)
			raise
		elapsed_ms = int(((_time.perf_counter() - start) * 1000))
		logger.info("[http] %s %s status=%s client=%s latency_ms=%s", method, path, status, client, elapsed_ms)
		return response

	@app.exception_handler(InstaMongoError)
	async def _insta_mongo_error(request: Request, exc: InstaMongoError) -> PlainTextResponse:
		logger.info("[http.error] %s %s status=%s message=%s", request.method, request.url.path, exc.status_code, exc.message)
		return PlainTextResponse(exc.message, status_code=exc.status_code)

	@app.on_event("startup")
	async def _on_startup() -> None:
		client = client_factory(settings.store_uri)
		ok, error = await ping_mongo(client)
		if not ok:
			client.close()
			raise StoreStartupError(f"Cannot reach MongoDB at {settings.store_uri}: {error}")
		app.state.mongo_client = client
		app.state.orchestrator = FixtureOrchestrator(
			loader=FixtureLoader(settings.store_uri, settings.fixtures_root, client_factory),
			collections=CollectionOperations(client),
		)
		logger.info("[startup] store=%s fixtures=%s", settings.store_uri, settings.fixtures_root)

		if settings.initial_load_requested:
			initial = FixtureRequest(db=settings.initial_db, fix=settings.initial_fixture)
			await app.state.orchestrator.load_fixture(initial)
			logger.info("[startup] initial fixture %s loaded into %s", initial.fix, initial.db)

		logger.info("[startup] REST API running at http://localhost:%s%s", settings.rest_port, format_rest_api_help(settings.rest_port))

	@app.on_event("shutdown")
	async def _on_shutdown() -> None:
		client = getattr(app.state, "mongo_client", None)
		if client is not None:
			client.close()
			app.state.mongo_client = None
			logger.info("[shutdown] closed store client")

	app.include_router(fixtures_router)
	return app
