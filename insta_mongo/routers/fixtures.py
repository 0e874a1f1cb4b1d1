"""
Fixture control routes.

All routes are GETs driven by query parameters. Parameters are decoded into
typed requests by dependencies before a handler body runs, so a missing or
empty parameter is rejected with a 400 without the store being touched.
Failures surface as 400 with a short text message via the app's
``InstaMongoError`` handler.
"""
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from insta_mongo.orchestrator import FixtureOrchestrator
from insta_mongo.schemas import (
    DROP_COL_MESSAGE,
    GET_COL_MESSAGE,
    LOAD_FIX_MESSAGE,
    UNLOAD_FIX_MESSAGE,
    CollectionRequest,
    FixtureRequest,
    IsAliveResponse,
)

router = APIRouter(tags=["fixtures"])


def get_orchestrator(request: Request) -> FixtureOrchestrator:
    return request.app.state.orchestrator


def load_request(request: Request) -> FixtureRequest:
    return FixtureRequest.from_query(request.query_params, LOAD_FIX_MESSAGE)


def unload_request(request: Request) -> FixtureRequest:
    return FixtureRequest.from_query(request.query_params, UNLOAD_FIX_MESSAGE)


def drop_request(request: Request) -> CollectionRequest:
    return CollectionRequest.from_query(request.query_params, DROP_COL_MESSAGE)


def get_request(request: Request) -> CollectionRequest:
    return CollectionRequest.from_query(request.query_params, GET_COL_MESSAGE)


@router.get("/is-alive", response_model=IsAliveResponse)
def is_alive() -> IsAliveResponse:
    return IsAliveResponse(ok=True)


@router.get("/load-fixture")
async def load_fixture(
    body: FixtureRequest = Depends(load_request),
    orchestrator: FixtureOrchestrator = Depends(get_orchestrator),
) -> Response:
    await orchestrator.load_fixture(body)
    return Response(status_code=200)


@router.get("/unload-fixture")
async def unload_fixture(
    body: FixtureRequest = Depends(unload_request),
    orchestrator: FixtureOrchestrator = Depends(get_orchestrator),
) -> Response:
    await orchestrator.unload_fixture(body)
    return Response(status_code=200)


@router.get("/drop-collection")
async def drop_collection(
    body: CollectionRequest = Depends(drop_request),
    orchestrator: FixtureOrchestrator = Depends(get_orchestrator),
) -> Response:
    # Both "dropped" and "already absent" are success.
    await orchestrator.drop_collection(body)
    return Response(status_code=200)


@router.get("/get-collection")
async def get_collection(
    body: CollectionRequest = Depends(get_request),
    orchestrator: FixtureOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    documents = await orchestrator.get_collection(body)
    return JSONResponse(content=documents)
