"""Query Routes — the three authenticated query endpoints.

Invariants:
    - Body validated by Pydantic before the handler runs (400 on failure)
    - Bearer auth enforced by BearerAuthMiddleware before that (401 on failure)
    - Handlers only translate: validated body -> QueryDispatcher -> Envelope -> JSON

Design Decisions:
    - Dispatcher read from app.state: built once by create_app(), no module globals
    - jsonable_encoder on the envelope body: backends may return dates/decimals
"""

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from querygate.core.envelope import Envelope
from querygate.schemas.query import (
    BatchQuery,
    ErrorResponse,
    ExecQuery,
    ExecResponse,
    PreparedQuery,
    QueryResponse,
)
from querygate.services.query_dispatch import QueryDispatcher

router = APIRouter(prefix="/query", tags=["query"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request body"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    500: {"model": ErrorResponse, "description": "Query failed"},
}


def get_dispatcher(request: Request) -> QueryDispatcher:
    return request.app.state.dispatcher


def to_response(envelope: Envelope) -> JSONResponse:
    return JSONResponse(
        status_code=envelope.status_code,
        content=jsonable_encoder(envelope.body),
    )


@router.post("/all/", response_model=QueryResponse, responses=ERROR_RESPONSES)
async def query_all(
    body: PreparedQuery, dispatcher: QueryDispatcher = Depends(get_dispatcher),
):
    """Run one statement with optional positional params. Returns every row."""
    return to_response(await dispatcher.run_all(body))


@router.post("/exec/", response_model=ExecResponse, responses=ERROR_RESPONSES)
async def query_exec(
    body: ExecQuery, dispatcher: QueryDispatcher = Depends(get_dispatcher),
):
    """Exec one or more newline-separated statements. Returns count and duration only."""
    return to_response(await dispatcher.run_exec(body))


@router.post(
    "/batch/", response_model=list[QueryResponse], responses=ERROR_RESPONSES,
)
async def query_batch(
    body: BatchQuery, dispatcher: QueryDispatcher = Depends(get_dispatcher),
):
    """Run a batch of statements in one backend call. Results keep submission order."""
    return to_response(await dispatcher.run_batch(body))
