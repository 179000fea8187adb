"""Query router — hybrid retrieval against the active knowledge index."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from shared.dependencies.auth import verify_api_key
from shared.models.search import SearchRequest

query_router = APIRouter()


@query_router.post(
    "/query",
    dependencies=[Depends(verify_api_key)],
    tags=["Query"],
)
async def handle_query(request: Request, body: SearchRequest) -> JSONResponse:
    """Return ranked citations and a context block for a query.

    Retrieval failures degrade to an empty result list; this endpoint only
    fails on authentication or request validation.
    """
    request.app.state.logging.info("Query received: mode=%s query=%r", body.mode.value, body.query[:80])

    result = await request.app.state.query_service.do_query(body)
    return JSONResponse(content=result.model_dump(mode="json"))
