"""Index router — rebuild, inspect and clear the knowledge index."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from shared.clients.embed.EmbedError import EmbedError
from shared.dependencies.auth import verify_api_key
from shared.models.index import IndexBuildRequest, IndexBuildResponse

index_router = APIRouter()


@index_router.get(
    "/index",
    dependencies=[Depends(verify_api_key)],
    tags=["Index"],
)
async def handle_get_index(request: Request) -> JSONResponse:
    """Summarise the active index."""
    summary = request.app.state.index_service.get_summary()
    return JSONResponse(content=summary.model_dump())


@index_router.post(
    "/index",
    dependencies=[Depends(verify_api_key)],
    tags=["Index"],
)
async def handle_build_index(request: Request, body: IndexBuildRequest) -> JSONResponse:
    """Replace the active index with one built from the posted documents.

    Raises:
        HTTPException: 503 if the embedding backend fails; the previous index stays active.
    """
    request.app.state.logging.info("Index rebuild requested for %d documents.", len(body.documents))
    try:
        summary, progress = await request.app.state.index_service.rebuild(body.documents)
    except EmbedError as exc:
        raise HTTPException(status_code=503, detail=f"Embedding backend failed: {exc}")
    return JSONResponse(content=IndexBuildResponse(summary=summary, progress=progress).model_dump())


@index_router.delete(
    "/index",
    dependencies=[Depends(verify_api_key)],
    tags=["Index"],
)
async def handle_clear_index(request: Request) -> JSONResponse:
    """Remove the active index and its persisted copy."""
    await request.app.state.index_service.clear()
    return JSONResponse(content=request.app.state.index_service.get_summary().model_dump())
