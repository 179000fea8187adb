"""FastAPI application entry point for the retrieval API."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from server.api.routers.IndexRouter import index_router
from server.api.routers.QueryRouter import query_router
from server.api.services.IndexService import IndexService
from server.api.services.QueryService import QueryService
from services.rag_index.IndexBuilder import IndexBuilder
from services.rag_search.SearchService import SearchService
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.EmbeddingClient import EmbeddingClient
from shared.clients.embed.EmbedWorker import EmbedWorker
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.config import ChunkSettings, SearchSettings
from shared.store.IndexStoreFile import IndexStoreFile

app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown."""
    app.state.logging = setup_logging()
    app.state.config = HelperConfig(logger=app.state.logging)

    # Embedding worker; the backend boots on the first request
    embed_backend = EmbedClientManager(helper_config=app.state.config).get_client()
    worker = EmbedWorker(helper_config=app.state.config, backend=embed_backend)
    await worker.start()
    embedding_client = EmbeddingClient(helper_config=app.state.config, worker=worker)

    # Wire up services
    index_builder = IndexBuilder(
        helper_config=app.state.config,
        embedding_client=embedding_client,
        settings=ChunkSettings.from_helper_config(app.state.config),
    )
    search_service = SearchService(
        helper_config=app.state.config,
        embedding_client=embedding_client,
        settings=SearchSettings.from_helper_config(app.state.config),
    )
    app.state.index_service = IndexService(
        helper_config=app.state.config,
        index_builder=index_builder,
        index_store=IndexStoreFile(helper_config=app.state.config),
    )
    app.state.index_service.load()
    app.state.query_service = QueryService(
        helper_config=app.state.config,
        search_service=search_service,
        index_service=app.state.index_service,
    )

    app.state.logging.info("Retrieval API ready.", color="green")
    yield

    # Shutdown
    await worker.stop()
    app.state.logging.info("Retrieval API shut down.")


app = FastAPI(
    title="Hybrid RAG Engine",
    description="Hybrid semantic and lexical retrieval over a private document corpus.",
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(index_router)
app.include_router(query_router)


# Server Start
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
