"""Query service — runs hybrid retrieval against the active index and shapes
the result into citations plus a prompt context block."""

from server.api.services.IndexService import IndexService
from services.rag_search.ContextBuilder import build_citations, build_context
from services.rag_search.SearchService import SearchService
from shared.helper.HelperConfig import HelperConfig
from shared.models.search import RagMode, SearchRequest, SearchResponse


class QueryService:
    """Orchestrates search and citation assembly for one query."""

    def __init__(
        self,
        helper_config: HelperConfig,
        search_service: SearchService,
        index_service: IndexService,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._search = search_service
        self._indexes = index_service

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_query(self, request: SearchRequest) -> SearchResponse:
        """Execute a query against the active index snapshot.

        Args:
            request (SearchRequest): Query text, optional tunables and RAG mode.

        Returns:
            SearchResponse: Numbered citations and the context block. Empty when
                the mode is OFF, no index is loaded, or nothing is relevant.
        """
        if request.mode == RagMode.OFF:
            return SearchResponse(query=request.query, results=[], total=0, context="")

        # capture the snapshot once; a concurrent rebuild swaps in a new one
        index = self._indexes.get_index()
        results = await self._search.search(
            request.query,
            index,
            top_k=request.top_k,
            threshold=request.threshold,
            use_reranker=request.use_reranker,
        )
        if not results:
            self.logging.info("No results matched for query=%r", request.query[:80])

        citations = build_citations(results)
        return SearchResponse(
            query=request.query,
            results=citations,
            total=len(citations),
            context=build_context(results, request.mode),
        )
