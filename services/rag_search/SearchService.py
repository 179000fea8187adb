"""Hybrid search service.

query → embed → score every chunk (semantic cosine + lexical keyword overlap)
→ stable sort → optional MMR rerank → threshold and relative cutoff.
"""

from services.rag_search.mmr import mmr_select
from services.rag_search.result_filter import filter_results
from services.rag_search.scoring import cosine_similarity, keyword_score
from shared.clients.embed.EmbeddingClient import EmbeddingClient
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import SearchSettings
from shared.models.document import Chunk, SearchResult, VectorIndex


class SearchService:
    """Ranks the chunks of a VectorIndex against a query.

    Retrieval is an optional enrichment step, so search() never raises for
    bad input or a failing embedding backend; it returns an empty list.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        embedding_client: EmbeddingClient,
        settings: SearchSettings | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._embedding_client = embedding_client
        self.settings = settings or SearchSettings()

    ##########################################
    ################ CORE ####################
    ##########################################

    async def search(
        self,
        query: str,
        index: VectorIndex | None,
        top_k: int | None = None,
        threshold: float | None = None,
        use_reranker: bool | None = None,
    ) -> list[SearchResult]:
        """Return the most relevant chunks for a query, best first.

        Args:
            query (str): The user query.
            index (VectorIndex | None): The snapshot to search. None behaves like an empty index.
            top_k (int | None): Maximum number of results. Defaults to settings.top_k.
                Zero or less returns no results.
            threshold (float | None): Absolute minimum score. Defaults to settings.threshold.
            use_reranker (bool | None): Apply MMR diversity selection. Defaults to settings.use_reranker.

        Returns:
            list[SearchResult]: Filtered results ordered by descending relevance
                (or MMR selection order when reranking).
        """
        top_k = self.settings.top_k if top_k is None else top_k
        threshold = self.settings.threshold if threshold is None else threshold
        use_reranker = self.settings.use_reranker if use_reranker is None else use_reranker

        if top_k <= 0:
            return []
        if index is None or not index.chunks:
            return []
        if not query or not query.strip():
            return []

        self.logging.info("RAG search query=%r top_k=%d threshold=%.3f rerank=%s", query[:80], top_k, threshold, use_reranker)

        query_vector = await self._embed_query(query)
        if query_vector is None:
            return []

        scored = self.score_chunks(query, query_vector, index.chunks)
        for result in scored[:5]:
            self.logging.debug("Score: %.4f | Content: %s...", result.score, result.chunk.content[:50])

        if use_reranker:
            pool = scored[: top_k * self.settings.mmr_candidate_multiplier]
            candidates = mmr_select(pool, top_k, self.settings.mmr_lambda)
        else:
            candidates = scored[:top_k]

        results = filter_results(candidates, threshold, self.settings.relative_cutoff)
        self.logging.info("Found %d results above threshold %.3f", len(results), threshold)
        return results

    ##########################################
    ################ SCORING #################
    ##########################################

    def score_chunks(self, query: str, query_vector: list[float], chunks: list[Chunk]) -> list[SearchResult]:
        """Blend semantic and lexical similarity for every chunk.

        Negative cosine values count as 0 so every combined score stays in
        [0, 1]. The sort is stable, so equal scores keep index order.
        """
        w_semantic = self.settings.weight_semantic
        w_lexical = self.settings.weight_lexical
        results: list[SearchResult] = []
        for chunk in chunks:
            semantic = max(0.0, cosine_similarity(query_vector, chunk.embedding)) if chunk.embedding else 0.0
            lexical = keyword_score(query, chunk.content)
            results.append(SearchResult(chunk=chunk, score=semantic * w_semantic + lexical * w_lexical))
        results.sort(key=lambda result: result.score, reverse=True)
        return results

    async def _embed_query(self, query: str) -> list[float] | None:
        try:
            vectors = await self._embedding_client.embed([query])
        except Exception as exc:
            self.logging.error("Failed to generate query embedding: %s", exc)
            return None
        if not vectors or not vectors[0]:
            self.logging.error("Failed to generate query embedding: backend returned nothing.")
            return None
        return vectors[0]
