"""Maximal Marginal Relevance selection over scored search results."""

from services.rag_search.scoring import cosine_similarity
from shared.models.document import SearchResult

MMR_LAMBDA = 0.7


def _redundancy(candidate: SearchResult, selected: list[SearchResult]) -> float:
    """Highest cosine similarity between the candidate and any selected result."""
    if not selected or candidate.chunk.embedding is None:
        return 0.0
    return max(cosine_similarity(candidate.chunk.embedding, chosen.chunk.embedding) for chosen in selected)


def mmr_select(candidates: list[SearchResult], top_k: int, mmr_lambda: float = MMR_LAMBDA) -> list[SearchResult]:
    """Greedily pick up to ``top_k`` results balancing relevance against redundancy.

    Each round picks the remaining candidate maximising
    ``lambda * score - (1 - lambda) * redundancy``. Ties go to the candidate
    that comes first in the input order. Results keep their original score.

    Args:
        candidates (list[SearchResult]): Scored candidates, best first.
        top_k (int): Maximum number of results to select.
        mmr_lambda (float): 1.0 is pure relevance, 0.0 pure diversity.

    Returns:
        list[SearchResult]: Selected results in selection order.
    """
    selected: list[SearchResult] = []
    remaining = list(candidates)
    while remaining and len(selected) < top_k:
        best_position = 0
        best_value = float("-inf")
        for position, candidate in enumerate(remaining):
            value = mmr_lambda * candidate.score - (1 - mmr_lambda) * _redundancy(candidate, selected)
            if value > best_value:
                best_position, best_value = position, value
        selected.append(remaining.pop(best_position))
    return selected
