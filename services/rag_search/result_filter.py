from shared.models.document import SearchResult

RELATIVE_CUTOFF = 0.85


def filter_results(
    results: list[SearchResult],
    threshold: float,
    relative_cutoff: float = RELATIVE_CUTOFF,
) -> list[SearchResult]:
    """Drop weak results from an ordered result list.

    First every result scoring below ``threshold`` is removed, then every
    result scoring below ``relative_cutoff`` times the score of the first
    remaining result. Order is preserved.
    """
    kept = [result for result in results if result.score >= threshold]
    if not kept:
        return []
    best = kept[0].score
    return [result for result in kept if result.score >= best * relative_cutoff]
