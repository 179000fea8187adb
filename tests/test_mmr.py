from services.rag_search.mmr import mmr_select
from services.rag_search.scoring import cosine_similarity
from shared.models.document import Chunk, ChunkMetadata, SearchResult


def _result(name: str, score: float, embedding: list[float] | None) -> SearchResult:
    chunk = Chunk(
        id=name,
        document_id="doc-1",
        content=name,
        line_start=1,
        line_end=1,
        embedding=embedding,
        metadata=ChunkMetadata(source="notes.md", index=0),
    )
    return SearchResult(chunk=chunk, score=score)


def test_empty_candidates_select_nothing():
    assert mmr_select([], top_k=3) == []


def test_zero_top_k_selects_nothing():
    assert mmr_select([_result("a", 0.9, [1.0, 0.0])], top_k=0) == []


def test_near_duplicate_is_passed_over():
    first = _result("first", 0.90, [1.0, 0.0])
    duplicate = _result("duplicate", 0.88, [1.0, 0.01])
    distinct = _result("distinct", 0.70, [0.0, 1.0])

    selected = mmr_select([first, duplicate, distinct], top_k=2, mmr_lambda=0.7)

    assert [r.chunk.id for r in selected] == ["first", "distinct"]


def test_second_pick_is_not_more_redundant_than_the_alternative():
    candidates = [
        _result("a", 0.95, [1.0, 0.0, 0.0]),
        _result("b", 0.93, [0.98, 0.2, 0.0]),
        _result("c", 0.80, [0.1, 0.9, 0.4]),
        _result("d", 0.60, [0.0, 0.0, 1.0]),
    ]

    selected = mmr_select(candidates, top_k=2)

    first, second = selected
    redundancy_second = cosine_similarity(second.chunk.embedding, first.chunk.embedding)
    rest = [c for c in candidates if c not in selected]
    best_rest = max(rest, key=lambda r: r.score)
    redundancy_alternative = cosine_similarity(best_rest.chunk.embedding, first.chunk.embedding)
    assert redundancy_second <= redundancy_alternative


def test_lambda_one_keeps_score_order():
    candidates = [
        _result("a", 0.9, [1.0, 0.0]),
        _result("b", 0.8, [1.0, 0.0]),
        _result("c", 0.7, [0.0, 1.0]),
    ]

    selected = mmr_select(candidates, top_k=3, mmr_lambda=1.0)

    assert [r.chunk.id for r in selected] == ["a", "b", "c"]


def test_missing_embeddings_count_as_not_redundant():
    candidates = [
        _result("a", 0.9, None),
        _result("b", 0.8, None),
        _result("c", 0.7, None),
    ]

    selected = mmr_select(candidates, top_k=2)

    assert [r.chunk.id for r in selected] == ["a", "b"]


def test_ties_keep_input_order_and_scores_are_unchanged():
    candidates = [_result(name, 0.5, None) for name in ("x", "y", "z")]

    selected = mmr_select(candidates, top_k=3)

    assert [r.chunk.id for r in selected] == ["x", "y", "z"]
    assert [r.score for r in selected] == [0.5, 0.5, 0.5]
