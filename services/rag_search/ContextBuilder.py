"""Turns search results into numbered citations and a prompt context block."""

from shared.models.document import SearchResult
from shared.models.search import Citation, RagMode

UNKNOWN_SOURCE = "Unknown Source"

HYBRID_INSTRUCTIONS = (
    "INSTRUCTIONS: Answer the user's question using the context above. You may add "
    "your own knowledge to explain or complete the answer, but prefer the context.\n"
    "IMPORTANT: Whenever you use information from the context, cite it as [1], [2], etc."
)
STRICT_INSTRUCTIONS = (
    "INSTRUCTIONS: Answer the user's question ONLY from the context above.\n"
    "IMPORTANT: Cite the context chunks you use as [1], [2], etc. If the answer is "
    "not in the context, say that you do not know."
)
STRICT_NO_RESULTS_INSTRUCTIONS = (
    "INSTRUCTIONS: No relevant context was found in the knowledge base. Tell the user "
    "that the question cannot be answered because the documents contain no relevant information."
)


def build_citations(results: list[SearchResult]) -> list[Citation]:
    """Number results from 1 in the order given."""
    citations: list[Citation] = []
    for position, result in enumerate(results, start=1):
        chunk = result.chunk
        citations.append(
            Citation(
                id=str(position),
                name=chunk.metadata.source or UNKNOWN_SOURCE,
                content=chunk.content,
                score=result.score,
                line_start=chunk.line_start,
                line_end=chunk.line_end,
                metadata=chunk.metadata.model_dump(),
            )
        )
    return citations


def build_context(results: list[SearchResult], mode: RagMode = RagMode.HYBRID) -> str:
    """Build the text appended to the system prompt for the given mode.

    OFF yields an empty string. HYBRID yields nothing when there are no
    results; STRICT then tells the model to decline.
    """
    if mode == RagMode.OFF:
        return ""
    if not results:
        return f"\n\n{STRICT_NO_RESULTS_INSTRUCTIONS}" if mode == RagMode.STRICT else ""

    blocks = "\n\n".join(
        f"[{citation.id}] Source: {citation.name}\nContent: {citation.content}"
        for citation in build_citations(results)
    )
    if mode == RagMode.STRICT:
        return f"\n\nCONTEXT FROM KNOWLEDGE BASE:\n{blocks}\n\n{STRICT_INSTRUCTIONS}"
    return f"\n\nRelevant Context from Knowledge Base:\n{blocks}\n\n{HYBRID_INSTRUCTIONS}"
