import pytest

from services.rag_index.IndexBuilder import IndexBuilder
from shared.clients.embed.EmbedError import EmbedError
from shared.models.config import ChunkSettings

SHORT_NOTE = "First line of the note\nSecond line of the note"


@pytest.mark.asyncio
async def test_builds_documents_and_chunks_with_citation_metadata(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client)

    index = await builder.build_index(
        [SHORT_NOTE, "Another document"],
        [{"source": "notes.md", "type": "file"}, {"source": "other.md"}],
    )

    assert index.version == 1
    assert [doc.name for doc in index.documents] == ["notes.md", "other.md"]
    assert len(index.chunks) == 2
    first_doc = index.documents[0]
    first_chunk = index.chunks[0]
    assert first_doc.raw_text == SHORT_NOTE
    assert first_doc.chunk_ids == [first_chunk.id]
    assert first_chunk.document_id == first_doc.id
    assert first_chunk.content == SHORT_NOTE
    assert (first_chunk.line_start, first_chunk.line_end) == (1, 2)
    assert first_chunk.metadata.source == "notes.md"
    assert first_chunk.metadata.index == 0
    assert first_chunk.metadata.extras == {"type": "file"}
    assert first_chunk.embedding is not None and len(first_chunk.embedding) > 0


@pytest.mark.asyncio
async def test_ids_are_unique(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client, ChunkSettings(size=20, overlap=5))

    index = await builder.build_index([SHORT_NOTE, SHORT_NOTE], [{"source": "a"}, {"source": "b"}])

    chunk_ids = [chunk.id for chunk in index.chunks]
    assert len(set(chunk_ids)) == len(chunk_ids)
    assert len({doc.id for doc in index.documents}) == 2


@pytest.mark.asyncio
async def test_chunk_index_follows_document_order(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client, ChunkSettings(size=20, overlap=5))

    index = await builder.build_index([SHORT_NOTE], [{"source": "notes.md"}])

    assert len(index.chunks) > 1
    assert [chunk.metadata.index for chunk in index.chunks] == list(range(len(index.chunks)))
    assert index.documents[0].chunk_ids == [chunk.id for chunk in index.chunks]


@pytest.mark.asyncio
async def test_missing_source_gets_positional_name(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client)

    index = await builder.build_index(["one", "two"], [{"source": "named.md"}, {}])

    assert [doc.name for doc in index.documents] == ["named.md", "Document 2"]
    assert index.chunks[1].metadata.source == "Document 2"


@pytest.mark.asyncio
async def test_mismatched_inputs_are_rejected(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client)

    with pytest.raises(ValueError):
        await builder.build_index(["one", "two"], [{"source": "a"}])


@pytest.mark.asyncio
async def test_empty_input_builds_empty_index(helper_config, embedding_client, fake_backend):
    builder = IndexBuilder(helper_config, embedding_client)

    index = await builder.build_index([], [])

    assert index.documents == [] and index.chunks == []
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_blank_text_yields_document_without_chunks(helper_config, embedding_client, fake_backend):
    builder = IndexBuilder(helper_config, embedding_client)

    index = await builder.build_index(["   \n  "], [{"source": "blank.md"}])

    assert len(index.documents) == 1
    assert index.documents[0].chunk_ids == []
    assert index.chunks == []
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_progress_reports_each_stage(helper_config, embedding_client):
    builder = IndexBuilder(helper_config, embedding_client)
    statuses: list[str] = []

    await builder.build_index(["alpha", "beta"], [{"source": "a.md"}, {"source": "b.md"}], on_progress=statuses.append)

    assert statuses == [
        "Processing a.md...",
        "Generating embeddings for a.md...",
        "Loading model... 0%",
        "Loading model... 100%",
        "Processing b.md...",
        "Generating embeddings for b.md...",
        "Indexing complete.",
    ]


@pytest.mark.asyncio
async def test_chunks_are_embedded_in_batches(helper_config, embedding_client, fake_backend):
    text = "\n".join(f"line {n}" for n in range(5))
    builder = IndexBuilder(helper_config, embedding_client, ChunkSettings(size=7, overlap=0, embed_batch_size=2))

    index = await builder.build_index([text], [{"source": "lines.md"}])

    assert len(index.chunks) == 5
    assert [len(call) for call in fake_backend.calls] == [2, 2, 1]


@pytest.mark.asyncio
async def test_embedding_failure_propagates(helper_config, embedding_client, fake_backend):
    fake_backend.fail_embed = True
    builder = IndexBuilder(helper_config, embedding_client)

    with pytest.raises(EmbedError):
        await builder.build_index(["alpha"], [{"source": "a.md"}])
