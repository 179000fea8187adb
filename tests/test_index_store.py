import json

import pytest

from shared.models.document import ChunkMetadata
from shared.store.IndexStoreFile import IndexStoreFile


@pytest.fixture
def store(helper_config, tmp_path) -> IndexStoreFile:
    return IndexStoreFile(helper_config, path=str(tmp_path / "data" / "rag_index.json"))


def test_round_trip_keeps_every_field(store, index_factory):
    index = index_factory(["alpha", "beta"], embeddings=[[0.1, 0.2], None])
    index.chunks[0].metadata = ChunkMetadata(source="notes.md", index=0, type="file", page=3)

    store.save(index)
    loaded = store.load()

    assert loaded == index
    assert loaded.chunks[0].metadata.extras == {"type": "file", "page": 3}


def test_file_uses_camel_case_keys(store, index_factory):
    store.save(index_factory(["alpha"]))

    with open(store.path, encoding="utf-8") as handle:
        raw = json.load(handle)

    assert set(raw) == {"version", "documents", "chunks"}
    assert {"id", "name", "rawText", "createdAt", "chunkIds"} == set(raw["documents"][0])
    assert {"documentId", "lineStart", "lineEnd", "embedding", "metadata"} <= set(raw["chunks"][0])


def test_save_replaces_previous_index(store, index_factory):
    store.save(index_factory(["old"]))
    store.save(index_factory(["new", "newer"]))

    assert [chunk.content for chunk in store.load().chunks] == ["new", "newer"]


def test_missing_file_loads_as_none(store):
    assert store.load() is None


def test_corrupt_file_loads_as_none(store, tmp_path):
    (tmp_path / "data").mkdir()
    with open(store.path, "w", encoding="utf-8") as handle:
        handle.write("{not json")

    assert store.load() is None


def test_inconsistent_index_loads_as_none(store, index_factory):
    store.save(index_factory(["alpha"]))
    with open(store.path, encoding="utf-8") as handle:
        raw = json.load(handle)
    raw["chunks"][0]["documentId"] = "someone-else"
    with open(store.path, "w", encoding="utf-8") as handle:
        json.dump(raw, handle)

    assert store.load() is None


def test_clear_removes_file_and_tolerates_repeats(store, index_factory):
    store.save(index_factory(["alpha"]))

    store.clear()
    store.clear()

    assert store.load() is None


def test_path_defaults_to_env(helper_config, monkeypatch, tmp_path):
    monkeypatch.setenv("RAG_INDEX_PATH", str(tmp_path / "custom.json"))

    assert IndexStoreFile(helper_config).path == str(tmp_path / "custom.json")
