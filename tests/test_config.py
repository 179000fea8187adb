import pytest
from pydantic import ValidationError

from shared.models.config import ChunkSettings, SearchSettings

RAG_KEYS = (
    "RAG_WEIGHT_SEMANTIC",
    "RAG_WEIGHT_LEXICAL",
    "RAG_TOP_K",
    "RAG_THRESHOLD",
    "RAG_RELATIVE_CUTOFF",
    "RAG_USE_RERANKER",
    "RAG_MMR_LAMBDA",
    "RAG_MMR_CANDIDATE_MULTIPLIER",
    "RAG_CHUNK_SIZE",
    "RAG_CHUNK_OVERLAP",
    "RAG_EMBED_BATCH_SIZE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in RAG_KEYS + ("TEST_VALUE",):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


##########################################
############### SETTINGS #################
##########################################


def test_search_defaults():
    settings = SearchSettings()

    assert (settings.weight_semantic, settings.weight_lexical) == (0.3, 0.7)
    assert settings.top_k == 3
    assert settings.threshold == 0.1
    assert settings.relative_cutoff == 0.85
    assert settings.use_reranker is False
    assert settings.mmr_lambda == 0.7
    assert settings.mmr_candidate_multiplier == 3


def test_relevance_preset_is_accepted():
    settings = SearchSettings(weight_semantic=0.7, weight_lexical=0.3)

    assert settings.weight_semantic == 0.7


@pytest.mark.parametrize("semantic,lexical", [(0.5, 0.6), (0.3, 0.3), (1.2, -0.2)])
def test_weights_must_sum_to_one(semantic, lexical):
    with pytest.raises(ValidationError):
        SearchSettings(weight_semantic=semantic, weight_lexical=lexical)


def test_chunk_settings_reject_non_positive_size():
    with pytest.raises(ValidationError):
        ChunkSettings(size=0)


def test_settings_from_env(helper_config, clean_env):
    clean_env.setenv("RAG_WEIGHT_SEMANTIC", "0.7")
    clean_env.setenv("RAG_WEIGHT_LEXICAL", "0.3")
    clean_env.setenv("RAG_TOP_K", "5")
    clean_env.setenv("RAG_USE_RERANKER", "true")
    clean_env.setenv("RAG_CHUNK_SIZE", "800")

    search = SearchSettings.from_helper_config(helper_config)
    chunking = ChunkSettings.from_helper_config(helper_config)

    assert (search.weight_semantic, search.weight_lexical) == (0.7, 0.3)
    assert search.top_k == 5
    assert search.use_reranker is True
    assert search.threshold == 0.1
    assert (chunking.size, chunking.overlap, chunking.embed_batch_size) == (800, 50, 32)


def test_settings_from_empty_env_use_defaults(helper_config, clean_env):
    assert SearchSettings.from_helper_config(helper_config) == SearchSettings()
    assert ChunkSettings.from_helper_config(helper_config) == ChunkSettings()


##########################################
############# HELPER CONFIG ##############
##########################################


def test_required_value_without_default_raises(helper_config, clean_env):
    with pytest.raises(ValueError, match="TEST_VALUE"):
        helper_config.get_string_val("TEST_VALUE")


def test_string_value_is_stripped(helper_config, clean_env):
    clean_env.setenv("TEST_VALUE", "  hello  ")

    assert helper_config.get_string_val("test_value") == "hello"


@pytest.mark.parametrize("raw,expected", [("42", 42), ("0.25", 0.25), ("1e-3", 0.001)])
def test_number_value(helper_config, clean_env, raw, expected):
    clean_env.setenv("TEST_VALUE", raw)

    assert helper_config.get_number_val("TEST_VALUE") == expected


def test_invalid_number_raises(helper_config, clean_env):
    clean_env.setenv("TEST_VALUE", "many")

    with pytest.raises(ValueError, match="not a valid number"):
        helper_config.get_number_val("TEST_VALUE", default=1)


@pytest.mark.parametrize("raw,expected", [("true", True), ("YES", True), ("1", True), ("off", False)])
def test_bool_value(helper_config, clean_env, raw, expected):
    clean_env.setenv("TEST_VALUE", raw)

    assert helper_config.get_bool_val("TEST_VALUE", default=False) is expected


def test_list_value(helper_config, clean_env):
    clean_env.setenv("TEST_VALUE", "[1, 2,3]")

    assert helper_config.get_list_val("TEST_VALUE", element_type=int) == [1, 2, 3]


def test_list_value_requires_brackets(helper_config, clean_env):
    clean_env.setenv("TEST_VALUE", "1,2,3")

    with pytest.raises(ValueError, match="format"):
        helper_config.get_list_val("TEST_VALUE")
