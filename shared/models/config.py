"""Pydantic models for configuration records."""

import math

from pydantic import BaseModel, Field, model_validator

from shared.helper.HelperConfig import HelperConfig


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The key/name of the environment variable to read.
        val_type (str): The expected type of the value. Supported types are "string", "number", "bool" and "list".
        default (str | int | bool | list | None): Optional default. If None, the variable is required.
    """

    env_key: str
    val_type: str
    default: str | int | bool | list | None = None


class ChunkSettings(BaseModel):
    """Window size and overlap (in characters) used when splitting documents."""

    size: int = Field(default=500, gt=0)
    overlap: int = Field(default=50, ge=0)
    embed_batch_size: int = Field(default=32, gt=0)

    @classmethod
    def from_helper_config(cls, helper_config: HelperConfig) -> "ChunkSettings":
        return cls(
            size=int(helper_config.get_number_val("RAG_CHUNK_SIZE", default=500)),
            overlap=int(helper_config.get_number_val("RAG_CHUNK_OVERLAP", default=50)),
            embed_batch_size=int(helper_config.get_number_val("RAG_EMBED_BATCH_SIZE", default=32)),
        )


class SearchSettings(BaseModel):
    """Tunables of the hybrid scorer, the MMR reranker and the result filter.

    The semantic/lexical weights are a pair and must sum to 1. The default
    favours lexical matches (0.3 / 0.7); the relevance-favouring preset is
    (0.7 / 0.3).
    """

    weight_semantic: float = Field(default=0.3, ge=0.0, le=1.0)
    weight_lexical: float = Field(default=0.7, ge=0.0, le=1.0)
    top_k: int = Field(default=3, ge=0)
    threshold: float = 0.1
    relative_cutoff: float = Field(default=0.85, ge=0.0, le=1.0)
    use_reranker: bool = False
    mmr_lambda: float = Field(default=0.7, ge=0.0, le=1.0)
    mmr_candidate_multiplier: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def _check_weights(self) -> "SearchSettings":
        if not math.isclose(self.weight_semantic + self.weight_lexical, 1.0, abs_tol=1e-9):
            raise ValueError(
                f"weight_semantic + weight_lexical must equal 1, got "
                f"{self.weight_semantic} + {self.weight_lexical}"
            )
        return self

    @classmethod
    def from_helper_config(cls, helper_config: HelperConfig) -> "SearchSettings":
        return cls(
            weight_semantic=float(helper_config.get_number_val("RAG_WEIGHT_SEMANTIC", default=0.3)),
            weight_lexical=float(helper_config.get_number_val("RAG_WEIGHT_LEXICAL", default=0.7)),
            top_k=int(helper_config.get_number_val("RAG_TOP_K", default=3)),
            threshold=float(helper_config.get_number_val("RAG_THRESHOLD", default=0.1)),
            relative_cutoff=float(helper_config.get_number_val("RAG_RELATIVE_CUTOFF", default=0.85)),
            use_reranker=helper_config.get_bool_val("RAG_USE_RERANKER", default=False),
            mmr_lambda=float(helper_config.get_number_val("RAG_MMR_LAMBDA", default=0.7)),
            mmr_candidate_multiplier=int(helper_config.get_number_val("RAG_MMR_CANDIDATE_MULTIPLIER", default=3)),
        )
