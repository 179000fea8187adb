"""Similarity primitives used by the hybrid scorer and the MMR reranker."""

import math
import string
from typing import Sequence

SENTENCE_PUNCTUATION = "?!.,;:"


def cosine_similarity(a: Sequence[float] | None, b: Sequence[float] | None) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 instead of NaN when either vector is missing, empty, all
    zeros, or when the dimensions differ.
    """
    if not a or not b or len(a) != len(b):
        return 0.0
    mag_a = math.sqrt(sum(x * x for x in a))
    mag_b = math.sqrt(sum(y * y for y in b))
    if mag_a == 0 or mag_b == 0:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    return dot / (mag_a * mag_b)


def tokenize_query(query: str) -> list[str]:
    """Split a query into lower-cased keyword tokens.

    Tokens are whitespace-separated with surrounding punctuation stripped
    ("cat?" → "cat"). A token made only of punctuation is an operator such as
    "==" or "&&": only trailing sentence punctuation is removed from it
    ("===?" → "==="). Bare sentence punctuation ("?", "...") leaves nothing
    and is skipped. Tokens of two characters or fewer are dropped unless
    they contain a non-alphanumeric character.
    """
    tokens: list[str] = []
    for raw in query.lower().split():
        token = raw.strip(string.punctuation) or raw.rstrip(SENTENCE_PUNCTUATION)
        if not token:
            continue
        if len(token) > 2 or any(not ch.isalnum() for ch in token):
            tokens.append(token)
    return tokens


def keyword_score(query: str, text: str) -> float:
    """Share of query tokens found as substrings of the text, in [0, 1].

    The numerator counts distinct matching tokens, the denominator all
    surviving tokens. A query without viable tokens scores 0.
    """
    tokens = tokenize_query(query)
    if not tokens:
        return 0.0
    text_lower = text.lower()
    matches = sum(1 for token in set(tokens) if token in text_lower)
    return matches / len(tokens)
