"""Boundary-aware text chunking with line-range tracking."""

from pydantic import BaseModel

CHUNK_SIZE = 500    # characters per window
CHUNK_OVERLAP = 50  # characters shared by consecutive windows


class TextChunk(BaseModel):
    """A trimmed window of a document plus the 1-based lines it spans."""

    content: str
    line_start: int
    line_end: int


def _snap_end(text: str, start: int, end: int) -> int:
    """Move a window end back to just after the last newline, else the last space.

    Only boundaries strictly after ``start`` count; without one the
    arithmetic end is kept.
    """
    last_newline = text.rfind("\n", 0, end + 1)
    if last_newline > start:
        return last_newline + 1
    last_space = text.rfind(" ", 0, end + 1)
    if last_space > start:
        return last_space + 1
    return end


def chunk_text(text: str, size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> list[TextChunk]:
    """Split text into overlapping windows that prefer line and word boundaries.

    Line numbers are counted against the untrimmed window boundaries in the
    original text: ``line_start`` is 1 + newlines before the window start,
    ``line_end`` is 1 + newlines before the window end. Whitespace-only windows
    are skipped. A run longer than ``size`` without newline or space is cut at
    the arithmetic boundary.

    The loop stops once a window reaches the end of the text. No trailing
    window made only of the last ``overlap`` characters is emitted, so
    ``chunk_text("aaaa bbbb cccc dddd eeee", 15, 5)`` yields two chunks, not a
    third one holding just "eeee". That tail is already part of the last chunk.

    Args:
        text (str): The full document text.
        size (int): Maximum window length in characters.
        overlap (int): Characters repeated at the start of the next window.
            Ignored when it is not smaller than ``size`` or would not move the
            cursor forward for a (snapped) window.

    Returns:
        list[TextChunk]: Chunks in document order.

    Raises:
        ValueError: If size is not positive or overlap is negative.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}.")
    if overlap < 0:
        raise ValueError(f"Chunk overlap must not be negative, got {overlap}.")

    chunks: list[TextChunk] = []
    length = len(text)
    start = 0
    while start < length:
        end = start + size
        if end < length:
            end = _snap_end(text, start, end)
        else:
            end = length

        content = text[start:end].strip()
        if content:
            chunks.append(
                TextChunk(
                    content=content,
                    line_start=1 + text.count("\n", 0, start),
                    line_end=1 + text.count("\n", 0, end),
                )
            )
        if end >= length:
            break

        next_start = end - overlap
        # no overlap when it would not move the cursor past the current start
        start = next_start if overlap < size and next_start > start else end
    return chunks
