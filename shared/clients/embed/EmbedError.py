class EmbedError(Exception):
    """Raised when an embedding batch fails as a whole.

    Covers an unreachable or crashed backend as well as malformed output
    (wrong vector count, empty or inconsistent-dimension vectors).
    """
