"""Fixed-stride chunking of manuscript text into overlapping windows."""

DEFAULT_CHUNK_SIZE = 1800
DEFAULT_CHUNK_OVERLAP = 250
DEFAULT_MIN_CHUNK_LENGTH = 200


def chunk_spans(
    text_length: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[tuple[int, int]]:
    """Compute the ``(start, end)`` offsets of every window over a text.

    Windows start at ``0, step, 2 * step, ...`` with ``step = chunk_size -
    overlap``; the first window that reaches the end of the text is the last.

    Args:
        text_length: Length of the text in characters
        chunk_size: Window size in characters
        overlap: Characters shared by consecutive windows

    Returns:
        list[tuple[int, int]]: Half-open offsets of each window

    Raises:
        ValueError: If ``chunk_size <= overlap`` or ``overlap < 0``
    """
    if overlap < 0:
        raise ValueError("overlap must be non-negative")
    if chunk_size <= overlap:
        raise ValueError("chunk_size must be greater than overlap")

    spans: list[tuple[int, int]] = []
    step = chunk_size - overlap
    start = 0
    while start < text_length:
        end = min(start + chunk_size, text_length)
        spans.append((start, end))
        if end == text_length:
            break
        start += step
    return spans


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    min_chunk_length: int = DEFAULT_MIN_CHUNK_LENGTH,
) -> list[str]:
    """Split text into overlapping windows, dropping undersized ones.

    A window is kept only if it still has ``min_chunk_length`` characters
    after stripping surrounding whitespace. Kept windows are returned
    verbatim (not stripped).

    Args:
        text: Manuscript text
        chunk_size: Window size in characters
        overlap: Characters shared by consecutive windows
        min_chunk_length: Minimum stripped length of a kept window

    Returns:
        list[str]: Chunks in document order

    Example:
        >>> [len(c) for c in chunk_text("A" * 2000)]
        [1800, 450]
    """
    return [
        text[start:end]
        for start, end in chunk_spans(len(text), chunk_size, overlap)
        if len(text[start:end].strip()) >= min_chunk_length
    ]
