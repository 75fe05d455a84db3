from pathlib import Path
from typing import IO, Any, Callable, Iterable, Iterator, List, Optional, Union

from .ldjson_stream import DocumentType, HandlerReturn, LDJSONStream, is_file_like
from .line_document_decoder import Chunk

Source = Union[str, Path, IO[Any], Iterable[Chunk]]


# Convenience functions
def decode_ldjson(
    data: Union[bytes, str],
    skip_errors: bool = True,
    encoding: str = "utf-8",
    **options: Any,
) -> List[DocumentType]:
    """
    Decode every document in one complete LDJSON payload.

    Args:
        data: The whole payload; a final line without newline is decoded too
        skip_errors: Whether to skip malformed JSON lines (default: True)
        encoding: Encoding for text payloads (default: 'utf-8')
        **options: Decoder options (max_doc_length, max_bytes, debug, hide)

    Returns:
        List of decoded documents in input order

    Example:
        >>> decode_ldjson(b'{"a": 1}\\r\\n[2]\\n3')
        [{'a': 1}, [2], 3]
    """
    ls = LDJSONStream(encoding=encoding, skip_errors=skip_errors, **options)
    return list(ls.stream([data]))


def stream_ldjson(
    source: Source,
    handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    skip_errors: bool = True,
    encoding: str = "utf-8",
    chunk_size: int = 64 * 1024,
    **options: Any,
) -> Iterator[Union[DocumentType, HandlerReturn]]:
    """
    Stream documents from a path, a file object, or an iterable of chunks.

    A ``str`` source is treated as a path, like ``Path``.

    Args:
        source: Path, readable file object, or iterable of byte/text chunks
        handler: Optional function to process each document
        skip_errors: Whether to skip malformed JSON lines (default: True)
        encoding: Encoding for text chunks (default: 'utf-8')
        chunk_size: Read size for paths and file objects (default: 64 KiB)
        **options: Decoder options (max_doc_length, max_bytes, debug, hide)

    Yields:
        Processed documents if handler provided, otherwise decoded JSON values
    """
    ls = LDJSONStream(
        encoding=encoding, skip_errors=skip_errors, chunk_size=chunk_size, **options
    )
    if isinstance(source, (str, Path)):
        yield from ls.stream_file(source, handler)
    elif is_file_like(source):
        yield from ls.stream_io(source, handler)
    else:
        yield from ls.stream(source, handler)


def stream_ldjson_file(
    filepath: Union[str, Path],
    handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    skip_errors: bool = True,
    show_progress: bool = False,
    **options: Any,
) -> Iterator[Union[DocumentType, HandlerReturn]]:
    """
    Stream an LDJSON file document by document.

    Args:
        filepath: Path to the file
        handler: Optional function to process each document
        skip_errors: Whether to skip malformed JSON lines (default: True)
        show_progress: Show a byte progress bar (default: False)
        **options: Decoder options (max_doc_length, max_bytes, debug, hide)

    Yields:
        Processed documents if handler provided, otherwise decoded JSON values
    """
    ls = LDJSONStream(skip_errors=skip_errors, show_progress=show_progress, **options)
    yield from ls.stream_file(filepath, handler)
