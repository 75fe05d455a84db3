import asyncio
import io
import logging
from pathlib import Path
from typing import (
    IO,
    Any,
    AsyncIterable,
    AsyncIterator,
    Callable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Union,
    cast,
)

from tqdm import tqdm

from .event_kind import EventKind
from .exceptions import ConfigurationError, DecodeError, FileHandlingError
from .line_document_decoder import Chunk, DecoderEvent, LineDocumentDecoder
from .options import DecoderOptions

logger = logging.getLogger(__name__)

DocumentType = Any
HandlerReturn = Any

DEFAULT_CHUNK_SIZE = 64 * 1024


class LDJSONStream:
    """
    Reads line-delimited JSON documents from chunked sources.

    Every ``stream*`` / ``iter_events`` call starts a new session with its own
    ``LineDocumentDecoder``, so one instance can be reused for many sources.
    Sources are pulled lazily: a chunk is only read when the consumer asks for
    the next document.

    Examples:
        Documents from an iterable of chunks:
        >>> ls = LDJSONStream(max_bytes=1024)
        >>> list(ls.stream([b'{"id": 1}\\n{"id"', b': 2}\\n']))
        [{'id': 1}, {'id': 2}]

        Reading a socket-backed file object with limits:
        >>> ls = LDJSONStream({"maxDocLength": 4096, "maxBytes": 1 << 20})
        >>> for doc in ls.stream_io(sock.makefile("rb")):
        ...     handle(doc)

        Asyncio subprocess pipes:
        >>> async for doc in LDJSONStream().astream_reader(proc.stdout):
        ...     handle(doc)
    """

    def __init__(
        self,
        opts: Optional[Mapping[str, Any]] = None,
        *,
        encoding: str = "utf-8",
        skip_errors: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        show_progress: bool = False,
        **options: Any,
    ) -> None:
        """
        Initialize the stream reader.

        Args:
            opts: Decoder options mapping (maxDocLength, maxBytes, debug, hide)
            encoding: Encoding for text chunks (default: 'utf-8')
            skip_errors: Whether to skip malformed JSON lines (default: True)
            chunk_size: Read size for file objects and asyncio readers (default: 64 KiB)
            show_progress: Show a byte progress bar in stream_file (default: False)
            **options: Decoder options by field name (max_doc_length, max_bytes, debug, hide)

        Raises:
            ConfigurationError: If any option is invalid
        """
        if chunk_size is None or chunk_size <= 0:
            raise ConfigurationError("chunk_size must be positive")

        self.options = DecoderOptions.from_mapping(opts, **options)
        self.encoding = encoding
        self.skip_errors = skip_errors
        self.chunk_size = chunk_size
        self.show_progress = show_progress

        # Fail fast on a bad encoding rather than on the first stream
        self.new_decoder()

    def new_decoder(self) -> LineDocumentDecoder:
        """Create a decoder for one stream session."""
        return LineDocumentDecoder(self.options._asdict(), encoding=self.encoding)

    def iter_events(self, chunks: Iterable[Chunk]) -> Iterator[DecoderEvent]:
        """
        Decode an iterable of chunks into decoder events.

        The last event is always END. After a fatal error no more chunks are read.

        Args:
            chunks: Raw byte or text chunks in arrival order

        Yields:
            DOCUMENT, ERROR and END events in input order
        """
        decoder = self.new_decoder()
        for chunk in chunks:
            if not chunk:
                continue
            yield from decoder.accept(chunk)
            if decoder.terminated:
                return
        yield from decoder.finish()

    def stream(
        self,
        chunks: Iterable[Chunk],
        handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    ) -> Iterator[Union[DocumentType, HandlerReturn]]:
        """
        Stream documents decoded from an iterable of chunks.

        Args:
            chunks: Raw byte or text chunks in arrival order
            handler: Optional function to process each document

        Yields:
            Processed documents if handler provided, otherwise decoded JSON values

        Raises:
            LimitExceededError: If maxBytes or maxDocLength is exceeded
            DecodeError: If skip_errors=False and a line is not valid JSON
        """
        for event in self.iter_events(chunks):
            result = self._resolve(event, handler)
            if result is not _SKIP:
                yield result

    def stream_io(
        self,
        fileobj: IO[Any],
        handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    ) -> Iterator[Union[DocumentType, HandlerReturn]]:
        """
        Stream documents from a binary or text file object until EOF.

        Args:
            fileobj: Object with a ``read(size)`` method (file, pipe, socket file)
            handler: Optional function to process each document

        Yields:
            Processed documents if handler provided, otherwise decoded JSON values
        """
        yield from self.stream(self._read_chunks(fileobj), handler)

    def stream_file(
        self,
        filepath: Union[str, Path],
        handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
        progress_desc: str = "Reading documents",
    ) -> Iterator[Union[DocumentType, HandlerReturn]]:
        """
        Stream documents from an LDJSON file.

        Args:
            filepath: Path to the file
            handler: Optional function to process each document
            progress_desc: Description for progress bar (default: 'Reading documents')

        Yields:
            Processed documents if handler provided, otherwise decoded JSON values

        Raises:
            FileHandlingError: If the file doesn't exist or cannot be read
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileHandlingError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise FileHandlingError(f"Path is not a file: {filepath}")

        if self.options.debug:
            logger.debug(f"Streaming {filepath} in chunks of {self.chunk_size} bytes")

        try:
            if filepath.stat().st_size == 0 and not self.options.hide:
                logger.warning(f"No data to read in file {filepath}")
            with open(filepath, "rb") as f:
                chunks: Iterable[Chunk] = self._read_chunks(f)
                if self.show_progress:
                    chunks = _progress(chunks, filepath.stat().st_size, progress_desc)
                yield from self.stream(chunks, handler)
        except (OSError, IOError) as e:
            raise FileHandlingError(f"Failed to read file {filepath}: {e}") from e

    async def aiter_events(self, chunks: AsyncIterable[Chunk]) -> AsyncIterator[DecoderEvent]:
        """Async counterpart of ``iter_events`` over an async iterable of chunks."""
        decoder = self.new_decoder()
        async for chunk in chunks:
            if not chunk:
                continue
            for event in decoder.accept(chunk):
                yield event
            if decoder.terminated:
                return
        for event in decoder.finish():
            yield event

    async def astream(
        self,
        chunks: AsyncIterable[Chunk],
        handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    ) -> AsyncIterator[Union[DocumentType, HandlerReturn]]:
        """Async counterpart of ``stream``; same error semantics."""
        async for event in self.aiter_events(chunks):
            result = self._resolve(event, handler)
            if result is not _SKIP:
                yield result

    async def astream_reader(
        self,
        reader: asyncio.StreamReader,
        handler: Optional[Callable[[DocumentType], HandlerReturn]] = None,
    ) -> AsyncIterator[Union[DocumentType, HandlerReturn]]:
        """
        Stream documents from an asyncio StreamReader until EOF.

        The reader is read in ``chunk_size`` pieces rather than with ``readline``
        so a peer that never sends a newline is still bounded by the limits.
        """
        async for result in self.astream(self._aread_chunks(reader), handler):
            yield result

    def _resolve(
        self,
        event: DecoderEvent,
        handler: Optional[Callable[[DocumentType], HandlerReturn]],
    ) -> Any:
        """Turn an event into a result to yield, ``_SKIP``, or a raised error."""
        if event.kind is EventKind.DOCUMENT:
            return event.value if handler is None else handler(event.value)
        if event.kind is EventKind.ERROR:
            if event.is_fatal:
                raise event.error
            if not self.skip_errors:
                error = cast(DecodeError, event.error)
                raise DecodeError(
                    f"Invalid JSON on line {error.line_number}: {error}",
                    line_number=error.line_number,
                    original_error=error.original_error,
                )
        return _SKIP

    def _read_chunks(self, fileobj: IO[Any]) -> Iterator[Chunk]:
        while True:
            chunk = fileobj.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    async def _aread_chunks(self, reader: asyncio.StreamReader) -> AsyncIterator[bytes]:
        while True:
            chunk = await reader.read(self.chunk_size)
            if not chunk:
                return
            yield chunk


_SKIP = object()


def _progress(chunks: Iterable[Chunk], total: int, desc: str) -> Iterator[Chunk]:
    """Wrap a chunk iterator with a byte-based tqdm progress bar."""
    with tqdm(total=total, desc=desc, unit="B", unit_scale=True) as bar:
        for chunk in chunks:
            bar.update(len(chunk))
            yield chunk


def is_file_like(source: Any) -> bool:
    """Whether source can be read with ``read(size)``."""
    return isinstance(source, io.IOBase) or callable(getattr(source, "read", None))
