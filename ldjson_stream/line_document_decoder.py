import codecs
import logging
from typing import Any, List, Mapping, NamedTuple, Optional, Union

import orjson

from .event_kind import EventKind
from .exceptions import (
    ByteLimitExceededError,
    ConfigurationError,
    DecodeError,
    DecoderClosedError,
    DocLengthExceededError,
    LDJSONStreamError,
    LimitExceededError,
)
from .options import DecoderOptions, Number

logger = logging.getLogger(__name__)

Chunk = Union[bytes, bytearray, memoryview, str]

_NEWLINE = b"\n"
_CARRIAGE_RETURN = 0x0D


class DecoderEvent(NamedTuple):
    """A single event emitted by the decoder."""

    kind: EventKind
    value: Any = None
    error: Optional[LDJSONStreamError] = None

    @property
    def is_fatal(self) -> bool:
        return isinstance(self.error, LimitExceededError)


END_EVENT = DecoderEvent(EventKind.END)


class LineDocumentDecoder:
    """
    Incremental decoder for newline-delimited JSON documents.

    Chunks are fed in arrival order with ``accept`` and end-of-input is signalled
    with ``finish``. Both return the events produced by that call: one DOCUMENT or
    ERROR event per completed line, and a single END event once the decoder
    terminates. Malformed lines produce non-fatal ``DecodeError`` events; breaching
    ``max_bytes`` or ``max_doc_length`` produces one fatal ``LimitExceededError``
    event followed by END, after which all further input is refused.

    Examples:
        >>> decoder = LineDocumentDecoder(max_bytes=1024)
        >>> [e.value for e in decoder.accept(b'{"id": 1}\\n{"id"')]
        [{'id': 1}]
        >>> [e.kind for e in decoder.accept(b': 2}\\n')]
        [<EventKind.DOCUMENT: 'document'>]
        >>> [e.kind for e in decoder.finish()]
        [<EventKind.END: 'end'>]
    """

    def __init__(
        self,
        opts: Optional[Mapping[str, Any]] = None,
        encoding: str = "utf-8",
        **options: Any,
    ) -> None:
        """
        Initialize the decoder.

        Args:
            opts: Mapping with any of maxDocLength, maxBytes, debug, hide
            encoding: Encoding used to turn text chunks into bytes (default: 'utf-8')
            **options: Same options by field name (max_doc_length, max_bytes, debug, hide)

        Raises:
            ConfigurationError: If opts is not a mapping or an option is invalid
        """
        self.options = DecoderOptions.from_mapping(opts, **options)
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {encoding}") from e
        self.encoding = encoding

        self._buffer = bytearray()
        # Offset in _buffer before which no newline exists
        self._scan_from = 0
        self._bytes_received = 0
        self._line_number = 0
        self._terminated = False

    @property
    def max_doc_length(self) -> Optional[Number]:
        return self.options.max_doc_length

    @property
    def max_bytes(self) -> Optional[Number]:
        return self.options.max_bytes

    @property
    def bytes_received(self) -> int:
        """Total number of bytes accepted so far, line terminators included."""
        return self._bytes_received

    @property
    def line_number(self) -> int:
        """Number of lines completed so far."""
        return self._line_number

    @property
    def pending(self) -> bytes:
        """Received input that is not yet terminated by a newline."""
        return bytes(self._buffer)

    @property
    def terminated(self) -> bool:
        return self._terminated

    def accept(self, chunk: Chunk) -> List[DecoderEvent]:
        """
        Feed the next chunk of input.

        Args:
            chunk: Raw bytes or text; text is encoded with the decoder's encoding

        Returns:
            Events produced by the lines this chunk completed

        Raises:
            DecoderClosedError: If the decoder has already terminated
        """
        if self._terminated:
            raise DecoderClosedError("Cannot accept input after the decoder has terminated")

        if isinstance(chunk, str):
            chunk = chunk.encode(self.encoding)

        self._bytes_received += len(chunk)
        self._trace("Received %d bytes (%d total)", len(chunk), self._bytes_received)

        max_bytes = self.options.max_bytes
        if max_bytes is not None and self._bytes_received > max_bytes:
            return self._fail(ByteLimitExceededError(max_bytes, self._bytes_received))

        buffer = self._buffer
        buffer += chunk

        events: List[DecoderEvent] = []
        start = 0
        while True:
            newline = buffer.find(_NEWLINE, max(start, self._scan_from))
            if newline == -1:
                break
            end = newline
            if end > start and buffer[end - 1] == _CARRIAGE_RETURN:
                end -= 1
            line = bytes(buffer[start:end])
            start = newline + 1
            self._process_line(line, events)
            if self._terminated:
                return events

        del buffer[:start]
        self._scan_from = len(buffer)

        # With no byte limit, an unterminated line is bounded by maxDocLength here
        max_doc_length = self.options.max_doc_length
        if max_doc_length is not None and max_bytes is None:
            tail_length = len(buffer)
            if tail_length and buffer[-1] == _CARRIAGE_RETURN:
                tail_length -= 1
            if tail_length + 1 > max_doc_length:
                events.extend(self._fail(DocLengthExceededError(max_doc_length, tail_length + 1)))

        return events

    def finish(self) -> List[DecoderEvent]:
        """
        Signal end-of-input.

        Any unterminated remainder is decoded as a final line before the END event.
        Calling this on a decoder that already terminated returns no events.

        Returns:
            Events for the final line (if any) followed by END
        """
        if self._terminated:
            return []

        events: List[DecoderEvent] = []
        if self._buffer:
            line = bytes(self._buffer)
            if line.endswith(b"\r"):
                line = line[:-1]
            self._buffer.clear()
            self._scan_from = 0
            self._trace("Flushing %d unterminated bytes at end of input", len(line))
            self._process_line(line, events)
            if self._terminated:
                return events

        self._terminated = True
        self._trace(
            "Finished after %d lines, %d bytes", self._line_number, self._bytes_received
        )
        events.append(END_EVENT)
        return events

    def _process_line(self, line: bytes, events: List[DecoderEvent]) -> None:
        """Decode one completed line, appending its event(s)."""
        self._line_number += 1

        max_doc_length = self.options.max_doc_length
        if max_doc_length is not None and len(line) + 1 > max_doc_length:
            events.extend(self._fail(DocLengthExceededError(max_doc_length, len(line) + 1)))
            return

        try:
            value = orjson.loads(line)
        except orjson.JSONDecodeError as e:
            if not self.options.hide:
                logger.warning(f"Invalid JSON on line {self._line_number}: {e}")
            error = DecodeError(str(e), line_number=self._line_number, original_error=e)
            events.append(DecoderEvent(EventKind.ERROR, error=error))
            return

        self._trace("Decoded line %d (%d bytes)", self._line_number, len(line))
        events.append(DecoderEvent(EventKind.DOCUMENT, value=value))

    def _fail(self, error: LimitExceededError) -> List[DecoderEvent]:
        """Terminate on a fatal error and discard everything buffered."""
        self._terminated = True
        self._buffer.clear()
        self._scan_from = 0
        if not self.options.hide:
            logger.error(f"Stream terminated: {error} (limit {error.limit}, got {error.received})")
        return [DecoderEvent(EventKind.ERROR, error=error), END_EVENT]

    def _trace(self, message: str, *args: Any) -> None:
        """Log a debug message, formatted only when debug is enabled."""
        if self.options.debug:
            logger.debug(message, *args)
