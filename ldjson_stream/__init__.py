"""
LDJSON Stream

A defensive streaming parser for line-delimited JSON (LDJSON / NDJSON). It turns
arbitrarily chunked input from sockets, pipes or files into one decoded value per
line, while bounding memory with a maximum document length and a maximum total
byte count.

Example usage:
    Incremental decoding:
    >>> from ldjson_stream import LineDocumentDecoder
    >>> decoder = LineDocumentDecoder({"maxBytes": 1 << 20})
    >>> events = decoder.accept(b'{"id": 1}\\n')
    >>> events += decoder.finish()

    Streaming from sources:
    >>> from ldjson_stream import LDJSONStream, stream_ldjson
    >>> for doc in LDJSONStream(max_doc_length=4096).stream_file("events.ldjson"):
    ...     print(doc)
    >>> docs = list(stream_ldjson(sys.stdin.buffer, max_bytes=1 << 20))

    One-shot payloads:
    >>> from ldjson_stream import decode_ldjson
    >>> decode_ldjson(b'{"a": 1}\\n{"b": 2}\\n')
    [{'a': 1}, {'b': 2}]
"""

from .event_kind import EventKind
from .exceptions import (
    ByteLimitExceededError,
    ConfigurationError,
    DecodeError,
    DecoderClosedError,
    DocLengthExceededError,
    FileHandlingError,
    LDJSONStreamError,
    LimitExceededError,
)
from .functions import decode_ldjson, stream_ldjson, stream_ldjson_file
from .ldjson_stream import LDJSONStream
from .line_document_decoder import DecoderEvent, LineDocumentDecoder
from .options import DecoderOptions

__version__ = "1.0.0"
__author__ = "Berk Çakar"

__all__ = [
    # Main classes
    "LineDocumentDecoder",
    "LDJSONStream",
    "DecoderEvent",
    "DecoderOptions",
    # Convenience functions
    "decode_ldjson",
    "stream_ldjson",
    "stream_ldjson_file",
    # Enums
    "EventKind",
    # Exceptions
    "LDJSONStreamError",
    "ConfigurationError",
    "LimitExceededError",
    "ByteLimitExceededError",
    "DocLengthExceededError",
    "DecodeError",
    "DecoderClosedError",
    "FileHandlingError",
    # Metadata
    "__version__",
    "__author__",
]
