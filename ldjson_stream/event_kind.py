from enum import Enum


class EventKind(Enum):
    """Kinds of events emitted by the line document decoder."""

    DOCUMENT = "document"
    ERROR = "error"
    END = "end"
