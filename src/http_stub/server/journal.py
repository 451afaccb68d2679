"""Request journal: what the stub server received and how it answered."""

import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from .matchers import RequestPattern
from .messages import RequestMessage, ResponseMessage


@dataclass(frozen=True)
class LogEntry:
    """
    One served request.

    ``mapping_guid`` is None when no mapping matched; ``partial_mapping_guid``
    then names the closest mapping, if any matcher of it accepted the request.
    """

    request: RequestMessage
    response: ResponseMessage
    mapping_guid: Optional[str] = None
    partial_mapping_guid: Optional[str] = None
    guid: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)

    @property
    def matched(self) -> bool:
        return self.mapping_guid is not None


class RequestJournal:
    """Bounded, thread-safe list of log entries. Oldest entries drop first."""

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: Deque[LogEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def record(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def find(self, pattern: RequestPattern) -> List[LogEntry]:
        return [e for e in self.entries() if pattern.match(e.request).is_perfect_match]

    def unmatched(self) -> List[LogEntry]:
        return [e for e in self.entries() if not e.matched]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
