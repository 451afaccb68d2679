"""
Mapping registry: request pattern -> response template pairs.

Thread-safe: the server reads the registry from one thread per connection
while tests register mappings from the main thread.
"""

import itertools
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..core.exceptions import InvalidMappingError, MappingNotFoundError
from .matchers import MatchResult, RequestPattern
from .messages import RequestMessage
from .responses import ResponseTemplate


@dataclass(frozen=True)
class Mapping:
    """
    One registered stub.

    Attributes:
        guid: Unique id (generated unless given)
        request: Request pattern
        response: Response template
        priority: Lower value wins among matching mappings
        title: Optional human-readable name
        sequence: Registration order; later mappings win ties
    """

    request: RequestPattern
    response: ResponseTemplate
    guid: str = field(default_factory=lambda: str(uuid.uuid4()))
    priority: int = 0
    title: Optional[str] = None
    sequence: int = 0


@dataclass(frozen=True)
class MatchOutcome:
    """Result of looking up a request in the registry."""

    mapping: Optional[Mapping]
    closest: Optional[Mapping] = None
    closest_result: Optional[MatchResult] = None

    @property
    def matched(self) -> bool:
        return self.mapping is not None


class MappingRegistry:
    """Holds mappings and picks the one that serves a request."""

    def __init__(self):
        self._mappings: Dict[str, Mapping] = {}
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)

    def add(self, mapping: Mapping) -> Mapping:
        with self._lock:
            stored = Mapping(
                request=mapping.request,
                response=mapping.response,
                guid=mapping.guid,
                priority=mapping.priority,
                title=mapping.title,
                sequence=next(self._sequence),
            )
            # Re-registering a guid replaces the old mapping.
            self._mappings[stored.guid] = stored
            return stored

    def get(self, guid: str) -> Mapping:
        with self._lock:
            try:
                return self._mappings[guid]
            except KeyError:
                raise MappingNotFoundError(guid) from None

    def remove(self, guid: str) -> None:
        with self._lock:
            if self._mappings.pop(guid, None) is None:
                raise MappingNotFoundError(guid)

    def clear(self) -> None:
        with self._lock:
            self._mappings.clear()

    def all(self) -> List[Mapping]:
        with self._lock:
            return sorted(self._mappings.values(), key=lambda m: m.sequence)

    def __len__(self) -> int:
        with self._lock:
            return len(self._mappings)

    def find(self, request: RequestMessage) -> MatchOutcome:
        """
        Pick the mapping for ``request``.

        Among perfect matches the lowest priority wins, then the most recently
        registered. Without a perfect match, the mapping with the best partial
        score (at least one matcher accepted) is reported as closest.
        """
        candidates: List[Tuple[Mapping, MatchResult]] = [
            (mapping, mapping.request.match(request)) for mapping in self.all()
        ]

        perfect = [m for m, result in candidates if result.is_perfect_match]
        if perfect:
            best = min(perfect, key=lambda m: (m.priority, -m.sequence))
            return MatchOutcome(mapping=best)

        partial = [(m, r) for m, r in candidates if r.matched > 0]
        if not partial:
            return MatchOutcome(mapping=None)

        closest, result = max(partial, key=lambda item: (item[1].score, item[0].sequence))
        return MatchOutcome(mapping=None, closest=closest, closest_result=result)


class MappingBuilder:
    """
    Returned by ``StubServer.given()``; finishes the mapping with
    ``respond_with()``.

    Example:
        >>> server.given(
        ...     RequestPattern.create().with_path("/api/users").using_get()
        ... ).at_priority(1).respond_with(
        ...     ResponseTemplate.create().with_status_code(200).with_body('{"Users":[]}')
        ... )
    """

    def __init__(self, request: RequestPattern, register: Callable[[Mapping], Mapping]):
        if not isinstance(request, RequestPattern):
            raise InvalidMappingError(
                f"given() expects a RequestPattern, got {type(request).__name__}"
            )
        self._request = request
        self._register = register
        self._priority = 0
        self._title: Optional[str] = None
        self._guid: Optional[str] = None

    def at_priority(self, priority: int) -> "MappingBuilder":
        self._priority = priority
        return self

    def with_title(self, title: str) -> "MappingBuilder":
        self._title = title
        return self

    def with_guid(self, guid: str) -> "MappingBuilder":
        self._guid = guid
        return self

    def respond_with(self, response: ResponseTemplate) -> Mapping:
        if not isinstance(response, ResponseTemplate):
            raise InvalidMappingError(
                f"respond_with() expects a ResponseTemplate, got {type(response).__name__}"
            )
        kwargs = {}
        if self._guid is not None:
            kwargs["guid"] = self._guid
        mapping = Mapping(
            request=self._request,
            response=response,
            priority=self._priority,
            title=self._title,
            **kwargs,
        )
        return self._register(mapping)
