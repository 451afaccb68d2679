"""WireMock-style in-process HTTP stub server."""

from .journal import LogEntry, RequestJournal
from .mappings import Mapping, MappingBuilder, MappingRegistry, MatchOutcome
from .matchers import MatchResult, RequestMatcher, RequestPattern, wildcard_to_regex
from .messages import RequestMessage, ResponseMessage
from .responses import ResponseTemplate
from .stub_server import NO_MATCH_MESSAGE, NO_MATCH_STATUS, StubServer

__all__ = [
    "StubServer",
    "RequestPattern",
    "RequestMatcher",
    "MatchResult",
    "ResponseTemplate",
    "RequestMessage",
    "ResponseMessage",
    "Mapping",
    "MappingBuilder",
    "MappingRegistry",
    "MatchOutcome",
    "LogEntry",
    "RequestJournal",
    "wildcard_to_regex",
    "NO_MATCH_STATUS",
    "NO_MATCH_MESSAGE",
]
