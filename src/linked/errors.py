"""Error taxonomy for linked data retrieval."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from cache import CacheConfigError as _CacheConfigError


class ErrorKind(Enum):
    """Failure categories surfaced by planning, caching and fetching."""
    PARSE = "parse"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_PROVIDER = "missing_provider"
    CACHE_CONFIG = "cache_config"
    SOURCE_CONFIG = "source_config"
    FETCH = "fetch"
    JOIN = "join"
    FIELD_CONTRACT = "field_contract"


class LinkedDataError(Exception):
    kind: ErrorKind = ErrorKind.FETCH


class ParseError(LinkedDataError):
    kind = ErrorKind.PARSE

    def __init__(self, declaration: str) -> None:
        self.declaration = declaration
        super().__init__(f"Unable to parse dependency specification: {declaration!r}")


class CircularDependencyError(LinkedDataError):
    kind = ErrorKind.CIRCULAR_DEPENDENCY

    def __init__(self, nodes: Iterable[str]) -> None:
        self.nodes: List[str] = list(nodes)
        super().__init__(
            f"Invalid or possible circular dependency specification for: {', '.join(self.nodes)}"
        )


class MissingProviderError(LinkedDataError):
    kind = ErrorKind.MISSING_PROVIDER

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Data has been requested from source '{name}', but no matching source was provided"
        )


class CacheConfigError(LinkedDataError, _CacheConfigError):
    kind = ErrorKind.CACHE_CONFIG


class SourceConfigError(LinkedDataError, ValueError):
    kind = ErrorKind.SOURCE_CONFIG


class FetchError(LinkedDataError):
    """Raised by a source when retrieval fails (transport or HTTP status)."""
    kind = ErrorKind.FETCH

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class JoinError(LinkedDataError, ValueError):
    kind = ErrorKind.JOIN


class FieldContractError(LinkedDataError):
    kind = ErrorKind.FIELD_CONTRACT

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = sorted(missing)
        super().__init__(f"records are missing required fields: {', '.join(self.missing)}")
