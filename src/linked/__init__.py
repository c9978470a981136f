"""
Linked data retrieval

Provides:
- Dependency declarations and ordering (plan, try_plan)
- Scheduler (get_linked_data) — one task per source, gated on prerequisites
- Source adapters (Adapter, SourceHooks) with memoized caching
- URL source (UrlSource) — JSON over HTTP
- Client-side joins and field contracts
"""

from .adapter import Adapter, Provider, SourceHooks
from .config import AdapterConfig, load_config
from .contracts import missing_fields, validate_fields
from .declarations import DependencyPlan, PlanResult, parse_declaration, plan, try_plan
from .errors import (
    ErrorKind, LinkedDataError, ParseError, CircularDependencyError,
    MissingProviderError, CacheConfigError, SourceConfigError, FetchError,
    JoinError, FieldContractError,
)
from .joins import group_by, left_match, inner_match, full_outer_match
from .scheduler import get_linked_data
from .url_source import UrlSource

__all__ = [
    'Adapter', 'Provider', 'SourceHooks',
    'AdapterConfig', 'load_config',
    'missing_fields', 'validate_fields',
    'DependencyPlan', 'PlanResult', 'parse_declaration', 'plan', 'try_plan',
    'ErrorKind', 'LinkedDataError', 'ParseError', 'CircularDependencyError',
    'MissingProviderError', 'CacheConfigError', 'SourceConfigError', 'FetchError',
    'JoinError', 'FieldContractError',
    'group_by', 'left_match', 'inner_match', 'full_outer_match',
    'get_linked_data',
    'UrlSource',
]
