"""Perform a series of requests, respecting order of operations."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Sequence

from .declarations import plan
from .errors import MissingProviderError

logger = logging.getLogger(__name__)

PROVIDER_NAME_OPTION = "_provider_name"


async def get_linked_data(
    shared_options: Dict[str, Any],
    providers: Mapping[str, Any],
    declarations: Sequence[str],
    consolidate: bool = True,
) -> Any:
    """
    Fetch from every declared source, each after its prerequisites settle.

    Args:
        shared_options: Options passed (as a per-source copy) to every fetch
        providers: Source name -> object with `async fetch(options, *prior)`
        declarations: Strings like `assoc`, `ld(assoc)`, `join(assoc, ld)`
        consolidate: Return only the last source's result in dependency order

    Returns:
        The last-ordered source's records, or every source's records in order

    Raises:
        ParseError, CircularDependencyError, MissingProviderError before any
        fetch starts; otherwise the first fetch failure.
    """
    if not declarations:
        return []

    dependency_plan = plan(declarations)
    graph, order = dependency_plan.graph, dependency_plan.order

    # Every source must exist before anything is scheduled
    for name in order:
        if providers.get(name) is None:
            raise MissingProviderError(name)

    responses: Dict[str, asyncio.Task] = {}
    for name in order:
        prerequisites = [responses[dep] for dep in graph.get(name, [])]
        responses[name] = asyncio.ensure_future(
            _fetch_after(name, providers[name], shared_options, prerequisites)
        )

    logger.info(f"Scheduled {len(order)} source(s): {', '.join(order)}")

    all_results: List[Any] = await asyncio.gather(*responses.values())
    if consolidate:
        # Last in dependency order, which is not necessarily the last declared
        return all_results[-1]
    return all_results


async def _fetch_after(
    name: str,
    provider: Any,
    shared_options: Dict[str, Any],
    prerequisites: List[asyncio.Task],
) -> Any:
    prior_results = await asyncio.gather(*prerequisites) if prerequisites else []

    # A private copy per source, so in-place changes never leak to siblings
    options = dict(shared_options)
    options[PROVIDER_NAME_OPTION] = name

    logger.debug(f"Fetching {name!r} with {len(prior_results)} prior result(s)")
    return await provider.fetch(options, *prior_results)
