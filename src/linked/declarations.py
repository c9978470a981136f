"""Parse dependency declarations and order them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import CircularDependencyError, LinkedDataError, ParseError

logger = logging.getLogger(__name__)

# `assoc`, `ld(assoc)`, `join(assoc, ld)`
DECLARATION_RE = re.compile(r"(\w+)(?:\(\s*(\w+(?:\s*,\s*\w+)*)\s*\))?")

Graph = Dict[str, List[str]]


@dataclass
class DependencyPlan:
    graph: Graph
    order: List[str]


@dataclass
class PlanResult:
    """Planning outcome returned instead of raising."""
    ok: bool
    plan: Optional[DependencyPlan] = None
    error: Optional[LinkedDataError] = None


def parse_declaration(text: str) -> Tuple[str, List[str]]:
    match = DECLARATION_RE.fullmatch(text)
    if not match:
        raise ParseError(text)

    name, deps = match.groups()
    if deps is None:
        return name, []
    return name, re.split(r"\s*,\s*", deps)


def build_graph(declarations: Sequence[str]) -> Graph:
    graph: Graph = {}
    for text in declarations:
        name, deps = parse_declaration(text)
        if name in graph:
            logger.debug(f"Node {name!r} declared more than once; using the later edges {deps}")
        graph[name] = deps
    return graph


def topological_order(graph: Graph) -> List[str]:
    """
    Kahn's algorithm; among ready nodes the earliest declared goes first.

    Prerequisites that were never declared are treated as leaf nodes ranked
    after every declared node.
    """
    rank: Dict[str, int] = {}
    for name, deps in graph.items():
        rank.setdefault(name, len(rank))
    for deps in graph.values():
        for dep in deps:
            rank.setdefault(dep, len(rank))

    waiting = {name: set(graph.get(name, ())) for name in rank}
    dependents: Dict[str, List[str]] = {name: [] for name in rank}
    for name, deps in waiting.items():
        for dep in deps:
            dependents[dep].append(name)

    ready = [name for name in rank if not waiting[name]]
    order: List[str] = []
    while ready:
        ready.sort(key=rank.__getitem__)
        current = ready.pop(0)
        order.append(current)
        for name in dependents[current]:
            waiting[name].discard(current)
            if not waiting[name]:
                ready.append(name)

    if len(order) != len(rank):
        placed = set(order)
        raise CircularDependencyError(name for name in rank if name not in placed)
    return order


def plan(declarations: Sequence[str]) -> DependencyPlan:
    graph = build_graph(declarations)
    order = topological_order(graph)
    logger.debug(f"Planned {len(order)} node(s): {' -> '.join(order)}")
    return DependencyPlan(graph=graph, order=order)


def try_plan(declarations: Sequence[str]) -> PlanResult:
    try:
        return PlanResult(ok=True, plan=plan(declarations))
    except LinkedDataError as exc:
        return PlanResult(ok=False, error=exc)
