"""
Very simple client-side data joins.

Align records from two datasets on a common key. Keys must be primitive
values (str, int, float, bool); matched rows take right-hand fields first,
then left-hand fields on top.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Sequence, Tuple

from .errors import JoinError

Record = Dict[str, Any]

PRIMITIVE_TYPES = (str, int, float, bool)


def _match_key(value: Any) -> Tuple[str, Any]:
    # bool is an int subclass; keep True and 1 apart
    if isinstance(value, bool):
        return "bool", value
    if isinstance(value, str):
        return "str", value
    return "number", value


def _group_value(item: Record, group_key: str) -> Any:
    if group_key not in item:
        raise JoinError(f'All records must specify a value for the field "{group_key}"')
    item_group = item[group_key]
    if not isinstance(item_group, PRIMITIVE_TYPES):
        raise JoinError("Attempted to group on a field with non-primitive values")
    return item_group


def group_by(records: Sequence[Record], group_key: str) -> Dict[Any, List[Record]]:
    """Group records by a primitive field. True and 1 share a group here, as dict keys."""
    result: Dict[Any, List[Record]] = {}
    for item in records:
        result.setdefault(_group_value(item, group_key), []).append(item)
    return result


def _index_by(records: Sequence[Record], group_key: str) -> Dict[Tuple[str, Any], List[Record]]:
    result: Dict[Tuple[str, Any], List[Record]] = {}
    for item in records:
        result.setdefault(_match_key(_group_value(item, group_key)), []).append(item)
    return result


def _any_match(
    how: str,
    left: Sequence[Record],
    right: Sequence[Record],
    left_key: str,
    right_key: str,
) -> List[Record]:
    right_index = _index_by(right, right_key)
    results: List[Record] = []
    for item in left:
        match_value = item.get(left_key)
        if match_value is not None and not isinstance(match_value, PRIMITIVE_TYPES):
            raise JoinError("Attempted to join on a field with non-primitive values")
        right_matches = right_index.get(_match_key(match_value), []) if match_value is not None else []
        if right_matches:
            results.extend(
                {**copy.deepcopy(right_item), **copy.deepcopy(item)}
                for right_item in right_matches
            )
        elif how != "inner":
            results.append(copy.deepcopy(item))

    if how == "outer":
        left_index = _index_by(left, left_key)
        results.extend(
            copy.deepcopy(item) for item in right
            if _match_key(item[right_key]) not in left_index
        )
    return results


def left_match(left: Sequence[Record], right: Sequence[Record], left_key: str, right_key: str) -> List[Record]:
    """Equivalent to LEFT OUTER JOIN in SQL."""
    return _any_match("left", left, right, left_key, right_key)


def inner_match(left: Sequence[Record], right: Sequence[Record], left_key: str, right_key: str) -> List[Record]:
    return _any_match("inner", left, right, left_key, right_key)


def full_outer_match(left: Sequence[Record], right: Sequence[Record], left_key: str, right_key: str) -> List[Record]:
    return _any_match("outer", left, right, left_key, right_key)
