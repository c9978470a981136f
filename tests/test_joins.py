import pytest

from linked.errors import JoinError
from linked.joins import full_outer_match, group_by, inner_match, left_match

LEFT = [
    {"id": 1, "name": "alpha"},
    {"id": 2, "name": "beta"},
    {"id": 3, "name": "gamma"},
]

RIGHT = [
    {"ref": 1, "score": 0.1},
    {"ref": 1, "score": 0.2},
    {"ref": 2, "score": 0.3},
    {"ref": 9, "score": 0.9},
]


def test_group_by():
    groups = group_by(RIGHT, "ref")
    assert list(groups) == [1, 2, 9]
    assert len(groups[1]) == 2


def test_group_by_requires_field():
    with pytest.raises(JoinError, match='"ref"'):
        group_by([{"ref": 1}, {"other": 2}], "ref")


@pytest.mark.parametrize("value", [None, {"a": 1}, [1], (1, 2)])
def test_group_by_rejects_non_primitive(value):
    with pytest.raises(JoinError, match="non-primitive"):
        group_by([{"ref": value}], "ref")


def test_left_match():
    result = left_match(LEFT, RIGHT, "id", "ref")
    assert result == [
        {"ref": 1, "score": 0.1, "id": 1, "name": "alpha"},
        {"ref": 1, "score": 0.2, "id": 1, "name": "alpha"},
        {"ref": 2, "score": 0.3, "id": 2, "name": "beta"},
        {"id": 3, "name": "gamma"},
    ]


def test_inner_match():
    result = inner_match(LEFT, RIGHT, "id", "ref")
    assert [row["name"] for row in result] == ["alpha", "alpha", "beta"]


def test_full_outer_match():
    result = full_outer_match(LEFT, RIGHT, "id", "ref")
    assert len(result) == 5
    assert result[-1] == {"ref": 9, "score": 0.9}


def test_left_fields_win_on_conflict():
    result = inner_match([{"id": 1, "label": "left"}], [{"id": 1, "label": "right"}], "id", "id")
    assert result == [{"id": 1, "label": "left"}]


def test_bool_and_number_keys_do_not_match():
    assert inner_match([{"id": True}], [{"id": 1}], "id", "id") == []
    assert inner_match([{"id": 0}], [{"id": False}], "id", "id") == []
    assert len(full_outer_match([{"id": True}], [{"id": 1}], "id", "id")) == 2


def test_int_and_float_keys_match():
    assert inner_match([{"id": 1}], [{"id": 1.0, "x": "y"}], "id", "id") == [{"id": 1, "x": "y"}]


def test_left_rows_without_key_are_kept_unmatched():
    result = left_match([{"name": "orphan"}], RIGHT, "id", "ref")
    assert result == [{"name": "orphan"}]


def test_join_rejects_non_primitive_left_keys():
    with pytest.raises(JoinError):
        left_match([{"id": [1]}], RIGHT, "id", "ref")


def test_outputs_are_copies():
    left = [{"id": 1, "tags": ["x"]}]
    result = left_match(left, [], "id", "ref")
    result[0]["tags"].append("y")
    assert left[0]["tags"] == ["x"]
