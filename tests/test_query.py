from __future__ import annotations

import pytest

from shopware_client.utils.query import flatten_query


def test_flat_values_pass_through():
    assert flatten_query({"limit": 5, "term": "shirt"}) == [("limit", "5"), ("term", "shirt")]


def test_empty_and_none():
    assert flatten_query(None) == []
    assert flatten_query({}) == []
    assert flatten_query({"criteria": {}}) == []


def test_nested_criteria():
    criteria = {
        "criteria": {
            "limit": 10,
            "filter": [{"type": "equals", "field": "active", "value": True}],
            "sort": [{"field": "name", "order": "ASC"}],
        }
    }

    assert flatten_query(criteria) == [
        ("criteria[limit]", "10"),
        ("criteria[filter][0][type]", "equals"),
        ("criteria[filter][0][field]", "active"),
        ("criteria[filter][0][value]", "1"),
        ("criteria[sort][0][field]", "name"),
        ("criteria[sort][0][order]", "ASC"),
    ]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, [("k", "1")]),
        (False, [("k", "0")]),
        (None, []),
        (1.5, [("k", "1.5")]),
        (("a", "b"), [("k[0]", "a"), ("k[1]", "b")]),
    ],
)
def test_scalar_encoding(value, expected):
    assert flatten_query({"k": value}) == expected
