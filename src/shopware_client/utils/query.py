from collections.abc import (
    Mapping,
    Sequence
)
from typing import Any


def flatten_query(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten nested query parameters into bracket notation.

    ``{"criteria": {"limit": 5, "ids": ["a", "b"]}}`` becomes
    ``[("criteria[limit]", "5"), ("criteria[ids][0]", "a"), ("criteria[ids][1]", "b")]``,
    which is how the Admin API reads search criteria from a query string.
    Booleans are sent as ``1``/``0`` and ``None`` values are left out.
    """
    pairs: list[tuple[str, str]] = []

    for key, value in (params or {}).items():
        _flatten(str(key), value, pairs)

    return pairs


def _flatten(key: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if value is None:
        return

    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
        return

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for index, item in enumerate(value):
            _flatten(f"{key}[{index}]", item, pairs)
        return

    if isinstance(value, bool):
        pairs.append((key, "1" if value else "0"))
        return

    pairs.append((key, str(value)))
