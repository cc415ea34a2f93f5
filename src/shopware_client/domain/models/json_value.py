from typing import (
    Any,
    Union
)

JSONValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]
JSONObject = dict[str, JSONValue]
