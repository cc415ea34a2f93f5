import httpx
import json

from collections.abc import Mapping
from pydantic import (
    BaseModel,
    ConfigDict,
    StringConstraints,
    field_validator
)
from typing import (
    Annotated,
    Any
)

from shopware_client.domain.models.json_value import JSONValue


class ApiRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    method : Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1)]
    path   : str
    body   : Any = None
    query  : dict[str, Any] | None = None
    headers: dict[str, str] | None = None

    @field_validator("path")
    @classmethod
    def strip_leading_slash(cls, v: str) -> str:
        return v.lstrip("/")

    @field_validator("headers", mode="before")
    @classmethod
    def headers_to_strings(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {str(key): str(value) for key, value in v.items()}

        return v

    def build_headers(self, access_token: str) -> httpx.Headers:
        headers = httpx.Headers({
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

        # Header names are case-insensitive; a caller's "authorization" replaces ours.
        for key, value in (self.headers or {}).items():
            headers[key] = value

        return headers


class RequestOutcome(BaseModel):
    # status_code is None when the transport failed before any response arrived.
    status_code: int | None = None
    content    : bytes = b""
    error      : str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401

    def decode(self) -> JSONValue:
        if not self.content.strip():
            return {}

        return json.loads(self.content)
