from pydantic import (
    BaseModel,
    ConfigDict,
    StringConstraints,
    field_validator
)
from typing import Annotated


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url     : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    client_id    : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    client_secret: Annotated[str, StringConstraints(min_length=1)]

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.rstrip("/")

        if not v:
            raise ValueError("base_url must not be empty")

        return v

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
