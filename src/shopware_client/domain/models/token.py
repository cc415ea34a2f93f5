from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints
)
from typing import Annotated


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_token : str | None   = None
    refresh_token: str | None   = None
    expires_at   : float | None = None

    @property
    def is_valid(self) -> bool:
        return bool(self.access_token)

    def seconds_left(self, now: float) -> float | None:
        if self.expires_at is None:
            return None

        return self.expires_at - now


class TokenResponse(BaseModel):
    access_token : Annotated[str, StringConstraints(min_length=1)]
    refresh_token: Annotated[str, StringConstraints(min_length=1)]
    expires_in   : int = Field(ge=0)
    token_type   : str = "Bearer"

    def to_token(self, issued_at: float) -> Token:
        return Token(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=issued_at + self.expires_in,
        )
