from pathlib import Path
from pydantic import StringConstraints
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict
)
from typing import Annotated

ENV_PATH = Path.cwd() / ".env"


class Settings(BaseSettings):
    SHOPWARE_URL          : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    SHOPWARE_CLIENT_ID    : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    SHOPWARE_CLIENT_SECRET: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

    SHOPWARE_TIMEOUT: float = 20.0

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )
