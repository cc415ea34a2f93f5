from functools import lru_cache

from shopware_client.config.settings import Settings
from shopware_client.domain.repository.token_repository import TokenRepository
from shopware_client.infra.client.shopware_client import ShopwareClient
from shopware_client.infra.persistence.token_repository_memory import MemoryTokenRepository


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def get_repository() -> TokenRepository:
    return MemoryTokenRepository()


@lru_cache(maxsize=1)
def get_client() -> ShopwareClient:
    return ShopwareClient.from_settings(get_settings(), repository=get_repository())
