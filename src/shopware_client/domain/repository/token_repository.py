from abc import (
    ABC,
    abstractmethod
)

from shopware_client.domain.models.token import Token


class TokenRepository(ABC):
    @abstractmethod
    def get(self) -> Token:
        ...

    @abstractmethod
    def set(self, token: Token) -> None:
        ...
