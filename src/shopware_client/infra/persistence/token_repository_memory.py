from shopware_client.domain.models.token import Token
from shopware_client.domain.repository.token_repository import TokenRepository


class MemoryTokenRepository(TokenRepository):
    def __init__(self):
        self.__token = Token()

        super().__init__()

    def get(self) -> Token:
        return self.__token

    def set(self, token: Token) -> None:
        self.__token = token
