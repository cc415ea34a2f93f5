from typing import Any


class ShopwareClientError(Exception):
    # status_code stays None for transport failures; detail holds the response text.
    def __init__(self, message: str, status_code: int | None = None, detail: Any = None):
        super().__init__(message)
        self.message     = message
        self.status_code = status_code
        self.detail      = detail


class AuthenticationFailed(ShopwareClientError):
    pass


class MissingRefreshToken(ShopwareClientError):
    def __init__(self, message: str = "No refresh token available; call authenticate() first."):
        super().__init__(message)


class TokenRefreshFailed(ShopwareClientError):
    pass


class MalformedTokenResponse(ShopwareClientError, ValueError):
    pass


class RequestFailed(ShopwareClientError):
    pass
