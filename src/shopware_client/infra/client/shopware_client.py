import httpx
import logging
import threading
import time

from pydantic import ValidationError
from typing import (
    Any,
    Callable,
    Mapping
)

from shopware_client.config.settings import Settings
from shopware_client.domain.errors import (
    AuthenticationFailed,
    MalformedTokenResponse,
    MissingRefreshToken,
    RequestFailed,
    ShopwareClientError,
    TokenRefreshFailed
)
from shopware_client.domain.models.api_request import (
    ApiRequest,
    RequestOutcome
)
from shopware_client.domain.models.client_config import ClientConfig
from shopware_client.domain.models.json_value import (
    JSONObject,
    JSONValue
)
from shopware_client.domain.models.token import (
    Token,
    TokenResponse
)
from shopware_client.domain.repository.token_repository import TokenRepository
from shopware_client.infra.persistence.token_repository_memory import MemoryTokenRepository
from shopware_client.utils.query import flatten_query

logger = logging.getLogger(__name__)

TOKEN_PATH = "api/oauth/token"

DEFAULT_TIMEOUT = 20.0

# Refresh this many seconds before expiry so in-flight requests never carry a dying token.
REFRESH_MARGIN_SECONDS = 30

MAX_AUTH_RETRIES = 1


class ShopwareClient:
    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        *,
        http_client: httpx.Client | None = None,
        repository: TokenRepository | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ):
        self.__config     = ClientConfig(base_url=base_url, client_id=client_id, client_secret=client_secret)
        self.__repository = repository or MemoryTokenRepository()
        self.__owns_http  = http_client is None
        self.__http       = http_client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.__clock      = clock
        self.__lock       = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ShopwareClient":
        kwargs.setdefault("timeout", settings.SHOPWARE_TIMEOUT)

        return cls(
            settings.SHOPWARE_URL,
            settings.SHOPWARE_CLIENT_ID,
            settings.SHOPWARE_CLIENT_SECRET,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self.__config.base_url

    @property
    def token(self) -> Token:
        return self.__repository.get()

    def close(self) -> None:
        if self.__owns_http:
            self.__http.close()

    def __enter__(self) -> "ShopwareClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- session -----------------------------------------------------------

    def authenticate(self) -> bool:
        with self.__lock:
            payload, issued_at = self.__request_token(
                {"grant_type": "client_credentials"},
                error=AuthenticationFailed,
                label="Authentication failed",
            )
            self.__repository.set(payload.to_token(issued_at))

        logger.info("Authenticated against %s, token expires in %ss", self.__config.base_url, payload.expires_in)

        return True

    def refresh(self) -> bool:
        with self.__lock:
            refresh_token = self.__repository.get().refresh_token

            if not refresh_token:
                raise MissingRefreshToken()

            payload, issued_at = self.__request_token(
                {"grant_type": "refresh_token", "refresh_token": refresh_token},
                error=TokenRefreshFailed,
                label="Token refresh failed",
            )
            self.__repository.set(payload.to_token(issued_at))

        logger.info("Access token refreshed, expires in %ss", payload.expires_in)

        return True

    def ensure_valid(self) -> bool:
        with self.__lock:
            token = self.__repository.get()

            if not token.access_token:
                return self.authenticate()

            seconds_left = token.seconds_left(self.__clock())

            if seconds_left is not None and seconds_left <= REFRESH_MARGIN_SECONDS:
                logger.info("Access token expires in %.0fs, refreshing", seconds_left)

                return self.refresh()

            return True

    def __request_token(
        self,
        grant: dict[str, str],
        error: type[ShopwareClientError],
        label: str,
    ) -> tuple[TokenResponse, float]:
        data = {
            "client_id": self.__config.client_id,
            "client_secret": self.__config.client_secret,
            **grant,
        }

        try:
            r = self.__http.post(
                self.__config.url(TOKEN_PATH),
                json=data,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            logger.error("%s: %s", label, e)
            raise error(f"{label}: {e}") from e

        if not r.is_success:
            logger.error("%s (%s): %s", label, r.status_code, r.text)
            raise error(
                f"{label}: {r.status_code} {r.reason_phrase}: {r.text}",
                status_code=r.status_code,
                detail=r.text,
            )

        issued_at = self.__clock()

        try:
            payload = TokenResponse.model_validate_json(r.content)
        except ValidationError as e:
            logger.error("%s: unexpected token response: %s", label, r.text)
            raise MalformedTokenResponse(
                f"{label}: unexpected token response body",
                status_code=r.status_code,
                detail=r.text,
            ) from e

        return payload, issued_at

    # -- dispatch ----------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        body: JSONValue = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
    ) -> JSONValue:
        api_request = ApiRequest(
            method=method,
            path=path,
            body=body,
            query=dict(query) if query else None,
            headers=dict(headers) if headers else None,
        )

        with self.__lock:
            self.ensure_valid()
            access_token = self.__repository.get().access_token

        for attempt in range(MAX_AUTH_RETRIES + 1):
            outcome = self.__send(api_request, access_token)

            if outcome.ok:
                return self.__decode(api_request, outcome)

            if outcome.unauthorized and attempt < MAX_AUTH_RETRIES:
                logger.info("%s %s returned 401, refreshing token and retrying once", api_request.method, api_request.path)
                access_token = self.__renew_rejected(access_token)
                continue

            raise self.__failure(api_request, outcome, retried=attempt > 0)

    def __renew_rejected(self, rejected_token: str) -> str:
        with self.__lock:
            # Another thread may already have replaced the rejected token.
            if self.__repository.get().access_token == rejected_token:
                self.refresh()

            return self.__repository.get().access_token

    def __send(self, api_request: ApiRequest, access_token: str) -> RequestOutcome:
        url = self.__config.url(api_request.path)

        options: dict[str, Any] = {"headers": api_request.build_headers(access_token)}

        if api_request.body is not None:
            options["json"] = api_request.body

        params = flatten_query(api_request.query)

        if params:
            options["params"] = params

        logger.debug("%s %s", api_request.method, url)

        try:
            r = self.__http.request(api_request.method, url, follow_redirects=True, **options)
        except httpx.HTTPError as e:
            return RequestOutcome(error=f"{api_request.method} {url}: {e}")

        if not r.is_success:
            return RequestOutcome(
                status_code=r.status_code,
                content=r.content,
                error=f"{api_request.method} {url} returned {r.status_code} {r.reason_phrase}: {r.text}",
            )

        return RequestOutcome(status_code=r.status_code, content=r.content)

    def __decode(self, api_request: ApiRequest, outcome: RequestOutcome) -> JSONValue:
        try:
            return outcome.decode()
        except ValueError as e:
            raise RequestFailed(
                f"API request failed: {api_request.method} {api_request.path} returned invalid JSON: {e}",
                status_code=outcome.status_code,
                detail=outcome.content.decode("utf-8", errors="replace"),
            ) from e

    def __failure(self, api_request: ApiRequest, outcome: RequestOutcome, retried: bool) -> RequestFailed:
        prefix = "API request failed after token refresh" if retried else "API request failed"

        logger.error("%s: %s", prefix, outcome.error)

        return RequestFailed(
            f"{prefix}: {outcome.error}",
            status_code=outcome.status_code,
            detail=outcome.content.decode("utf-8", errors="replace") or None,
        )

    # -- generic verbs -----------------------------------------------------

    def get(self, path: str, query: Mapping[str, Any] | None = None) -> JSONValue:
        return self.request("GET", path, query=query)

    def post(self, path: str, body: JSONValue = None) -> JSONValue:
        return self.request("POST", path, body=body)

    def patch(self, path: str, body: JSONValue = None) -> JSONValue:
        return self.request("PATCH", path, body=body)

    def delete(self, path: str) -> JSONValue:
        return self.request("DELETE", path)

    # -- resources ---------------------------------------------------------

    def get_products(self, criteria: JSONObject | None = None) -> JSONValue:
        return self.get("/api/product", {"criteria": criteria or {}})

    def get_product(self, product_id: str) -> JSONValue:
        return self.get(f"/api/product/{product_id}")

    def create_product(self, product_data: JSONObject) -> JSONValue:
        return self.post("/api/product", product_data)

    def update_product(self, product_id: str, product_data: JSONObject) -> JSONValue:
        return self.patch(f"/api/product/{product_id}", product_data)

    def delete_product(self, product_id: str) -> JSONValue:
        return self.delete(f"/api/product/{product_id}")

    def get_orders(self, criteria: JSONObject | None = None) -> JSONValue:
        return self.get("/api/order", {"criteria": criteria or {}})

    def get_order(self, order_id: str) -> JSONValue:
        return self.get(f"/api/order/{order_id}")

    def get_customers(self, criteria: JSONObject | None = None) -> JSONValue:
        return self.get("/api/customer", {"criteria": criteria or {}})
