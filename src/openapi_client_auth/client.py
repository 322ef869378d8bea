"""Base client class for authenticated OpenAPI clients."""

import httpx

from openapi_client_auth.auth.provider import TokenProvider
from openapi_client_auth.transport.auth import TokenAuthTransport


class BaseOpenAPIClient:
    """Base class for OpenAPI client implementations that need application tokens.

    Owns an ``httpx.AsyncClient`` whose requests carry the token provider's
    ``Authorization`` header. Subclasses implement service-specific methods
    on top of :attr:`http`.

    Args:
        base_url: Service root URL
        token_provider: Source of authorization headers
        transport: Transport to wrap (default: ``httpx.AsyncHTTPTransport()``)
        timeout: Request timeout in seconds

    Example:
        ```python
        class SubscriptionClient(BaseOpenAPIClient):
            async def list(self) -> list[dict]:
                response = await self.http.get("/subscriptions", params={"api-version": "2020-01-01"})
                response.raise_for_status()
                return response.json()["value"]


        async with SubscriptionClient("https://management.azure.com", provider) as client:
            subscriptions = await client.list()
        ```
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.token_provider = token_provider
        self._http = httpx.AsyncClient(
            base_url=base_url,
            transport=TokenAuthTransport(
                wrapped_transport=transport or httpx.AsyncHTTPTransport(),
                token_provider=token_provider,
            ),
            timeout=timeout,
        )

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._http.__aexit__(exc_type, exc_val, exc_tb)
