"""Transport layer that stamps an ``Authorization`` header on every request.

The header comes from a token provider, so expired tokens are refreshed
transparently before the request goes out.

```python
from openapi_client_auth.transport.auth import TokenAuthTransport
import httpx

transport = TokenAuthTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    token_provider=provider,
)

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://management.azure.com/subscriptions")
```
"""

import logging

import httpx

from openapi_client_auth.auth.provider import TokenProvider

logger = logging.getLogger(__name__)


class TokenAuthTransport(httpx.AsyncHTTPTransport):
    """Adds the provider's current ``Authorization`` header to each request.

    If the provider cannot produce a header (refresh failed), the error
    propagates and the request is not sent.

    Args:
        wrapped_transport: The underlying transport to wrap
        token_provider: Source of authorization headers
        token_timeout: Seconds allowed for a token refresh (default: no limit)
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        token_provider: TokenProvider,
        token_timeout: float | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.token_provider = token_provider
        self.token_timeout = token_timeout

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Authorize the request, then hand it to the wrapped transport."""
        header = await self.token_provider.get_authorization_header(timeout=self.token_timeout)
        name, value = header.as_header()
        request.headers[name] = value
        logger.debug(f"Authorized {request.method} {request.url} with {header.scheme} token (***)")
        return await self._wrapped_transport.handle_async_request(request)
