"""Transport layer components for composable HTTP middleware.

Transport layers wrap httpx's AsyncHTTPTransport to add features such as
authentication.

Modules:
    auth: Authorization header injection from a token provider

Example:
    ```python
    from openapi_client_auth.transport import TokenAuthTransport

    transport = TokenAuthTransport(
        wrapped_transport=httpx.AsyncHTTPTransport(),
        token_provider=provider,
    )
    ```
"""

from openapi_client_auth.transport.auth import TokenAuthTransport

__all__ = ["TokenAuthTransport"]
