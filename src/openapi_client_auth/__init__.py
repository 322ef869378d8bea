"""OpenAPI Client Auth - application token runtime for Python OpenAPI clients.

This library keeps a bearer token for an application identity fresh:
- Cached tokens refreshed shortly before expiry, one authority call at a time
- Client secret, certificate and custom credential resolvers
- One-shot login configured in code or from the environment
- Transport layer that authorizes every outgoing request
- Testing doubles for the identity authority and the clock

Example:
    ```python
    from openapi_client_auth.auth import ClientSecretCredential, LoginOptions, login_silent
    from openapi_client_auth.client import BaseOpenAPIClient

    provider = await login_silent(
        LoginOptions(
            domain="contoso.onmicrosoft.com",
            credential=ClientSecretCredential("my-app-id", secret),
            identity_client=identity_client,
        )
    )

    async with BaseOpenAPIClient("https://management.azure.com", provider) as client:
        response = await client.http.get("/subscriptions")
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
