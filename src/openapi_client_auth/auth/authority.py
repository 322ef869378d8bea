"""Contract for the identity authority client.

The network exchange with the authority (OAuth2 client credentials, client
assertion signing, authority validation, cache maintenance) lives outside
this package. Anything that implements :class:`IdentityClient` can be
plugged into an :class:`~openapi_client_auth.auth.models.AuthenticationContext`.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from openapi_client_auth.auth.models import (
        AuthenticationContext,
        ClientAssertionCertificate,
        ClientSecretCredential,
        TokenResult,
    )


@runtime_checkable
class IdentityClient(Protocol):
    """Performs one token exchange with an identity authority."""

    async def acquire_token(
        self,
        context: "AuthenticationContext",
        audience: str,
        credential: "ClientSecretCredential | ClientAssertionCertificate",
    ) -> "TokenResult":
        """Exchange ``credential`` for a token scoped to ``audience``.

        Raises:
            Exception: Any failure; callers wrap it in AuthenticationFailedError
        """
        ...
