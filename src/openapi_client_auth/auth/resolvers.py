"""Credential resolvers: the strategies that obtain a fresh token.

A resolver performs exactly one authentication round trip per call and
never retries. Three variants are provided:

- :class:`SecretCredentialResolver` forwards a client secret
- :class:`CertificateCredentialResolver` asks a certificate source for
  material on every call, so rotated certificates are picked up
- any subclass of :class:`CredentialResolver` (or an async function wrapped
  in :class:`FunctionCredentialResolver`) for custom schemes

Example:
    ```python
    from openapi_client_auth.auth import (
        CertificateCredentialResolver,
        certificate_from_file,
    )

    resolver = CertificateCredentialResolver(certificate_from_file("~/.certs/app.pfx", password="..."))
    result = await resolver.authenticate(client_id, audience, context)
    ```
"""

import inspect
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from pathlib import Path

from openapi_client_auth.auth.exceptions import AuthenticationFailedError, CertificateResolutionError
from openapi_client_auth.auth.models import (
    AuthenticationContext,
    CertificateMaterial,
    ClientAssertionCertificate,
    ClientSecretCredential,
    TokenResult,
)

logger = logging.getLogger(__name__)

CertificateSource = Callable[[str], "ClientAssertionCertificate | Awaitable[ClientAssertionCertificate]"]
AuthenticateFunction = Callable[[str, str, AuthenticationContext], Awaitable[TokenResult]]


class CredentialResolver(ABC):
    """Base class for token acquisition strategies.

    Subclass and implement :meth:`authenticate` to plug in a custom scheme.
    Implementations must raise :class:`AuthenticationFailedError` (or a
    subclass) on failure and must not retry.
    """

    @abstractmethod
    async def authenticate(self, client_id: str, audience: str, context: AuthenticationContext) -> TokenResult:
        """Acquire a new token for ``client_id`` scoped to ``audience``.

        Args:
            client_id: Application id
            audience: Resource the token is requested for
            context: Authority to authenticate against

        Returns:
            TokenResult with access token, type and expiry

        Raises:
            AuthenticationFailedError: If the authority does not issue a token
        """


async def _acquire(
    context: AuthenticationContext,
    audience: str,
    credential: ClientSecretCredential | ClientAssertionCertificate,
) -> TokenResult:
    """Forward a credential to the context's identity client, wrapping failures."""
    try:
        return await context.identity_client.acquire_token(context, audience, credential)
    except AuthenticationFailedError:
        raise
    except Exception as e:
        raise AuthenticationFailedError(
            f"Failed to acquire token for client '{credential.client_id}' (audience {audience}) "
            f"from {context.authority}: {e}",
            client_id=credential.client_id,
            audience=audience,
        ) from e


class SecretCredentialResolver(CredentialResolver):
    """Authenticates with an application id and shared secret."""

    def __init__(self, credential: ClientSecretCredential):
        self._credential = credential

    @property
    def client_id(self) -> str:
        return self._credential.client_id

    async def authenticate(self, client_id: str, audience: str, context: AuthenticationContext) -> TokenResult:
        logger.debug(f"Authenticating client '{client_id}' with secret (***) against {context.authority}")
        return await _acquire(context, audience, self._credential)


class CertificateCredentialResolver(CredentialResolver):
    """Authenticates with a client assertion signed by a certificate.

    The certificate source is called on every authentication and may be a
    plain function or a coroutine function.
    """

    def __init__(self, certificate_source: CertificateSource):
        self._certificate_source = certificate_source

    async def _resolve_certificate(self, client_id: str, audience: str) -> ClientAssertionCertificate:
        try:
            certificate = self._certificate_source(client_id)
            if inspect.isawaitable(certificate):
                certificate = await certificate
        except CertificateResolutionError:
            raise
        except Exception as e:
            raise CertificateResolutionError(
                f"Failed to resolve certificate for client '{client_id}': {e}",
                client_id=client_id,
                audience=audience,
            ) from e

        if certificate is None:
            raise CertificateResolutionError(
                f"Certificate source returned no certificate for client '{client_id}'",
                client_id=client_id,
                audience=audience,
            )
        return certificate

    async def authenticate(self, client_id: str, audience: str, context: AuthenticationContext) -> TokenResult:
        certificate = await self._resolve_certificate(client_id, audience)
        logger.debug(f"Authenticating client '{client_id}' with certificate against {context.authority}")
        return await _acquire(context, audience, certificate)


class FunctionCredentialResolver(CredentialResolver):
    """Adapts an ``async def fn(client_id, audience, context)`` to a resolver."""

    def __init__(self, function: AuthenticateFunction):
        self._function = function

    async def authenticate(self, client_id: str, audience: str, context: AuthenticationContext) -> TokenResult:
        try:
            return await self._function(client_id, audience, context)
        except AuthenticationFailedError:
            raise
        except Exception as e:
            raise AuthenticationFailedError(
                f"Custom authentication failed for client '{client_id}' (audience {audience}): {e}",
                client_id=client_id,
                audience=audience,
            ) from e


def static_certificate(certificate: ClientAssertionCertificate) -> CertificateSource:
    """Return a certificate source that always yields ``certificate``."""

    def source(client_id: str) -> ClientAssertionCertificate:
        return certificate

    return source


def certificate_from_file(file_path: str | Path, password: str | None = None) -> CertificateSource:
    """Return a certificate source that reads the file on every call.

    The path supports ``~`` and ``$VAR`` expansion. Because the file is
    re-read per authentication, replacing it on disk rotates the
    certificate without rebuilding the provider.

    Args:
        file_path: Path to a PFX/PEM file
        password: Optional password for the certificate

    Returns:
        Certificate source usable with CertificateCredentialResolver
    """
    path_obj = Path(os.path.expanduser(os.path.expandvars(str(file_path))))

    def source(client_id: str) -> ClientAssertionCertificate:
        try:
            data = path_obj.read_bytes()
        except FileNotFoundError:
            raise CertificateResolutionError(f"Certificate file not found: {path_obj}", client_id=client_id) from None
        except PermissionError:
            raise CertificateResolutionError(
                f"Permission denied reading certificate file: {path_obj}", client_id=client_id
            ) from None
        except OSError as e:
            raise CertificateResolutionError(
                f"Error reading certificate file {path_obj}: {e}", client_id=client_id
            ) from e

        logger.debug(f"Loaded certificate for client '{client_id}' from file: {path_obj} (***)")
        return ClientAssertionCertificate(client_id=client_id, certificate=CertificateMaterial(data, password))

    return source
