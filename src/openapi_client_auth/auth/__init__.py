"""Application token acquisition and caching for OpenAPI clients.

This module provides:
- Cached application tokens refreshed shortly before they expire
- Pluggable credential resolvers (client secret, certificate, custom)
- One-shot login from a single options object or from the environment

Example:
    ```python
    from openapi_client_auth.auth import ClientSecretCredential, LoginOptions, login_silent

    provider = await login_silent(
        LoginOptions(
            domain="contoso.onmicrosoft.com",
            credential=ClientSecretCredential("my-app-id", "my-secret"),
            identity_client=identity_client,
        )
    )
    header = await provider.get_authorization_header()
    ```
"""

from openapi_client_auth.auth.authority import IdentityClient
from openapi_client_auth.auth.environment import SettingResolver
from openapi_client_auth.auth.exceptions import (
    AuthenticationFailedError,
    CertificateResolutionError,
    CredentialError,
    CredentialNotFoundError,
    InvalidArgumentError,
)
from openapi_client_auth.auth.login import LoginOptions, login_options_from_env, login_silent
from openapi_client_auth.auth.models import (
    AuthenticationContext,
    AuthorizationHeader,
    CertificateMaterial,
    ClientAssertionCertificate,
    ClientSecretCredential,
    ServiceSettings,
    TokenCache,
    TokenResult,
)
from openapi_client_auth.auth.provider import ApplicationTokenProvider, TokenProvider
from openapi_client_auth.auth.resolvers import (
    CertificateCredentialResolver,
    CredentialResolver,
    FunctionCredentialResolver,
    SecretCredentialResolver,
    certificate_from_file,
    static_certificate,
)

__all__ = [
    "ApplicationTokenProvider",
    "AuthenticationContext",
    "AuthenticationFailedError",
    "AuthorizationHeader",
    "CertificateCredentialResolver",
    "CertificateMaterial",
    "CertificateResolutionError",
    "ClientAssertionCertificate",
    "ClientSecretCredential",
    "CredentialError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "FunctionCredentialResolver",
    "IdentityClient",
    "InvalidArgumentError",
    "LoginOptions",
    "SecretCredentialResolver",
    "ServiceSettings",
    "SettingResolver",
    "TokenCache",
    "TokenProvider",
    "TokenResult",
    "certificate_from_file",
    "login_options_from_env",
    "login_silent",
    "static_certificate",
]
