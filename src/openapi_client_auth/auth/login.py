"""One-shot login that returns a ready-to-use token provider.

A single :class:`LoginOptions` object covers every combination of
credential kind (secret, certificate, certificate source, custom resolver),
service settings (default or explicit) and token cache (shared or explicit).

Example:
    ```python
    from openapi_client_auth.auth import ClientSecretCredential, LoginOptions, login_silent

    provider = await login_silent(
        LoginOptions(
            domain="contoso.onmicrosoft.com",
            credential=ClientSecretCredential("my-app-id", secret),
            identity_client=identity_client,
        )
    )
    ```
"""

import logging
from dataclasses import dataclass, field

from openapi_client_auth.auth.authority import IdentityClient
from openapi_client_auth.auth.environment import SettingResolver
from openapi_client_auth.auth.exceptions import CredentialNotFoundError, InvalidArgumentError
from openapi_client_auth.auth.models import (
    AuthenticationContext,
    ClientAssertionCertificate,
    ClientSecretCredential,
    ServiceSettings,
    TokenCache,
)
from openapi_client_auth.auth.provider import ApplicationTokenProvider, Clock, authenticate
from openapi_client_auth.auth.resolvers import (
    CertificateCredentialResolver,
    CertificateSource,
    CredentialResolver,
    SecretCredentialResolver,
    certificate_from_file,
    static_certificate,
)

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "OPENAPI_AUTH_"

LoginCredential = ClientSecretCredential | ClientAssertionCertificate | CredentialResolver | CertificateSource


@dataclass(frozen=True)
class LoginOptions:
    """Everything needed to log an application in.

    Attributes:
        domain: Tenant/domain appended to the authority endpoint
        credential: Client secret, certificate, certificate source or custom resolver
        identity_client: Client that performs the token exchange
        client_id: Application id. Taken from the credential for secrets and
            certificates; required for certificate sources and custom resolvers.
        settings: Authority endpoint and audience; None means ``ServiceSettings.AZURE``
        cache: Token cache for the identity client; None means ``TokenCache.default_shared()``
    """

    domain: str
    credential: LoginCredential = field(repr=False)
    identity_client: IdentityClient = field(repr=False)
    client_id: str | None = None
    settings: ServiceSettings | None = None
    cache: TokenCache | None = field(default=None, repr=False)


def _build_resolver(options: LoginOptions) -> tuple[str, CredentialResolver]:
    credential = options.credential

    if isinstance(credential, ClientSecretCredential | ClientAssertionCertificate):
        if options.client_id and options.client_id != credential.client_id:
            raise InvalidArgumentError(
                "client_id",
                f"client_id '{options.client_id}' does not match credential client id '{credential.client_id}'",
            )
        if isinstance(credential, ClientSecretCredential):
            resolver: CredentialResolver = SecretCredentialResolver(credential)
        else:
            resolver = CertificateCredentialResolver(static_certificate(credential))
        client_id = credential.client_id
    elif isinstance(credential, CredentialResolver):
        resolver = credential
        client_id = options.client_id
    elif callable(credential):
        resolver = CertificateCredentialResolver(credential)
        client_id = options.client_id
    else:
        raise InvalidArgumentError("credential")

    if not client_id or not client_id.strip():
        raise InvalidArgumentError("client_id")
    return client_id, resolver


async def login_silent(
    options: LoginOptions,
    *,
    clock: Clock | None = None,
    timeout: float | None = None,
) -> ApplicationTokenProvider:
    """Authenticate once and return a provider holding the issued token.

    Args:
        options: Login configuration
        clock: Clock passed on to the provider
        timeout: Seconds allowed for the authority call

    Returns:
        ApplicationTokenProvider whose first header needs no network call

    Raises:
        InvalidArgumentError: If the options are incomplete
        AuthenticationFailedError: If the authority does not issue a token
    """
    if not options.domain or not options.domain.strip():
        raise InvalidArgumentError("domain")
    if options.identity_client is None:
        raise InvalidArgumentError("identity_client")

    client_id, resolver = _build_resolver(options)
    settings = options.settings or ServiceSettings.AZURE
    cache = options.cache if options.cache is not None else TokenCache.default_shared()

    context = AuthenticationContext.for_domain(options.domain, settings, options.identity_client, cache)
    audience = settings.token_audience

    logger.debug(f"Logging in client '{client_id}' at {context.authority} for audience {audience}")
    result = await authenticate(resolver, client_id, audience, context, timeout=timeout)
    logger.info(f"Logged in client '{client_id}', token valid until {result.expires_on.isoformat()}")

    return ApplicationTokenProvider(context, audience, client_id, resolver, result, clock=clock)


def login_options_from_env(
    identity_client: IdentityClient,
    *,
    prefix: str = DEFAULT_ENV_PREFIX,
    resolver: SettingResolver | None = None,
    cache: TokenCache | None = None,
) -> LoginOptions:
    """Build login options from environment variables and .env files.

    Variables (shown with the default prefix):
        OPENAPI_AUTH_DOMAIN: Tenant/domain (required)
        OPENAPI_AUTH_CLIENT_ID: Application id (required)
        OPENAPI_AUTH_CLIENT_SECRET or OPENAPI_AUTH_CLIENT_SECRET_FILE: Client secret
        OPENAPI_AUTH_CERTIFICATE_FILE, OPENAPI_AUTH_CERTIFICATE_PASSWORD: Certificate
            used when no secret is configured
        OPENAPI_AUTH_AUTHORITY, OPENAPI_AUTH_AUDIENCE, OPENAPI_AUTH_VALIDATE_AUTHORITY:
            Override the Azure defaults

    Raises:
        CredentialNotFoundError: If a required setting or every credential is missing
    """
    resolver = resolver or SettingResolver()

    domain = resolver.resolve(env_var_name=f"{prefix}DOMAIN", required=True, mask_in_logs=False)
    client_id = resolver.resolve(env_var_name=f"{prefix}CLIENT_ID", required=True, mask_in_logs=False)

    credential: LoginCredential
    secret = resolver.resolve(env_var_name=f"{prefix}CLIENT_SECRET") or resolver.resolve_from_file(
        env_var_name=f"{prefix}CLIENT_SECRET_FILE"
    )
    certificate_file = resolver.resolve(env_var_name=f"{prefix}CERTIFICATE_FILE", mask_in_logs=False)
    if secret:
        credential = ClientSecretCredential(client_id, secret)
    elif certificate_file:
        password = resolver.resolve(env_var_name=f"{prefix}CERTIFICATE_PASSWORD")
        credential = certificate_from_file(certificate_file, password=password)
    else:
        raise CredentialNotFoundError(
            f"No client secret or certificate configured (checked env vars: {prefix}CLIENT_SECRET, "
            f"{prefix}CLIENT_SECRET_FILE, {prefix}CERTIFICATE_FILE)",
            env_var_name=f"{prefix}CLIENT_SECRET",
        )

    authority = resolver.resolve(env_var_name=f"{prefix}AUTHORITY", mask_in_logs=False)
    audience = resolver.resolve(env_var_name=f"{prefix}AUDIENCE", mask_in_logs=False)
    validate = resolver.resolve_bool(
        env_var_name=f"{prefix}VALIDATE_AUTHORITY", default=ServiceSettings.AZURE.validate_authority
    )

    settings = None
    if authority or audience or validate != ServiceSettings.AZURE.validate_authority:
        settings = ServiceSettings(
            authentication_endpoint=authority or ServiceSettings.AZURE.authentication_endpoint,
            token_audience=audience or ServiceSettings.AZURE.token_audience,
            validate_authority=validate,
        )

    return LoginOptions(
        domain=domain,
        credential=credential,
        identity_client=identity_client,
        client_id=client_id,
        settings=settings,
        cache=cache,
    )
