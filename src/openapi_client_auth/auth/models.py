"""Token, credential and authority configuration models."""

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, ClassVar

from openapi_client_auth.auth.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from openapi_client_auth.auth.authority import IdentityClient

# Lifetime assumed when a token response carries no expiry information
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600


@dataclass(frozen=True)
class TokenResult:
    """Result of one authentication round trip.

    The three fields are always replaced together; a provider never holds an
    access token paired with another token's type or expiry.

    Raises:
        InvalidArgumentError: If ``expires_on`` has no UTC offset
    """

    access_token: str = field(repr=False)
    token_type: str
    expires_on: datetime

    def __post_init__(self) -> None:
        if self.expires_on.tzinfo is None or self.expires_on.utcoffset() is None:
            raise InvalidArgumentError("expires_on", f"expires_on must be timezone-aware, got {self.expires_on!r}")

    @classmethod
    def from_response(cls, data: dict[str, Any], now: datetime | None = None) -> "TokenResult":
        """Build a token result from an OAuth2 token endpoint payload.

        Supports both ``expires_on`` (epoch seconds) and ``expires_in``
        (seconds from now) styles.

        Args:
            data: Decoded JSON token response
            now: Reference time for ``expires_in`` (defaults to current UTC time)

        Returns:
            TokenResult instance

        Raises:
            KeyError: If the payload has no ``access_token``
        """
        if "expires_on" in data:
            expires_on = datetime.fromtimestamp(int(data["expires_on"]), tz=UTC)
        else:
            now = now or datetime.now(UTC)
            expires_in = int(data.get("expires_in", DEFAULT_TOKEN_LIFETIME_SECONDS))
            expires_on = now + timedelta(seconds=expires_in)

        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type", "Bearer"),
            expires_on=expires_on,
        )


@dataclass(frozen=True)
class AuthorizationHeader:
    """Scheme and credentials for an ``Authorization`` request header."""

    scheme: str
    value: str = field(repr=False)

    def __str__(self) -> str:
        return f"{self.scheme} {self.value}"

    def as_header(self) -> tuple[str, str]:
        """Return the ``(name, value)`` pair to set on an outgoing request."""
        return "Authorization", str(self)


@dataclass(frozen=True)
class ServiceSettings:
    """Identity authority endpoint and the audience tokens are requested for."""

    authentication_endpoint: str
    token_audience: str
    validate_authority: bool = True

    AZURE: ClassVar["ServiceSettings"]
    AZURE_CHINA: ClassVar["ServiceSettings"]

    def authority_for(self, domain: str) -> str:
        """Return the authority URL for a tenant/domain."""
        endpoint = self.authentication_endpoint
        if not endpoint.endswith("/"):
            endpoint += "/"
        return endpoint + domain


ServiceSettings.AZURE = ServiceSettings(
    authentication_endpoint="https://login.windows.net/",
    token_audience="https://management.core.windows.net/",
)
ServiceSettings.AZURE_CHINA = ServiceSettings(
    authentication_endpoint="https://login.chinacloudapi.cn/",
    token_audience="https://management.core.chinacloudapi.cn/",
)


class TokenCache:
    """Token cache handle owned by the identity client.

    The token provider never reads it; it is handed to the identity client
    through :class:`AuthenticationContext`. Instances are thread-safe so one
    cache can be shared by every provider in the process.
    """

    _default_shared: ClassVar["TokenCache | None"] = None
    _default_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    @classmethod
    def default_shared(cls) -> "TokenCache":
        """Get or create the process-wide shared cache."""
        if cls._default_shared is None:
            with cls._default_lock:
                if cls._default_shared is None:
                    cls._default_shared = cls()
        return cls._default_shared

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@dataclass(frozen=True)
class AuthenticationContext:
    """Handle on one identity authority.

    Attributes:
        authority: Authority URL (endpoint plus tenant/domain)
        identity_client: Client that performs the token exchange
        validate_authority: Whether the identity client must validate the authority
        token_cache: Cache handle for the identity client; None means its default
    """

    authority: str
    identity_client: "IdentityClient" = field(repr=False)
    validate_authority: bool = True
    token_cache: TokenCache | None = field(default=None, repr=False)

    @classmethod
    def for_domain(
        cls,
        domain: str,
        settings: ServiceSettings,
        identity_client: "IdentityClient",
        cache: TokenCache | None = None,
    ) -> "AuthenticationContext":
        """Build the context for ``domain`` under the given service settings."""
        return cls(
            authority=settings.authority_for(domain),
            identity_client=identity_client,
            validate_authority=settings.validate_authority,
            token_cache=cache,
        )


@dataclass(frozen=True)
class ClientSecretCredential:
    """Application id and shared secret."""

    client_id: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class CertificateMaterial:
    """Raw certificate bytes (PFX/PEM) and optional password.

    Parsing and signing are the identity client's concern.
    """

    data: bytes = field(repr=False)
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class ClientAssertionCertificate:
    """Application id and the certificate used to sign its client assertion."""

    client_id: str
    certificate: CertificateMaterial
