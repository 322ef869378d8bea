"""Custom exceptions for token acquisition and credential configuration.

This module defines exceptions used throughout the authentication system:
configuration problems detected before any network call, and failures of
the identity authority while acquiring or refreshing a token.

Example:
    ```python
    from openapi_client_auth.auth.exceptions import AuthenticationFailedError

    try:
        header = await provider.get_authorization_header()
    except AuthenticationFailedError as e:
        print(f"Token refresh failed for {e.client_id}: {e.__cause__}")
    ```
"""


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required setting cannot be resolved.

    This exception is raised when a login setting is marked as required
    but cannot be found in any of the configured sources.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).

    Example:
        ```python
        try:
            options = login_options_from_env(identity_client)
        except CredentialNotFoundError as e:
            print(f"Missing setting: {e.env_var_name}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        """Initialize CredentialNotFoundError.

        Args:
            message: Error message describing what setting is missing.
            env_var_name: Optional environment variable name for reference.
        """
        super().__init__(message)
        self.env_var_name = env_var_name


class InvalidArgumentError(CredentialError, ValueError):
    """Raised when a token provider or login is configured with a missing value.

    Construction-time only; never retried.

    Attributes:
        argument_name: Name of the offending argument.
    """

    def __init__(self, argument_name: str, message: str | None = None):
        super().__init__(message or f"Argument '{argument_name}' must be provided and non-empty")
        self.argument_name = argument_name


class AuthenticationFailedError(CredentialError):
    """Raised when the identity authority does not issue a token.

    The underlying exception (transport error, rejected credential, revoked
    certificate) is chained as ``__cause__``.

    Attributes:
        client_id: Application the token was requested for (if known).
        audience: Token audience that was requested (if known).

    Example:
        ```python
        try:
            header = await provider.get_authorization_header()
        except AuthenticationFailedError as e:
            logger.error(f"Cannot authenticate {e.client_id} for {e.audience}")
        ```
    """

    def __init__(self, message: str, client_id: str | None = None, audience: str | None = None):
        """Initialize AuthenticationFailedError.

        Args:
            message: Error message describing the failure.
            client_id: Optional application id for diagnostics.
            audience: Optional token audience for diagnostics.
        """
        super().__init__(message)
        self.client_id = client_id
        self.audience = audience


class CertificateResolutionError(AuthenticationFailedError):
    """Raised when a certificate source fails to produce certificate material.

    Handled exactly like :class:`AuthenticationFailedError` by callers.
    """

    pass
