"""Cached application token with transparent refresh.

:class:`ApplicationTokenProvider` holds the last token issued for one
application and hands out ``Authorization`` headers built from it. When the
cached token is within :attr:`ApplicationTokenProvider.EXPIRATION_THRESHOLD`
of expiring, the next header request re-authenticates through the
provider's :class:`~openapi_client_auth.auth.resolvers.CredentialResolver`.

Refresh is lazy: no timers, and a refresh only starts when a caller asks for
a header. Concurrent callers that find the token stale share a single
in-flight authority call and its outcome. The cached token, type and expiry
are swapped as one immutable snapshot.

Example:
    ```python
    provider = ApplicationTokenProvider(context, audience, client_id, resolver, first_result)

    header = await provider.get_authorization_header()
    request.headers["Authorization"] = str(header)
    ```
"""

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Protocol, runtime_checkable

from openapi_client_auth.auth.exceptions import AuthenticationFailedError, InvalidArgumentError
from openapi_client_auth.auth.models import AuthenticationContext, AuthorizationHeader, TokenResult
from openapi_client_auth.auth.resolvers import CredentialResolver

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


async def authenticate(
    resolver: CredentialResolver,
    client_id: str,
    audience: str,
    context: AuthenticationContext,
    *,
    timeout: float | None = None,
) -> TokenResult:
    """Run one resolver call, bounded by ``timeout``.

    Raises:
        AuthenticationFailedError: On any failure, with the original error chained.
            ``client_id`` and ``audience`` are always set.
    """
    try:
        async with asyncio.timeout(timeout):
            result = await resolver.authenticate(client_id, audience, context)
    except AuthenticationFailedError as e:
        if e.client_id is None:
            e.client_id = client_id
        if e.audience is None:
            e.audience = audience
        raise
    except TimeoutError as e:
        reason = f"Timed out after {timeout}s" if timeout is not None else "Timed out"
        raise AuthenticationFailedError(
            f"{reason} acquiring token for client '{client_id}' (audience {audience})",
            client_id=client_id,
            audience=audience,
        ) from e
    except Exception as e:
        raise AuthenticationFailedError(
            f"Error acquiring token for client '{client_id}' (audience {audience}): {e}",
            client_id=client_id,
            audience=audience,
        ) from e

    if not isinstance(result, TokenResult):
        raise AuthenticationFailedError(
            f"Resolver for client '{client_id}' returned {type(result).__name__}, expected TokenResult",
            client_id=client_id,
            audience=audience,
        )
    return result


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that can produce an ``Authorization`` header on demand."""

    async def get_authorization_header(self, *, timeout: float | None = None) -> AuthorizationHeader:
        """Return a header for the cached token, refreshing it first if stale.

        Callers that find the token stale while a refresh is in flight wait
        for that refresh and get its outcome, success or failure. Cancelling
        one waiter does not cancel the shared refresh.

        Args:
            timeout: Seconds allowed for the authority call when this caller
                starts the refresh. Callers joining an in-flight refresh are
                bound by the timeout of the caller that started it.

        Returns:
            AuthorizationHeader built from the current token

        Raises:
            AuthenticationFailedError: If a needed refresh fails or times out.
                The previously cached token is kept.
        """
        token = self._token
        if not self._is_expired(token):
            return AuthorizationHeader(token.token_type, token.access_token)

        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._refresh(timeout))
            task.add_done_callback(self._refresh_finished)
            self._refresh_task = task
        else:
            logger.debug(f"Joining in-flight token refresh for client '{self._client_id}'")

        token = await asyncio.shield(task)
        return AuthorizationHeader(token.token_type, token.access_token)

    def _refresh_finished(self, task: "asyncio.Task[TokenResult]") -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Already logged by _refresh; waiters still receive the error
        if not task.cancelled():
            task.exception()

    async def _refresh(self, timeout: float | None) -> TokenResult:
        logger.debug(
            f"Refreshing token for client '{self._client_id}' "
            f"(audience {self._token_audience}, cached token expires {self._token.expires_on.isoformat()})"
        )

        try:
            result = await authenticate(
                self._resolver, self._client_id, self._token_audience, self._context, timeout=timeout
            )
        except AuthenticationFailedError as e:
            logger.error(f"Failed to refresh token for client '{self._client_id}': {e}")
            raise

        self._token = result
        logger.info(f"Token for client '{self._client_id}' valid until {result.expires_on.isoformat()}")
        return result
