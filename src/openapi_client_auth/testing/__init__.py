"""Testing utilities for code that uses application tokens.

Provides test doubles that stand in for the identity authority and the
system clock, so token expiry can be exercised without network access or
waiting.

Example:
    ```python
    from openapi_client_auth.testing import FakeIdentityClient, ManualClock


    async def test_refreshes_when_stale():
        clock = ManualClock()
        client = FakeIdentityClient()
        client.queue_token("tok2", expires_in=timedelta(hours=1), now=clock())
        ...
        clock.advance(minutes=6)
    ```
"""

import asyncio
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from openapi_client_auth.auth.models import (
    AuthenticationContext,
    ClientAssertionCertificate,
    ClientSecretCredential,
    TokenResult,
)
from openapi_client_auth.auth.resolvers import CredentialResolver


class ManualClock:
    """Clock that only moves when told to. Call it to read the time."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> datetime:
        """Move forward by ``delta`` or by ``timedelta(**kwargs)``."""
        self.now += delta if delta is not None else timedelta(**kwargs)
        return self.now


@dataclass(frozen=True)
class AcquireTokenCall:
    """One recorded call to :meth:`FakeIdentityClient.acquire_token`."""

    authority: str
    audience: str
    credential: ClientSecretCredential | ClientAssertionCertificate


class FakeIdentityClient:
    """In-memory identity client that returns or raises queued outcomes.

    Args:
        delay: Seconds to sleep inside each call (useful for concurrency tests)
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls: list[AcquireTokenCall] = []
        self._outcomes: deque[TokenResult | BaseException] = deque()

    def queue_token(
        self,
        access_token: str,
        *,
        expires_on: datetime | None = None,
        expires_in: timedelta = timedelta(hours=1),
        now: datetime | None = None,
        token_type: str = "Bearer",
    ) -> TokenResult:
        if expires_on is None:
            expires_on = (now or datetime.now(UTC)) + expires_in
        result = TokenResult(access_token=access_token, token_type=token_type, expires_on=expires_on)
        self._outcomes.append(result)
        return result

    def queue_error(self, error: BaseException) -> None:
        self._outcomes.append(error)

    async def acquire_token(
        self,
        context: AuthenticationContext,
        audience: str,
        credential: ClientSecretCredential | ClientAssertionCertificate,
    ) -> TokenResult:
        self.calls.append(AcquireTokenCall(context.authority, audience, credential))
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self._outcomes:
            raise RuntimeError("FakeIdentityClient has no queued outcome")
        outcome = self._outcomes.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingCredentialResolver(CredentialResolver):
    """Custom resolver that returns queued outcomes and counts calls."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.call_count = 0
        self._outcomes: deque[TokenResult | BaseException] = deque()

    def queue(self, outcome: TokenResult | BaseException) -> None:
        self._outcomes.append(outcome)

    async def authenticate(self, client_id: str, audience: str, context: AuthenticationContext) -> TokenResult:
        self.call_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self._outcomes.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


__all__ = [
    "AcquireTokenCall",
    "FakeIdentityClient",
    "ManualClock",
    "RecordingCredentialResolver",
]
