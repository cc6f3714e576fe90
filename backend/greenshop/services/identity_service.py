"""
Identity Service

Resolves the caller of a protected endpoint to a Clerk user id and email.

IdentityProvider is the capability interface; ClerkIdentityProvider
implements it with the clerk-backend-api SDK. Routes depend on
api.deps.require_user.
"""
import logging
from typing import List, Optional, Protocol

from clerk_backend_api import Clerk
from clerk_backend_api.security.types import AuthenticateRequestOptions
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from ..exceptions import AuthenticationError, IdentityError

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Verifies request credentials and looks up user profiles."""

    async def authenticate(self, request: Request) -> str: ...

    async def get_primary_email(self, user_id: str) -> Optional[str]: ...


class ClerkIdentityProvider:
    """
    Clerk-backed identity provider.

    Session tokens are verified locally against Clerk's JWKS by
    authenticate_request; user profiles come from the Backend API.
    """

    def __init__(
        self,
        secret_key: str,
        authorized_parties: Optional[List[str]] = None,
        timeout: float = 10.0
    ):
        if not secret_key:
            raise RuntimeError("CLERK_SECRET_KEY is not configured")
        self._secret_key = secret_key
        self._authorized_parties = authorized_parties or None
        self._clerk = Clerk(bearer_auth=secret_key, timeout_ms=int(timeout * 1000))
        logger.info(f"Clerk initialized, secret key: {secret_key[:8]}...")

    async def authenticate(self, request: Request) -> str:
        """
        Verify the bearer token (or session cookie) of the request.

        Returns:
            Clerk user id (token "sub" claim)

        Raises:
            AuthenticationError: Missing, expired or invalid credential
        """
        options = AuthenticateRequestOptions(
            secret_key=self._secret_key,
            authorized_parties=self._authorized_parties,
        )
        # authenticate_request may fetch JWKS over the network
        state = await run_in_threadpool(self._clerk.authenticate_request, request, options)

        if not state.is_signed_in:
            reason = str(state.reason) if state.reason else "invalid session"
            logger.info(f"Authentication rejected: {reason}")
            raise AuthenticationError(details={"reason": reason})

        user_id = (state.payload or {}).get("sub")
        if not user_id:
            raise AuthenticationError(details={"reason": "token has no subject"})
        return user_id

    async def get_primary_email(self, user_id: str) -> Optional[str]:
        """
        First email address of a Clerk user, or None.

        Raises:
            IdentityError: Clerk lookup failed
        """
        try:
            user = await self._clerk.users.get_async(user_id=user_id)
        except Exception as e:
            logger.error(f"Clerk user lookup failed for {user_id}: {e}")
            raise IdentityError(f"Failed to load user profile: {e}") from e

        addresses = (user.email_addresses or []) if user else []
        return addresses[0].email_address if addresses else None
