"""
Shared FastAPI dependencies.
"""
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_db(ctx: AppContext = Depends(get_context)) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions in FastAPI.

    Usage:
        @router.get("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with ctx.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def require_user(request: Request, ctx: AppContext = Depends(get_context)) -> str:
    """
    Authenticated user id for the current request.

    Raises:
        AuthenticationError: No valid credential (401)
    """
    user_id = await ctx.identity.authenticate(request)
    request.state.user_id = user_id
    return user_id
