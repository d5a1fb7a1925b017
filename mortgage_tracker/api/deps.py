"""FastAPI dependency injection."""

from collections.abc import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mortgage_tracker.data.auth import AuthClient, AuthUser
from mortgage_tracker.data.repository import Database, MortgageRepository


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def get_repository(session: AsyncSession = Depends(get_db)) -> MortgageRepository:
    return MortgageRepository(session)


def get_auth_client(request: Request) -> AuthClient:
    return request.app.state.auth_client


async def get_current_user(
    authorization: str | None = Header(None),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthUser:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    user = await auth.get_user(authorization.split(" ", 1)[1])
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user
