from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.core.config import settings
from menucard.core.exceptions import raise_unauthorized
from menucard.db.session import get_db
from menucard.models.user import User
from menucard.services.email import Mailer
from menucard.services.sessions import resolve_session

@dataclass(frozen=True)
class Identity:
    user_id: int

def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)

async def get_current_identity(
    db: AsyncSession = Depends(get_db),
    token: str | None = Depends(get_session_token),
) -> Identity:
    # Identity only ever comes from the session cookie, never from the payload
    user_id = await resolve_session(db, token)
    if user_id is None:
        raise_unauthorized()
    return Identity(user_id=user_id)

async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await db.get(User, identity.user_id)
    if not user:
        raise_unauthorized()
    return user

def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
