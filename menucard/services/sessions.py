import logging
from datetime import timedelta

from fastapi import Response
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.core.config import settings
from menucard.core.security import gen_session_token
from menucard.core.timeutils import utcnow
from menucard.models.session import UserSession

logger = logging.getLogger(__name__)

def create_session(db: AsyncSession, user_id: int) -> UserSession:
    """Add a new session to the unit of work; the caller commits."""
    session = UserSession(
        user_id=user_id,
        token=gen_session_token(),
        expires_at=utcnow() + timedelta(days=settings.SESSION_TTL_DAYS),
    )
    db.add(session)
    return session

async def resolve_session(db: AsyncSession, token: str | None) -> int | None:
    # missing, unknown and expired tokens all take the same query path
    res = await db.execute(
        select(UserSession.user_id).where(
            UserSession.token == (token or ""),
            UserSession.expires_at >= utcnow(),
        )
    )
    return res.scalar_one_or_none()

async def revoke_session(db: AsyncSession, token: str) -> None:
    res = await db.execute(delete(UserSession).where(UserSession.token == token))
    await db.commit()
    if res.rowcount:
        logger.info("Revoked session")

async def purge_expired_sessions(db: AsyncSession) -> int:
    res = await db.execute(delete(UserSession).where(UserSession.expires_at < utcnow()))
    return res.rowcount or 0

def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
