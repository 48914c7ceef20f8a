import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.models.user import User

logger = logging.getLogger(__name__)

async def _find_user(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()

async def _save_profile(db: AsyncSession, email: str, full_name: str, country: str) -> User:
    user = await _find_user(db, email)
    if user:
        user.full_name = full_name
        user.country = country
    else:
        user = User(email=email, full_name=full_name, country=country, email_verified=False)
        db.add(user)
    await db.commit()
    return user

async def register_user(db: AsyncSession, email: str, full_name: str, country: str) -> User:
    """Create the user for ``email`` or refresh its profile fields. Commits."""
    try:
        return await _save_profile(db, email, full_name, country)
    except IntegrityError:
        # a concurrent first registration inserted the row after our lookup
        await db.rollback()
        logger.info("Concurrent registration for %s, updating existing user", email)
        return await _save_profile(db, email, full_name, country)
