import logging

from menucard.db.session import async_session
from menucard.services.sessions import purge_expired_sessions
from menucard.services.verification import purge_expired_codes

logger = logging.getLogger(__name__)

async def purge_expired(db) -> tuple[int, int]:
    codes = await purge_expired_codes(db)
    sessions = await purge_expired_sessions(db)
    await db.commit()
    return codes, sessions

async def run_cleanup() -> None:
    async with async_session() as db:
        codes, sessions = await purge_expired(db)
    logger.info("Cleanup removed %d expired codes and %d expired sessions", codes, sessions)
