"""One-time email verification codes.

A code moves NONE -> ISSUED -> CONSUMED | EXPIRED. At most one code per
email exists at any time: issuing a new code deletes the previous one, so an
older code stops working as soon as it is superseded.
"""
import logging
from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.core.config import settings
from menucard.core.security import gen_code
from menucard.core.timeutils import utcnow
from menucard.models.verification import VerificationCode

logger = logging.getLogger(__name__)

async def _replace_code(db: AsyncSession, email: str, code: str) -> None:
    await db.execute(delete(VerificationCode).where(VerificationCode.email == email))
    db.add(
        VerificationCode(
            email=email,
            code=code,
            expires_at=utcnow() + timedelta(minutes=settings.VERIFY_CODE_TTL_MINUTES),
        )
    )
    await db.commit()

async def issue_code(db: AsyncSession, email: str) -> str:
    """Store a fresh code for ``email`` and return it. Commits."""
    code = gen_code(6)
    try:
        await _replace_code(db, email, code)
    except IntegrityError:
        # a concurrent request inserted between our delete and insert; last writer wins
        await db.rollback()
        await _replace_code(db, email, code)
    logger.info("Issued verification code for %s", email)
    return code

async def consume_code(db: AsyncSession, email: str, code: str) -> bool:
    """Delete a matching live code. Does not commit.

    Wrong and expired codes are reported the same way.
    """
    # one statement, so two transactions racing on the same code cannot both match it
    res = await db.execute(
        delete(VerificationCode).where(
            VerificationCode.email == email,
            VerificationCode.code == code,
            VerificationCode.expires_at >= utcnow(),
        )
    )
    return res.rowcount == 1

async def purge_expired_codes(db: AsyncSession) -> int:
    res = await db.execute(delete(VerificationCode).where(VerificationCode.expires_at < utcnow()))
    return res.rowcount or 0
