from datetime import datetime

from sqlalchemy import String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from menucard.db.session import Base, BigIntPK
from menucard.core.timeutils import utcnow

class VerificationCode(Base):
    __tablename__ = "verification_codes"
    __table_args__ = (UniqueConstraint("email", name="uq_verification_codes_email_single_pending"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(8), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
