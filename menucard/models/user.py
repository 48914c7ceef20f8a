from datetime import datetime

from sqlalchemy import Boolean, String, DateTime, false
from sqlalchemy.orm import Mapped, mapped_column, relationship
from menucard.db.session import Base, BigIntPK
from menucard.core.timeutils import utcnow

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    restaurants = relationship("Restaurant", back_populates="owner", passive_deletes=True)
