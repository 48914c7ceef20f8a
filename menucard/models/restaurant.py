from datetime import datetime

from sqlalchemy import BigInteger, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from menucard.db.session import Base, BigIntPK
from menucard.core.timeutils import utcnow

class Restaurant(Base):
    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    owner_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="restaurants")
    categories = relationship(
        "Category",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Category.name",
    )
    dishes = relationship(
        "Dish",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Dish.id.desc()",
    )
