from datetime import datetime

from sqlalchemy import BigInteger, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from menucard.db.session import Base, BigIntPK
from menucard.core.timeutils import utcnow

class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    restaurant = relationship("Restaurant", back_populates="categories")
    dishes = relationship(
        "Dish",
        secondary="dish_categories",
        back_populates="categories",
        passive_deletes=True,
        order_by="Dish.id",
    )
