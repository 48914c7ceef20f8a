from datetime import datetime

from sqlalchemy import (
    BigInteger, Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, SmallInteger, String, Table, Text, true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from menucard.db.session import Base, BigIntPK
from menucard.core.timeutils import utcnow

dish_categories = Table(
    "dish_categories",
    Base.metadata,
    Column("dish_id", BigInteger, ForeignKey("dishes.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", BigInteger, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True),
)

class Dish(Base):
    __tablename__ = "dishes"
    __table_args__ = (
        CheckConstraint("spice_level IS NULL OR (spice_level >= 0 AND spice_level <= 5)", name="ck_dishes_spice_level"),
        CheckConstraint("price IS NULL OR price >= 0", name="ck_dishes_price"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    spice_level: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    restaurant = relationship("Restaurant", back_populates="dishes")
    categories = relationship(
        "Category",
        secondary=dish_categories,
        back_populates="dishes",
        passive_deletes=True,
        order_by="Category.name",
    )
