"""Owner-scoped lookups for restaurants, categories and dishes.

Every lookup filters on the owning user in the query itself. A row that
exists but belongs to someone else is indistinguishable from a missing row:
both raise the same 404.
"""
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from menucard.core.error_codes import ErrorCode
from menucard.core.exceptions import raise_error, raise_not_found
from menucard.models.category import Category
from menucard.models.dish import Dish
from menucard.models.restaurant import Restaurant

async def get_owned_restaurant(db: AsyncSession, restaurant_id: int, owner_id: int, *options) -> Restaurant:
    res = await db.execute(
        select(Restaurant)
        .options(*options)
        .where(Restaurant.id == restaurant_id, Restaurant.owner_id == owner_id)
    )
    restaurant = res.scalar_one_or_none()
    if restaurant is None:
        raise_not_found(ErrorCode.RESTAURANT_NOT_FOUND, "Restaurant not found")
    return restaurant

async def get_owned_category(db: AsyncSession, category_id: int, owner_id: int) -> Category:
    res = await db.execute(
        select(Category)
        .join(Restaurant, Category.restaurant_id == Restaurant.id)
        .where(Category.id == category_id, Restaurant.owner_id == owner_id)
    )
    category = res.scalar_one_or_none()
    if category is None:
        raise_not_found(ErrorCode.CATEGORY_NOT_FOUND, "Category not found")
    return category

async def get_owned_dish(db: AsyncSession, dish_id: int, owner_id: int) -> Dish:
    res = await db.execute(
        select(Dish)
        .options(selectinload(Dish.categories))
        .join(Restaurant, Dish.restaurant_id == Restaurant.id)
        .where(Dish.id == dish_id, Restaurant.owner_id == owner_id)
    )
    dish = res.scalar_one_or_none()
    if dish is None:
        raise_not_found(ErrorCode.DISH_NOT_FOUND, "Dish not found")
    return dish

async def load_categories_for_restaurant(
    db: AsyncSession, restaurant_id: int, category_ids: list[int]
) -> list[Category]:
    """Load the referenced categories, all of which must belong to ``restaurant_id``.

    Any foreign or unknown id rejects the whole set, so callers can validate
    before writing anything.
    """
    wanted = set(category_ids)
    if not wanted:
        return []
    res = await db.execute(
        select(Category)
        .where(Category.id.in_(wanted), Category.restaurant_id == restaurant_id)
        .order_by(Category.name)
    )
    categories = list(res.scalars())
    if len(categories) != len(wanted):
        raise_error(
            ErrorCode.CATEGORY_RESTAURANT_MISMATCH,
            status.HTTP_400_BAD_REQUEST,
            "Some categories do not belong to this restaurant",
        )
    return categories
