from urllib.parse import urlencode

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from menucard.core.config import settings
from menucard.core.error_codes import ErrorCode
from menucard.core.exceptions import raise_not_found
from menucard.models.category import Category
from menucard.models.dish import Dish
from menucard.models.restaurant import Restaurant
from menucard.schemas.menu import CategoryRef
from menucard.schemas.public import MenuCategoryOut, MenuDishOut, MenuOut, MenuRestaurantOut
from menucard.schemas.restaurant import ShareLinksOut

async def get_public_menu(db: AsyncSession, restaurant_id: int) -> MenuOut:
    """Read-only nested view: restaurant -> categories (by name) -> dishes."""
    res = await db.execute(
        select(Restaurant)
        .options(
            selectinload(Restaurant.categories)
            .selectinload(Category.dishes)
            .selectinload(Dish.categories)
        )
        .where(Restaurant.id == restaurant_id)
    )
    restaurant = res.scalar_one_or_none()
    if restaurant is None:
        raise_not_found(ErrorCode.RESTAURANT_NOT_FOUND, "Restaurant not found")

    return MenuOut(
        restaurant=MenuRestaurantOut(id=restaurant.id, name=restaurant.name, location=restaurant.location),
        categories=[
            MenuCategoryOut(
                id=category.id,
                name=category.name,
                dishes=[
                    MenuDishOut(
                        id=dish.id,
                        name=dish.name,
                        description=dish.description,
                        image_url=dish.image_url,
                        spice_level=dish.spice_level,
                        price=dish.price,
                        is_vegetarian=dish.is_vegetarian,
                        categories=[CategoryRef.model_validate(c) for c in dish.categories],
                    )
                    for dish in category.dishes
                ],
            )
            for category in restaurant.categories
        ],
    )

def share_links(restaurant_id: int) -> ShareLinksOut:
    menu_url = f"{settings.PUBLIC_MENU_BASE_URL.rstrip('/')}/menu/{restaurant_id}"
    # the QR image itself is rendered by the external service
    qr_code_url = f"{settings.QR_SERVICE_URL}?{urlencode({'size': '256x256', 'data': menu_url})}"
    return ShareLinksOut(menu_url=menu_url, qr_code_url=qr_code_url)
