from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from menucard.api.deps import Identity, get_current_identity
from menucard.db.session import get_db
from menucard.models.category import Category
from menucard.models.dish import Dish
from menucard.schemas.common import Message
from menucard.schemas.menu import CategoryCreate, CategoryOut, CategoryUpdate, DishCreate, DishOut, DishUpdate
from menucard.schemas.openapi import ERROR_RESPONSES
from menucard.services.ownership import (
    get_owned_category,
    get_owned_dish,
    get_owned_restaurant,
    load_categories_for_restaurant,
)

router = APIRouter(tags=["menu"])

# ---------- Categories ----------

@router.post("/restaurants/{rid}/categories", response_model=CategoryOut, responses=ERROR_RESPONSES)
async def create_category(
    rid: int,
    data: CategoryCreate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    r = await get_owned_restaurant(db, rid, me.user_id)
    c = Category(name=data.name, restaurant_id=r.id)
    db.add(c)
    await db.commit()
    return c

@router.get("/restaurants/{rid}/categories", response_model=list[CategoryOut], responses=ERROR_RESPONSES)
async def list_categories(rid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    r = await get_owned_restaurant(db, rid, me.user_id)
    res = await db.execute(select(Category).where(Category.restaurant_id == r.id).order_by(Category.name))
    return list(res.scalars())

@router.patch("/categories/{cid}", response_model=CategoryOut, responses=ERROR_RESPONSES)
async def update_category(
    cid: int,
    data: CategoryUpdate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    c = await get_owned_category(db, cid, me.user_id)
    c.name = data.name
    await db.commit()
    return c

@router.delete("/categories/{cid}", response_model=Message, responses=ERROR_RESPONSES)
async def delete_category(cid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    c = await get_owned_category(db, cid, me.user_id)
    # dishes stay, only their links to this category go
    await db.execute(delete(Category).where(Category.id == c.id))
    await db.commit()
    return {"message": "Deleted"}

# ---------- Dishes ----------

@router.post("/restaurants/{rid}/dishes", response_model=DishOut, responses=ERROR_RESPONSES)
async def create_dish(
    rid: int,
    data: DishCreate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    r = await get_owned_restaurant(db, rid, me.user_id)
    categories = await load_categories_for_restaurant(db, r.id, data.category_ids)

    dish = Dish(
        name=data.name,
        description=data.description,
        image_url=str(data.image_url) if data.image_url else None,
        spice_level=data.spice_level,
        price=data.price,
        is_vegetarian=data.is_vegetarian,
        restaurant_id=r.id,
        categories=categories,
    )
    db.add(dish)
    await db.commit()
    return dish

@router.get("/restaurants/{rid}/dishes", response_model=list[DishOut], responses=ERROR_RESPONSES)
async def list_dishes(rid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    r = await get_owned_restaurant(db, rid, me.user_id)
    res = await db.execute(
        select(Dish)
        .options(selectinload(Dish.categories))
        .where(Dish.restaurant_id == r.id)
        .order_by(Dish.created_at.desc(), Dish.id.desc())
    )
    return list(res.scalars())

@router.patch("/dishes/{did}", response_model=DishOut, responses=ERROR_RESPONSES)
async def update_dish(
    did: int,
    data: DishUpdate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    dish = await get_owned_dish(db, did, me.user_id)
    changes = data.model_dump(exclude_unset=True)

    # validate the whole category set before touching anything
    category_ids = changes.pop("category_ids", None)
    categories = None
    if category_ids is not None:
        categories = await load_categories_for_restaurant(db, dish.restaurant_id, category_ids)

    for k, v in changes.items():
        if v is None and k in {"name", "description", "is_vegetarian"}:
            continue
        if k == "image_url" and v is not None:
            v = str(v)
        setattr(dish, k, v)
    if categories is not None:
        dish.categories = categories
    await db.commit()
    return dish

@router.delete("/dishes/{did}", response_model=Message, responses=ERROR_RESPONSES)
async def delete_dish(did: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    dish = await get_owned_dish(db, did, me.user_id)
    await db.execute(delete(Dish).where(Dish.id == dish.id))
    await db.commit()
    return {"message": "Deleted"}
