from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from menucard.api.deps import Identity, get_current_identity
from menucard.db.session import get_db
from menucard.models.dish import Dish
from menucard.models.restaurant import Restaurant
from menucard.schemas.common import Message
from menucard.schemas.openapi import ERROR_RESPONSES
from menucard.schemas.restaurant import (
    RestaurantCreate,
    RestaurantDetailOut,
    RestaurantOut,
    RestaurantUpdate,
    ShareLinksOut,
)
from menucard.services.menu import share_links
from menucard.services.ownership import get_owned_restaurant

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

@router.post("", response_model=RestaurantOut, responses=ERROR_RESPONSES)
async def create_restaurant(
    data: RestaurantCreate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    r = Restaurant(name=data.name, location=data.location, owner_id=me.user_id)
    db.add(r)
    await db.commit()
    return r

@router.get("", response_model=list[RestaurantOut], responses=ERROR_RESPONSES)
async def list_restaurants(me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    res = await db.execute(
        select(Restaurant)
        .where(Restaurant.owner_id == me.user_id)
        .order_by(Restaurant.created_at.desc(), Restaurant.id.desc())
    )
    return list(res.scalars())

@router.get("/{rid}", response_model=RestaurantDetailOut, responses=ERROR_RESPONSES)
async def get_restaurant(rid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    # categories by name, dishes newest first, each dish with its categories
    return await get_owned_restaurant(
        db,
        rid,
        me.user_id,
        selectinload(Restaurant.categories),
        selectinload(Restaurant.dishes).selectinload(Dish.categories),
    )

@router.patch("/{rid}", response_model=RestaurantOut, responses=ERROR_RESPONSES)
async def update_restaurant(
    rid: int,
    data: RestaurantUpdate,
    me: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    r = await get_owned_restaurant(db, rid, me.user_id)
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(r, k, v)
    await db.commit()
    return r

@router.delete("/{rid}", response_model=Message, responses=ERROR_RESPONSES)
async def delete_restaurant(rid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    r = await get_owned_restaurant(db, rid, me.user_id)
    # categories, dishes and their links go with it (ON DELETE CASCADE)
    await db.execute(delete(Restaurant).where(Restaurant.id == r.id))
    await db.commit()
    return {"message": "Deleted"}

@router.get("/{rid}/share", response_model=ShareLinksOut, responses=ERROR_RESPONSES)
async def get_share_links(rid: int, me: Identity = Depends(get_current_identity), db: AsyncSession = Depends(get_db)):
    r = await get_owned_restaurant(db, rid, me.user_id)
    return share_links(r.id)
