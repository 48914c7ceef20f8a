from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.db.session import get_db
from menucard.schemas.openapi import ERROR_RESPONSES
from menucard.schemas.public import MenuOut
from menucard.services.menu import get_public_menu

router = APIRouter(prefix="/public", tags=["public"])

@router.get("/restaurants/{rid}/menu", response_model=MenuOut, responses=ERROR_RESPONSES)
async def get_menu(rid: int, db: AsyncSession = Depends(get_db)):
    return await get_public_menu(db, rid)
