from fastapi import APIRouter, Depends

from menucard.api.deps import get_current_user
from menucard.models.user import User
from menucard.schemas.user import UserOut
from menucard.schemas.openapi import ERROR_RESPONSES

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserOut, responses=ERROR_RESPONSES)
async def get_me(current: User = Depends(get_current_user)):
    return current
