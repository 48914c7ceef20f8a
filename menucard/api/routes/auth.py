import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from menucard.api.deps import get_current_identity, get_current_user, get_mailer, get_session_token
from menucard.core.error_codes import ErrorCode
from menucard.core.exceptions import raise_error
from menucard.db.session import get_db
from menucard.models.user import User
from menucard.schemas.auth import LoginIn, RequestCodeIn, VerifyCodeIn, VerifyCodeOut
from menucard.schemas.common import Message
from menucard.schemas.openapi import ERROR_RESPONSES
from menucard.schemas.user import UserOut
from menucard.services.email import Mailer
from menucard.services.sessions import clear_session_cookie, create_session, revoke_session, set_session_cookie
from menucard.services.users import register_user
from menucard.services.verification import consume_code, issue_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/request-code", response_model=Message, responses=ERROR_RESPONSES)
async def request_code(
    data: RequestCodeIn,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    # registering again refreshes the profile fields
    await register_user(db, data.email, data.full_name, data.country)

    code = await issue_code(db, data.email)
    background.add_task(mailer.send_verification_code, data.email, code)
    return {"message": "Verification code sent"}


@router.post("/login", response_model=Message, responses=ERROR_RESPONSES)
async def login(
    data: LoginIn,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    res = await db.execute(select(User.id).where(User.email == data.email))
    if res.scalar_one_or_none() is None:
        raise_error(ErrorCode.USER_NOT_FOUND, status.HTTP_404_NOT_FOUND, "User not found. Please register first.")

    code = await issue_code(db, data.email)
    background.add_task(mailer.send_verification_code, data.email, code)
    return {"message": "Verification code sent"}


@router.post("/verify", response_model=VerifyCodeOut, responses=ERROR_RESPONSES)
async def verify_code(data: VerifyCodeIn, response: Response, db: AsyncSession = Depends(get_db)):
    res = await db.execute(select(User).where(User.email == data.email))
    user = res.scalar_one_or_none()
    if not user or not await consume_code(db, data.email, data.code):
        await db.rollback()
        raise_error(ErrorCode.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED, "Invalid or expired verification code")

    # code deletion, verification flag and the new session commit together
    user.email_verified = True
    session = create_session(db, user.id)
    await db.commit()
    logger.info("Created session for user %s", user.id)

    set_session_cookie(response, session.token)
    return VerifyCodeOut(message="Verified", user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut, responses=ERROR_RESPONSES)
async def get_me(current: User = Depends(get_current_user)):
    return current


@router.post("/logout", response_model=Message, responses=ERROR_RESPONSES, dependencies=[Depends(get_current_identity)])
async def logout(
    response: Response,
    db: AsyncSession = Depends(get_db),
    token: str = Depends(get_session_token),
):
    await revoke_session(db, token)
    clear_session_cookie(response)
    return {"message": "Logged out"}
