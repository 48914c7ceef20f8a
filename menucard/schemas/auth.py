from pydantic import BaseModel, Field, EmailStr
from menucard.schemas.user import UserOut

class RequestCodeIn(BaseModel):
    email: EmailStr
    full_name: str = Field(min_length=1, max_length=200)
    country: str = Field(min_length=1, max_length=120)

class LoginIn(BaseModel):
    email: EmailStr

class VerifyCodeIn(BaseModel):
    email: EmailStr
    code: str = Field(pattern=r"^\d{6}$")

class VerifyCodeOut(BaseModel):
    message: str
    user: UserOut
