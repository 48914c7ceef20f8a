from pydantic import BaseModel, EmailStr

class UserOut(BaseModel):
    id: int
    email: EmailStr
    full_name: str
    country: str
    email_verified: bool

    class Config:
        from_attributes = True
