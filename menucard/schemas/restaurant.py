from datetime import datetime

from pydantic import BaseModel, Field
from menucard.schemas.menu import CategoryOut, DishOut

class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=300)

class RestaurantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, min_length=1, max_length=300)

class RestaurantOut(BaseModel):
    id: int
    name: str
    location: str
    owner_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class RestaurantDetailOut(RestaurantOut):
    categories: list[CategoryOut] = []
    dishes: list[DishOut] = []

class ShareLinksOut(BaseModel):
    menu_url: str
    qr_code_url: str
