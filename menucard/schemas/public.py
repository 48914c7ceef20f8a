from pydantic import BaseModel
from menucard.schemas.menu import CategoryRef

class MenuRestaurantOut(BaseModel):
    id: int
    name: str
    location: str

class MenuDishOut(BaseModel):
    id: int
    name: str
    description: str
    image_url: str | None = None
    spice_level: int | None = None
    price: float | None = None
    is_vegetarian: bool
    categories: list[CategoryRef] = []

class MenuCategoryOut(BaseModel):
    id: int
    name: str
    dishes: list[MenuDishOut] = []

class MenuOut(BaseModel):
    restaurant: MenuRestaurantOut
    categories: list[MenuCategoryOut] = []
