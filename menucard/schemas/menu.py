from pydantic import BaseModel, Field, HttpUrl

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)

class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=120)

class CategoryOut(BaseModel):
    id: int
    name: str
    restaurant_id: int

    class Config:
        from_attributes = True

class CategoryRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class DishCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    image_url: HttpUrl | None = None
    spice_level: int | None = Field(default=None, ge=0, le=5)
    price: float | None = Field(default=None, ge=0)
    is_vegetarian: bool = True
    category_ids: list[int] = []

class DishUpdate(BaseModel):
    # omitted fields stay untouched; explicit null clears image_url, spice_level and price
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    image_url: HttpUrl | None = None
    spice_level: int | None = Field(default=None, ge=0, le=5)
    price: float | None = Field(default=None, ge=0)
    is_vegetarian: bool | None = None
    category_ids: list[int] | None = None

class DishOut(BaseModel):
    id: int
    name: str
    description: str
    image_url: str | None = None
    spice_level: int | None = None
    price: float | None = None
    is_vegetarian: bool
    restaurant_id: int
    categories: list[CategoryRef] = []

    class Config:
        from_attributes = True
