# Re-export Base and ensure all models are imported so metadata is complete
from menucard.db.session import Base  # provides Base.metadata

# Import models here so Alembic can discover them via Base.metadata
from menucard.models.user import User  # noqa: F401
from menucard.models.verification import VerificationCode  # noqa: F401
from menucard.models.session import UserSession  # noqa: F401
from menucard.models.restaurant import Restaurant  # noqa: F401
from menucard.models.category import Category  # noqa: F401
from menucard.models.dish import Dish, dish_categories  # noqa: F401
