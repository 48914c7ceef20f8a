from enum import Enum

class ErrorCode(str, Enum):
    # --- Generic / HTTP-ish ---
    INTERNAL_ERROR = "internal_error"
    BAD_REQUEST = "bad_request"
    VALIDATION_ERROR = "validation_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    # --- Auth / Sessions ---
    # wrong, expired and already-used codes all map to UNAUTHORIZED
    USER_NOT_FOUND = "user_not_found"

    # --- Catalog ---
    RESTAURANT_NOT_FOUND = "restaurant_not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    DISH_NOT_FOUND = "dish_not_found"
    CATEGORY_RESTAURANT_MISMATCH = "category_restaurant_mismatch"

    # --- Infra / Storage ---
    DATABASE_ERROR = "database_error"
    UNIQUE_CONSTRAINT_VIOLATION = "unique_constraint_violation"
