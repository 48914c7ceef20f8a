from fastapi import HTTPException, status
from typing import Any, Dict, NoReturn
from menucard.core.error_codes import ErrorCode

class AppException(HTTPException):
    def __init__(
        self,
        *,
        error_code: ErrorCode,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        user_message: str | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={"error_code": error_code, "user_message": user_message, "details": details},
        )
        self.error_code = error_code
        self.details = details

def raise_error(
    code: ErrorCode,
    status_code: int,
    user_message: str | None = None,
    details: Dict[str, Any] | None = None,
) -> NoReturn:
    raise AppException(error_code=code, status_code=status_code, user_message=user_message, details=details)

def raise_unauthorized() -> NoReturn:
    # one message for every cause: missing, unknown, expired or revoked
    raise_error(ErrorCode.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED, "Authentication required")

def raise_not_found(code: ErrorCode, user_message: str) -> NoReturn:
    raise_error(code, status.HTTP_404_NOT_FOUND, user_message)
