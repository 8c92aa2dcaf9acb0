from enum import Enum


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_SEARCH = "INVALID_SEARCH"
    INGREDIENT_NOT_FOUND = "INGREDIENT_NOT_FOUND"
    NO_CASES_FOUND = "NO_CASES_FOUND"
    MENU_NOT_FOUND = "MENU_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


HTTP_STATUS = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.EMPTY_INPUT: 400,
    ErrorCode.INVALID_SEARCH: 400,
    ErrorCode.INGREDIENT_NOT_FOUND: 400,
    ErrorCode.NO_CASES_FOUND: 404,
    ErrorCode.MENU_NOT_FOUND: 404,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INTERNAL_ERROR: 500,
}


def status_for(error: ErrorCode | None) -> int:
    if error is None:
        return 200
    return HTTP_STATUS[error]
