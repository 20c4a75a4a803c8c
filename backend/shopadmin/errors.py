from enum import Enum


class ErrorType(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    STORE_ERROR = "store_error"
    STORAGE_ERROR = "storage_error"
    INVALID_IMAGE = "invalid_image"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.DUPLICATE_ASSIGNMENT: 409,
    ErrorType.STORE_ERROR: 500,
    ErrorType.STORAGE_ERROR: 502,
    ErrorType.INVALID_IMAGE: 400,
    ErrorType.INTERNAL_ERROR: 500,
}
