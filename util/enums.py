# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    LOG = "log"
    REDIS = "redis"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    RECORD_NOT_FOUND = ErrorInfo("Not Found", status.HTTP_404_NOT_FOUND)
    KEY_TOO_SHORT = ErrorInfo(
        "Key is too short", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    QUERY_TOO_SHORT = ErrorInfo(
        "Query is too short", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    MISSING_FILTER = ErrorInfo(
        "Either q or p=1 is required", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    BAD_BODY = ErrorInfo("Bad Request", status.HTTP_400_BAD_REQUEST)
    INTERNAL_ERROR = ErrorInfo(
        "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
