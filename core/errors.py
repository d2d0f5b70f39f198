"""Ошибки ядра матчинга. Роутеры их не ловят: main.py переводит их в JSON-ответ."""
from starlette import status


class MatchError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MatchError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidArgument(MatchError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(MatchError):
    status_code = status.HTTP_409_CONFLICT


class Forbidden(MatchError):
    status_code = status.HTTP_403_FORBIDDEN


class Internal(MatchError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
