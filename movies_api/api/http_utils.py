from functools import wraps
from http import HTTPStatus
from fastapi import HTTPException


def handle_runtime_errors(mapping: dict[str, HTTPStatus]):
    """
    Переводит RuntimeError с «текстовыми кодами» в HTTPException.
    Пример mapping: {"movie_not_found": 404}
    Нераспознанные ошибки летят дальше, в обработчик приложения
    (он решает, сколько деталей отдавать клиенту).
    """
    def decorator(fn):
        @wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except RuntimeError as e:
                msg = str(e)
                for key, status in mapping.items():
                    if key in msg:
                        raise HTTPException(
                            status_code=status, detail=key) from e
                raise
        return wrapper
    return decorator


def not_found_if_none(value, detail: str = "not_found"):
    """Удобный helper: если результат None, бросаем 404."""
    if value is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=detail)
    return value
