"""Repository-boundary error translation."""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from inspect import iscoroutinefunction
from typing import ParamSpec, TypeVar, cast

from .base import AppError
from .mapping import ExceptionMapper

P = ParamSpec("P")
T = TypeVar("T")


@contextmanager
def translated_errors(operation: str) -> Iterator[None]:
    """Re-raise anything except an ``AppError`` through ``ExceptionMapper``."""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise ExceptionMapper.map(exc, operation) from exc


def safe(func: Callable[P, T]) -> Callable[P, T]:
    """Wrap a repository method (sync or async) in :func:`translated_errors`.

    Example:
        @safe
        async def delete_many(self, deck_ids: Iterable[UUID]) -> int:
            ...
    """
    operation = func.__qualname__

    if iscoroutinefunction(func):
        async_func = cast(Callable[P, Awaitable[T]], func)

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with translated_errors(operation):
                return await async_func(*args, **kwargs)

        return cast(Callable[P, T], async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        with translated_errors(operation):
            return func(*args, **kwargs)

    return sync_wrapper
