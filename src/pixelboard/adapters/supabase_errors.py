"""Translation of PostgREST failures into application errors."""

import logging
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from postgrest.exceptions import APIError

from pixelboard.errors import DependencyError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def translate_api_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Re-raise PostgREST ``APIError`` as ``DependencyError``."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except APIError as exc:
            logger.exception(
                "Metadata store request failed",
                extra={"operation": func.__name__, "code": exc.code},
            )
            raise DependencyError(
                "Metadata store unavailable",
                details={"operation": func.__name__, "code": exc.code},
            ) from exc

    return wrapper
