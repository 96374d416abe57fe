"""
Translation error handling utilities.

Provides a decorator that maps the domain exception hierarchy onto
HTTPExceptions with consistent logging across translation endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from i18n_backend.core.exceptions import (
    ActiveJobConflictError,
    JobNotCancellableError,
    NotFoundError,
    PersistenceError,
    TranslationConflictError,
    TranslationServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_translation_errors(func: F) -> F:
    """
    Decorator to handle translation service errors and transform them into HTTPExceptions.

    Mapping:
    - ValidationError, JobNotCancellableError -> 400
    - NotFoundError (project, job, key, translation) -> 404
    - ActiveJobConflictError, TranslationConflictError -> 409
    - PersistenceError and anything unexpected -> 500
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except (ValidationError, JobNotCancellableError) as e:
            logger.warning("Invalid translation request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except NotFoundError as e:
            logger.warning("Resource not found", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except (ActiveJobConflictError, TranslationConflictError) as e:
            logger.info("Conflict", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

        except PersistenceError as e:
            logger.exception("Persistence failure", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="A storage error occurred",
            )

        except TranslationServiceError as e:
            logger.exception("Unhandled translation service error", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in translation operation",
                extra={"error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            )

    return wrapper  # type: ignore
