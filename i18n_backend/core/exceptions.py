"""
Exception hierarchy for the translation job pipeline.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class TranslationServiceError(Exception):
    """Base exception for all translation service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(TranslationServiceError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class NotFoundError(TranslationServiceError):
    """Raised when a referenced resource does not exist."""

    resource = "Resource"

    def __init__(self, resource_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["id"] = str(resource_id)
        self.resource_id = resource_id
        super().__init__(f"{self.resource} not found: {resource_id}", details)


class ProjectNotFoundError(NotFoundError):
    """Raised when a project cannot be found."""

    resource = "Project"


class JobNotFoundError(NotFoundError):
    """Raised when a translation job cannot be found."""

    resource = "Translation job"


class KeyNotFoundError(NotFoundError):
    """Raised when requested keys do not exist in the project."""

    resource = "Key"


class TranslationNotFoundError(NotFoundError):
    """Raised when a translation row cannot be found."""

    resource = "Translation"


class ActiveJobConflictError(TranslationServiceError):
    """Raised when a project already has a pending or running job."""

    def __init__(self, project_id: Any, active_job_id: Any | None = None) -> None:
        """
        Initialize active job conflict.

        Args:
            project_id: Project that already has an active job
            active_job_id: ID of the active job, when known
        """
        details = {"project_id": str(project_id)}
        if active_job_id is not None:
            details["active_job_id"] = str(active_job_id)
        super().__init__(
            "Another translation job is already active for this project",
            details,
        )


class JobNotCancellableError(TranslationServiceError):
    """Raised when cancelling a job that already reached a terminal state."""

    def __init__(self, job_id: Any, status: str) -> None:
        super().__init__(
            "Job is not in a cancellable state",
            {"job_id": str(job_id), "status": status},
        )


class TranslationConflictError(TranslationServiceError):
    """Raised when an optimistic-lock token no longer matches the stored row."""

    def __init__(self, project_id: Any, key_id: Any, locale: str) -> None:
        super().__init__(
            "Translation was modified by another writer",
            {"project_id": str(project_id), "key_id": str(key_id), "locale": locale},
        )


class ProviderError(TranslationServiceError):
    """Raised when the translation provider fails or returns unusable output."""

    def __init__(
        self,
        message: str,
        error_code: str = "TRANSLATION_ERROR",
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            error_code: Short machine-readable code stored on the job item
            retryable: Whether another attempt may succeed
            details: Additional context
        """
        self.error_code = error_code
        self.retryable = retryable
        super().__init__(message, details)


class PersistenceError(TranslationServiceError):
    """Raised when a ledger, item or translation write fails at the storage layer."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Operation that failed
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
