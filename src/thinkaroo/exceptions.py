"""
Custom exception hierarchy for the thinkaroo content service.

All exceptions inherit from ThinkarooError, which provides optional context
for structured error handling and logging. Every variant is scoped to the
single request that raised it; none is fatal to the process.
"""

from __future__ import annotations

from typing import Any


class ThinkarooError(Exception):
    """Base exception for all thinkaroo errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"

    def into_status(self) -> tuple[int, str]:
        """Render this error for a response boundary.

        Returns:
            Tuple of (HTTP status code, generic message safe to show users).
        """
        return self.status_code, self.public_message


class StorageError(ThinkarooError):
    """Raised when a storage backend fails.

    Covers both object stores and key/value stores.

    Context should include:
        - backend: The backend name (s3, disk, memory, dynamodb)
        - key: The key or prefix being accessed
        - operation: put, get or list
    """

    pass


class ObjectNotFoundError(ThinkarooError):
    """Raised by object store reads when the key was never written.

    Listing never raises this; an unmatched prefix lists as empty.
    """

    pass


class SerializationError(ThinkarooError):
    """Raised when stored bytes cannot be decoded into the artifact type.

    Context should include:
        - key: The object key holding the bad payload
        - artifact_type: Name of the expected type
    """

    public_message = "Data parsing error"


class GenerationError(ThinkarooError):
    """Raised when the content generator fails or returns malformed output.

    Context should include:
        - category: The content category being generated
        - model: The model being used
    """

    pass


class ConfigurationError(ThinkarooError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Missing prompt for a content category
        - Missing OPENAI_API_KEY when a generator is requested
        - Unknown storage backend name
    """

    pass
