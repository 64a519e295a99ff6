"""Wiki server client and the semantic API built on it."""

from freeki.shared.infrastructure.api.client import ApiClient, ApiError, ApiResponse

__all__ = ["ApiClient", "ApiError", "ApiResponse"]
