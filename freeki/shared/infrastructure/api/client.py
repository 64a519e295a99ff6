"""Central HTTP client for all wiki server communication.

Every request resolves to an :class:`ApiResponse`; nothing is raised to the
caller. Failures are logged and, unless they are permission errors
(401/403, expected for non-admin users), reported to the error handler that
the UI registers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorDisplayHandler = Callable[[str], None]

PERMISSION_STATUSES = frozenset({401, 403})


@dataclass(frozen=True)
class ApiError:
    message: str
    status: int
    status_text: str
    is_network_error: bool = False

    @property
    def is_permission_error(self) -> bool:
        return self.status in PERMISSION_STATUSES


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[ApiError] = None


class ApiClient:
    """Thin async HTTP client with uniform error reporting."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._error_handler: Optional[ErrorDisplayHandler] = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_error_handler(self, handler: ErrorDisplayHandler) -> None:
        """Set the handler that will be called for all visible API errors."""
        self._error_handler = handler

    def clear_error_handler(self) -> None:
        self._error_handler = None

    def report_error(self, message: str, status: int = 0, status_text: str = "") -> None:
        """Report a failure found after the request itself succeeded."""
        self._handle_error(ApiError(message=message, status=status, status_text=status_text))

    def _handle_error(self, error: ApiError) -> None:
        if error.is_permission_error:
            logger.info(f"API permission denied: {error.message}")
            return

        logger.error(f"API error: {error.message}")
        if self._error_handler is None:
            return
        if error.is_network_error:
            self._error_handler("Network error - please check your connection")
        else:
            self._error_handler(error.message)

    async def _request(self, method: str, url: str, **kwargs: Any) -> ApiResponse[Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            error = ApiError(
                message=str(exc) or "Unknown network error",
                status=0,
                status_text="Network Error",
                is_network_error=True,
            )
            self._handle_error(error)
            return ApiResponse(success=False, error=error)

        if response.is_success:
            content_type = response.headers.get("content-type", "")
            if "application/json" in content_type:
                try:
                    data = response.json()
                except ValueError as exc:
                    error = ApiError(
                        message=f"Invalid JSON from {url}: {exc}",
                        status=response.status_code,
                        status_text=response.reason_phrase,
                    )
                    self._handle_error(error)
                    return ApiResponse(success=False, error=error)
            else:
                data = response.content
            return ApiResponse(success=True, data=data)

        error = ApiError(
            message=f"HTTP {response.status_code}: {response.reason_phrase}",
            status=response.status_code,
            status_text=response.reason_phrase,
        )
        self._handle_error(error)
        return ApiResponse(success=False, error=error)

    async def get(self, url: str) -> ApiResponse[Any]:
        return await self._request("GET", url)

    async def post(self, url: str, data: Any = None) -> ApiResponse[Any]:
        if data is None:
            return await self._request("POST", url)
        return await self._request("POST", url, json=data)

    async def put(self, url: str, data: Any = None) -> ApiResponse[Any]:
        if data is None:
            return await self._request("PUT", url)
        return await self._request("PUT", url, json=data)

    async def delete(self, url: str) -> ApiResponse[Any]:
        return await self._request("DELETE", url)
