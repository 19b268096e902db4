"""
HTTP client management service.
"""

import logging
import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class HTTPClientService:
    """Manages the global HTTP client for the application."""

    def __init__(self):
        self._client: httpx.AsyncClient = None

    async def init_client(self) -> None:
        """Initialize HTTP client"""
        self._client = httpx.AsyncClient(timeout=60.0)
        logger.info("HTTP client initialized")

    async def close_client(self) -> None:
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client closed")

    def get_auth_headers(self) -> dict:
        """Get authorization headers for case store requests"""
        if settings.BACKEND_API_KEY:
            return {"Authorization": f"Bearer {settings.BACKEND_API_KEY}"}
        return {}

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client instance."""
        if not self._client:
            raise RuntimeError("HTTP client not initialized. Call init_client() first.")
        return self._client


# Global HTTP client service instance
http_client_service = HTTPClientService()
