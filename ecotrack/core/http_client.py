"""
HTTP client configuration for calls to the remote EcoTrack API.
No global client instances - each consumer manages its own lifecycle.
"""

import httpx
from typing import Optional, Dict, Any

from ecotrack.infra.config.settings import get_settings

settings = get_settings()


class HTTPClientConfig:
    """HTTP client configuration shared by remote API consumers"""

    @classmethod
    def get_base_headers(cls) -> Dict[str, str]:
        """Get base headers for HTTP requests"""
        return {
            "User-Agent": f"EcoTrack-Client/{settings.APP_VERSION}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @classmethod
    def create_client_config(
        cls,
        base_url: str,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Create HTTP client configuration (NOT the client itself).

        Args:
            base_url: API root every request path is joined to
            timeout: Override timeout (optional)

        Returns:
            Dict with client configuration
        """
        return {
            "base_url": base_url,
            "timeout": timeout or settings.HTTP_DEFAULT_TIMEOUT,
            "limits": httpx.Limits(
                max_connections=settings.HTTP_MAX_CONNECTIONS,
                max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS
            ),
            "headers": cls.get_base_headers(),
            "follow_redirects": False,
        }


def create_api_client(base_url: Optional[str] = None, **kwargs) -> httpx.AsyncClient:
    """
    Create an HTTP client for the remote API.
    WARNING: Remember to close the client after use!
    """
    config = HTTPClientConfig.create_client_config(base_url or settings.API_BASE_URL)
    config.update(kwargs)
    return httpx.AsyncClient(**config)
