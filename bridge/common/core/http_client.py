import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for control-plane calls.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient for the local Runtime API.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        # A single invocation is in flight at a time; one kept-alive connection is enough.
        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(max_keepalive_connections=1, max_connections=4)
        # Avoid leaking host HTTP(S)_PROXY/NO_PROXY into internal calls unless explicitly requested.
        kwargs.setdefault("trust_env", False)

        logger.debug("Creating Runtime API client", extra={"client_kwargs": sorted(kwargs)})
        return httpx.AsyncClient(**kwargs)
