"""
Runtime configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

from typing import List

from pydantic import Field

from bridge.common.core.config import BaseAppConfig

DEFAULT_TEXT_CONTENT_TYPES = [
    "text/*",
    "application/json",
    "application/javascript",
    "application/xml",
    "application/*+json",
    "application/*+xml",
    "image/svg+xml",
]


class RuntimeConfig(BaseAppConfig):
    """
    Configuration management for the Lambda runtime bridge.
    """

    # Runtime API (set by the Lambda service inside the execution environment)
    AWS_LAMBDA_RUNTIME_API: str = Field(default="", description="Runtime API host:port")
    RUNTIME_API_VERSION: str = Field(default="2018-06-01", description="Runtime API version")

    # Handler
    BRIDGE_HANDLER: str = Field(default="app:app", description="module:attribute of the handler")

    # Response encoding
    TEXT_CONTENT_TYPES: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TEXT_CONTENT_TYPES),
        description="Content-Type patterns emitted as text instead of base64",
    )

    # Control-plane retry policy
    RUNTIME_MAX_RETRIES: int = Field(default=3, ge=0, description="Retries per Runtime API call")
    RUNTIME_RETRY_BACKOFF_BASE: float = Field(
        default=0.1, gt=0, description="Initial retry backoff (seconds)"
    )
    RUNTIME_RETRY_BACKOFF_MAX: float = Field(
        default=2.0, gt=0, description="Retry backoff cap (seconds)"
    )

    # Local server settings
    LOCAL_BIND_ADDR: str = Field(default="127.0.0.1:8000", description="Local listen address")

    @property
    def runtime_api_base_url(self) -> str:
        return f"http://{self.AWS_LAMBDA_RUNTIME_API}/{self.RUNTIME_API_VERSION}/runtime"
