"""Inference backend configuration with environment variable loading.

Pydantic-based configuration for the inference client.
Supports a hosted inference API, a local generation server and a
streaming local chat runtime.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

BackendKind = Literal["hosted", "local", "stream"]

DEFAULT_ENDPOINTS: dict[str, str] = {
    "hosted": "https://api-inference.huggingface.co/models/microsoft/Phi-3-mini-4k-instruct",
    "local": "http://localhost:11434/api/generate",
    "stream": "http://localhost:11434/api/chat",
}

# Seconds to wait between attempts while the model warms up
DEFAULT_RETRY_DELAYS: dict[str, float] = {
    "hosted": 2.0,
    "local": 1.0,
    "stream": 1.0,
}


class InferenceConfig(BaseModel):
    """Configuration for the inference client.

    Endpoint and retry delay default per backend when not given.

    Attributes:
        backend: Which backend protocol to speak.
        endpoint: Full URL the request is posted to.
        api_key: Bearer credential (required for the hosted backend).
        model_name: Model identifier for the local backends.
        max_length: Generation length limit sent to the hosted backend.
        response_format: Output format requested from the local backend.
        max_attempts: Retry budget while the model is warming up.
        retry_delay: Fixed wait between attempts, in seconds.
        timeout: Request timeout in seconds (None disables it).
    """

    # Environment values arrive as strings; defaults go through field validation
    model_config = ConfigDict(validate_default=True)

    backend: BackendKind = Field(
        default_factory=lambda: os.getenv("INFERENCE_BACKEND", "hosted").lower(),
        description="Backend protocol: hosted, local or stream",
    )
    endpoint: str | None = Field(
        default_factory=lambda: os.getenv("INFERENCE_ENDPOINT") or None,
        description="Backend URL (None for the backend default)",
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv("INFERENCE_API_KEY", os.getenv("HF_API_TOKEN", "")),
        description="Bearer token for the hosted backend",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("INFERENCE_MODEL", "llama3"),
        description="Model used by the local backends",
    )
    max_length: int = Field(
        default=100,
        ge=1,
        le=4096,
        description="Maximum generation length for the hosted backend",
    )
    response_format: str = Field(
        default_factory=lambda: os.getenv("INFERENCE_FORMAT", "json"),
        description="Output format requested from the local generation backend",
    )
    max_attempts: int = Field(
        default_factory=lambda: os.getenv("INFERENCE_MAX_ATTEMPTS", "3"),
        ge=1,
        le=10,
        description="Attempts before a warming-up backend is reported as loading",
    )
    retry_delay: float | None = Field(
        default_factory=lambda: os.getenv("INFERENCE_RETRY_DELAY") or None,
        ge=0.0,
        description="Seconds between attempts (None for the backend default)",
    )
    timeout: float | None = Field(
        default_factory=lambda: os.getenv("INFERENCE_TIMEOUT") or 120.0,
        gt=0.0,
        description="Request timeout in seconds",
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def apply_backend_defaults(self) -> "InferenceConfig":
        """Fill per-backend defaults and require a token for the hosted API."""
        if self.endpoint is None:
            self.endpoint = DEFAULT_ENDPOINTS[self.backend]
        if self.retry_delay is None:
            self.retry_delay = DEFAULT_RETRY_DELAYS[self.backend]
        if self.backend == "hosted" and not self.api_key:
            raise ValueError(
                "API key required for the hosted backend. "
                "Set INFERENCE_API_KEY or HF_API_TOKEN in .env"
            )
        return self


def get_inference_config() -> InferenceConfig:
    """Create inference configuration from environment.

    Returns:
        Configured InferenceConfig instance.

    Raises:
        ValueError: If the hosted backend is selected without a token.
    """
    return InferenceConfig()
