"""
Pydantic models for Entrez client configuration.

Settings are validated once, when a client is built, so that a missing
contact email stops the process before any request is constructed.
"""

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TOOL,
    EMAIL_ENV_VAR,
    REQUEST_TIMEOUT,
    TOOL_ENV_VAR,
)
from .exceptions import ConfigurationError


class ClientSettings(BaseModel):
    """
    Process-wide request configuration.

    The ``tool`` and ``email`` fields are attached to every outbound request
    as default query parameters, as NCBI asks of E-utilities clients.
    """
    model_config = ConfigDict(frozen=True)

    email: str = Field(..., description="Contact email sent with every request")
    tool: str = Field(default=DEFAULT_TOOL, description="Tool identifier sent with every request")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="E-utilities base URL")
    timeout: Optional[float] = Field(
        default=REQUEST_TIMEOUT,
        description="Seconds to wait for the server; None waits forever",
    )
    raise_for_status: bool = Field(
        default=False,
        description="Raise TransportError on non-2xx responses instead of returning them",
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Require a non-empty address that at least looks like an email."""
        v = v.strip()
        if not v:
            raise ValueError("email must not be empty")
        if "@" not in v:
            raise ValueError(f"email {v!r} is not a valid address")
        return v

    @field_validator("tool")
    @classmethod
    def validate_tool(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("tool must not be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @property
    def default_params(self) -> Dict[str, str]:
        """Query parameters attached to every request."""
        return {"tool": self.tool, "email": self.email}

    @classmethod
    def build(cls, **values: Any) -> "ClientSettings":
        """Validate settings, reporting failures as ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Entrez client settings: {e}") from e

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ClientSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            **overrides: Explicit field values, taking precedence over the environment

        Raises:
            ConfigurationError: If no contact email is configured
        """
        environ = os.environ if environ is None else environ

        values: Dict[str, Any] = {}
        email = environ.get(EMAIL_ENV_VAR)
        if email:
            values["email"] = email
        tool = environ.get(TOOL_ENV_VAR)
        if tool:
            values["tool"] = tool
        # None means "not given" for email and tool only; timeout=None is unbounded
        values.update(
            {k: v for k, v in overrides.items() if v is not None or k not in ("email", "tool")}
        )

        if not values.get("email"):
            raise ConfigurationError(
                f"Please set the {EMAIL_ENV_VAR} environment variable "
                "(NCBI requires a contact email with every request)."
            )

        return cls.build(**values)
