"""Client configuration for pyonecta."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyonecta._constants import (
    BASE_URL,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
)
from pyonecta.exceptions import OnectaConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class OnectaConfig:
    """Client configuration.

    Parameters
    ----------
    access_token : str or None
        Bearer token sent with every request. pyonecta does not obtain or
        refresh tokens; the caller supplies a valid one.
    base_url : str
        API base URL. Defaults to the EU Onecta endpoint.
    request_timeout : float
        Total timeout in seconds for one HTTP request.
    max_retries : int
        Number of retries after the first failed attempt.
    retry_initial_delay : float
        Delay in seconds before the first retry; doubled for every further
        attempt.
    retry_max_delay : float
        Upper bound in seconds for a single backoff delay.
    retry_transient_only : bool
        Only retry failures classified as transient (connection problems,
        408/429/502/503/504). When ``False`` every failure is retried.
    """

    access_token: str | None = None
    base_url: str = BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_initial_delay: float = DEFAULT_INITIAL_DELAY
    retry_max_delay: float = DEFAULT_MAX_DELAY
    retry_transient_only: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise OnectaConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_initial_delay < 0 or self.retry_max_delay < 0:
            raise OnectaConfigError("retry delays must be >= 0")
        if self.request_timeout <= 0:
            raise OnectaConfigError(f"request_timeout must be > 0, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> OnectaConfig:
        """Create configuration from environment variables.

        Reads the optional ``ONECTA_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        OnectaConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "ONECTA_ACCESS_TOKEN": "access_token",
            "ONECTA_BASE_URL": "base_url",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "ONECTA_REQUEST_TIMEOUT": "request_timeout",
            "ONECTA_RETRY_INITIAL_DELAY": "retry_initial_delay",
            "ONECTA_RETRY_MAX_DELAY": "retry_max_delay",
        }
        try:
            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = float(val)

            retries_env = env.get("ONECTA_MAX_RETRIES")
            if retries_env is not None and "max_retries" not in overrides:
                config_kwargs["max_retries"] = int(retries_env)
        except ValueError as exc:
            raise OnectaConfigError(f"Invalid numeric ONECTA_* environment value: {exc}") from exc

        if "retry_transient_only" not in overrides:
            config_kwargs["retry_transient_only"] = _env_bool(
                env.get("ONECTA_RETRY_TRANSIENT_ONLY"),
                True,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
