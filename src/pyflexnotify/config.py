"""Client configuration for pyflexnotify."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyflexnotify._constants import BASE_URL, ROUTING_BASE_URL
from pyflexnotify.exceptions import FlexConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise FlexConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class FlexConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Vehicle feed base URL.
    language_id : int
        Feed language identifier (``2`` = English).
    poll_interval : float
        Seconds between two polls of the same search session.
    request_timeout : float
        Total timeout in seconds for a single feed request. An expired
        timeout is reported as :class:`~pyflexnotify.exceptions.UpstreamError`.
    observation_buffer : float
        Metres added to the alert radius to build the map display set.
    top_n : int
        Number of vehicles reported by a single-shot match.
    routing_base_url : str
        Base URL of the OSRM-compatible foot router.
    vapid_public_key : str or None
        VAPID public key handed to browsers for web push.
    vapid_private_key : str or None
        VAPID private key used to sign push requests.
    vapid_email : str
        Contact claim sent with push requests.
    """

    base_url: str = BASE_URL
    language_id: int = 2
    poll_interval: float = 30.0
    request_timeout: float = 12.0
    observation_buffer: float = 200.0
    top_n: int = 3
    routing_base_url: str = ROUTING_BASE_URL
    vapid_public_key: str | None = None
    vapid_private_key: str | None = None
    vapid_email: str = "mailto:admin@localhost"

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise FlexConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise FlexConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.observation_buffer < 0:
            raise FlexConfigError(f"observation_buffer must not be negative, got {self.observation_buffer}")
        if self.top_n < 1:
            raise FlexConfigError(f"top_n must be at least 1, got {self.top_n}")

    @property
    def push_enabled(self) -> bool:
        """Whether both VAPID keys are available for background push."""
        return bool(self.vapid_public_key and self.vapid_private_key)

    @classmethod
    def from_env(cls, **overrides: Any) -> FlexConfig:
        """Create configuration from environment variables.

        Reads optional ``FLEX_*`` variables plus the ``VAPID_*`` keys.
        Explicit keyword arguments override environment values.

        Raises
        ------
        FlexConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "FLEX_BASE_URL": "base_url",
            "FLEX_ROUTING_BASE_URL": "routing_base_url",
            "VAPID_PUBLIC_KEY": "vapid_public_key",
            "VAPID_PRIVATE_KEY": "vapid_private_key",
            "VAPID_EMAIL": "vapid_email",
        }
        _ENV_NUMBER_MAP: dict[str, tuple[str, type]] = {
            "FLEX_LANGUAGE_ID": ("language_id", int),
            "FLEX_POLL_INTERVAL": ("poll_interval", float),
            "FLEX_REQUEST_TIMEOUT": ("request_timeout", float),
            "FLEX_OBSERVATION_BUFFER": ("observation_buffer", float),
            "FLEX_TOP_N": ("top_n", int),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            if field_name in overrides:
                continue
            val = _env_number(env, env_key, cast)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
