"""Client configuration for pyhomeconnect."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyhomeconnect._constants import BASE_URL
from pyhomeconnect.exceptions import HomeConnectConfigError

DEFAULT_SCOPES: frozenset[str] = frozenset({"IdentifyAppliance", "Monitor", "Settings", "Control"})


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise HomeConnectConfigError(f"{key} must be a number, got {value!r}") from exc


def _parse_scopes(value: str) -> frozenset[str]:
    return frozenset(scope.strip() for scope in value.replace(" ", ",").split(",") if scope.strip())


@dataclasses.dataclass(frozen=True)
class HomeConnectConfig:
    """Client configuration.

    Parameters
    ----------
    access_token : str
        OAuth bearer token for the Home Connect API. Acquiring and
        refreshing it is the caller's responsibility.
    base_url : str
        API base URL. Defaults to the production endpoint; use
        ``https://simulator.home-connect.com`` for the simulator.
    language : str
        Value of the ``Accept-Language`` header (e.g. ``"en-GB"``).
    scopes : frozenset of str
        Scopes granted to the access token. Both generic names
        (``"Monitor"``) and appliance-specific ones (``"Oven-Control"``)
        are accepted.
    event_disconnect_delay : float
        Seconds an interrupted event stream may take to restart before
        the appliance is treated as disconnected.
    connected_retry_min_delay : float
        First delay before retrying a failed state read while connected.
    connected_retry_max_delay : float
        Cap on the retry delay.
    connected_retry_factor : float
        Multiplier applied to the delay after each consecutive failure.
    power_state_blackout : float
        Seconds after a genuine power setting update during which
        inferred power corrections are suppressed.
    event_stream_retry_delay : float
        Seconds the transport waits before reopening a closed event stream.
    request_timeout : float
        Total timeout for individual REST calls.
    """

    access_token: str = ""
    base_url: str = BASE_URL
    language: str = "en-GB"
    scopes: frozenset[str] = DEFAULT_SCOPES
    event_disconnect_delay: float = 3.0
    connected_retry_min_delay: float = 5.0
    connected_retry_max_delay: float = 10 * 60.0
    connected_retry_factor: float = 2.0
    power_state_blackout: float = 2.0
    event_stream_retry_delay: float = 5.0
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls, **overrides: Any) -> HomeConnectConfig:
        """Create configuration from environment variables.

        Reads ``HOMECONNECT_ACCESS_TOKEN`` and optional ``HOMECONNECT_*``
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HomeConnectConfig
            Populated configuration.

        Raises
        ------
        HomeConnectConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HOMECONNECT_ACCESS_TOKEN": "access_token",
            "HOMECONNECT_BASE_URL": "base_url",
            "HOMECONNECT_LANGUAGE": "language",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        scopes_env = env.get("HOMECONNECT_SCOPES")
        if scopes_env is not None and "scopes" not in overrides:
            config_kwargs["scopes"] = _parse_scopes(scopes_env)

        _ENV_TIMING_MAP = {
            "HOMECONNECT_EVENT_DISCONNECT_DELAY": "event_disconnect_delay",
            "HOMECONNECT_RETRY_MIN_DELAY": "connected_retry_min_delay",
            "HOMECONNECT_RETRY_MAX_DELAY": "connected_retry_max_delay",
            "HOMECONNECT_RETRY_FACTOR": "connected_retry_factor",
            "HOMECONNECT_POWER_STATE_BLACKOUT": "power_state_blackout",
            "HOMECONNECT_EVENT_STREAM_RETRY_DELAY": "event_stream_retry_delay",
            "HOMECONNECT_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_TIMING_MAP.items():
            if field_name in overrides:
                continue
            number = _env_float(env, env_key)
            if number is not None:
                config_kwargs[field_name] = number

        if isinstance(overrides.get("scopes"), (list, tuple, set)):
            overrides["scopes"] = frozenset(overrides["scopes"])

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
