"""Runtime configuration for discovery runs.

Usage
-----
Create a configuration with defaults:

>>> config = DiscoveryConfig()
>>> config.workers
8

Or load from environment variables:

>>> import os
>>> os.environ["FONTSOURCES_WORKERS"] = "16"
>>> DiscoveryConfig.from_env().workers
16

"""

from __future__ import annotations

import dataclasses as dc
import os

from fontsources.discovery.pool import (
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_WORKERS,
    PoolSettings,
)
from fontsources.discovery.probe import DEFAULT_HTTP_TIMEOUT
from fontsources.git.commands import DEFAULT_GIT_TIMEOUT

TOKEN_VARS = ("GH_TOKEN", "GITHUB_TOKEN")


class ConfigError(ValueError):
    """Raised when an environment variable holds an invalid value."""


@dc.dataclass(frozen=True, slots=True)
class DiscoveryConfig:
    """Settings for one discovery run.

    Attributes
    ----------
    workers
        Number of repositories probed in parallel.
    http_timeout
        Seconds allowed for each HTTP probe.
    git_timeout
        Seconds allowed for each git command, clones included.
    max_rate_limit_retries
        Times one repository may be retried after being rate limited.
    poll_interval
        Seconds between checks of the shared rate-limit flag.
    log_level
        femtologging level name.
    github_token
        Optional bearer token sent with HTTP probes.

    """

    workers: int = DEFAULT_WORKERS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = "INFO"
    github_token: str | None = dc.field(default=None, repr=False)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ConfigError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ConfigError(msg)
        return value

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive number env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ConfigError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ConfigError(msg)
        return value

    @classmethod
    def from_env(cls) -> DiscoveryConfig:
        """Create configuration from environment variables.

        Reads ``FONTSOURCES_WORKERS``, ``FONTSOURCES_HTTP_TIMEOUT``,
        ``FONTSOURCES_GIT_TIMEOUT``, ``FONTSOURCES_MAX_RATE_LIMIT_RETRIES``,
        ``FONTSOURCES_POLL_INTERVAL``, ``FONTSOURCES_LOG_LEVEL``, and the
        first non-empty of ``GH_TOKEN`` and ``GITHUB_TOKEN``.

        Raises
        ------
        ConfigError
            If a numeric variable is malformed or not positive.

        """
        token = next(
            (
                os.environ[var].strip()
                for var in TOKEN_VARS
                if os.environ.get(var, "").strip()
            ),
            None,
        )
        return cls(
            workers=cls._parse_positive_int("FONTSOURCES_WORKERS", DEFAULT_WORKERS),
            http_timeout=cls._parse_positive_float(
                "FONTSOURCES_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT
            ),
            git_timeout=cls._parse_positive_float(
                "FONTSOURCES_GIT_TIMEOUT", DEFAULT_GIT_TIMEOUT
            ),
            max_rate_limit_retries=cls._parse_positive_int(
                "FONTSOURCES_MAX_RATE_LIMIT_RETRIES", DEFAULT_MAX_RATE_LIMIT_RETRIES
            ),
            poll_interval=cls._parse_positive_float(
                "FONTSOURCES_POLL_INTERVAL", DEFAULT_POLL_INTERVAL
            ),
            log_level=os.environ.get("FONTSOURCES_LOG_LEVEL", "INFO"),
            github_token=token,
        )

    def pool_settings(self) -> PoolSettings:
        """Return the worker pool settings for this configuration."""
        return PoolSettings(
            workers=self.workers,
            poll_interval=self.poll_interval,
            max_rate_limit_retries=self.max_rate_limit_retries,
        )
