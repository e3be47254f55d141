"""
Process configuration for the algoviz backend.

Values are read once from environment variables when the module is
imported; ``main.py`` may override host/port from the command line.

Environment variables:
- ALGOVIZ_HOST: bind address (default 127.0.0.1)
- ALGOVIZ_PORT: port (default 8000)
- ALGOVIZ_LOG_LEVEL: logging level name (default INFO)
- ALGOVIZ_TIME_SCALE: multiplier applied to every animation delay
  (default 1.0, 0 disables pacing entirely)
"""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class AppConfig:
    """Runtime configuration of the backend process."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    time_scale: float = 1.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build a config from environment variables.

        Unparseable numbers fall back to the defaults; a negative time
        scale is treated as zero.

        Args:
            env: Mapping to read from (defaults to ``os.environ``)

        Returns:
            The resulting AppConfig
        """
        if env is None:
            env = os.environ

        return cls(
            host=env.get("ALGOVIZ_HOST", cls.host) or cls.host,
            port=_env_int(env, "ALGOVIZ_PORT", cls.port),
            log_level=(env.get("ALGOVIZ_LOG_LEVEL") or cls.log_level).upper(),
            time_scale=max(0.0, _env_float(env, "ALGOVIZ_TIME_SCALE", cls.time_scale)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Global configuration instance
app_config = AppConfig.from_env()
