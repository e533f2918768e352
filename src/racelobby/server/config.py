"""
Server configuration

Configuration settings for the race lobby server.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional


ENV_PREFIX = "RACELOBBY_"


@dataclass
class ServerConfig:
    """Configuration for the race lobby server."""

    # Network
    host: str = "0.0.0.0"
    port: int = 3000

    # Simulation
    tick_interval_s: float = 0.1  # 100 ms fixed tick
    reap_every_cycles: int = 50

    # Lobbies
    max_ai: int = 6
    grid_spacing_m: float = 30.0
    idle_timeout_s: float = 1800.0  # <= 0 keeps lobbies forever
    color_seed: Optional[int] = None

    # Broadcast
    subscriber_queue_size: int = 16

    # HTTP
    cors_origins: List[str] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate and normalize configuration."""
        self.port = int(self.port)
        self.tick_interval_s = float(self.tick_interval_s)
        if self.tick_interval_s <= 0:
            raise ValueError("tick_interval_s must be positive")
        self.reap_every_cycles = int(self.reap_every_cycles)
        self.max_ai = max(0, int(self.max_ai))
        self.grid_spacing_m = float(self.grid_spacing_m)
        self.idle_timeout_s = float(self.idle_timeout_s)
        if self.color_seed is not None:
            self.color_seed = int(self.color_seed)
        self.subscriber_queue_size = max(1, int(self.subscriber_queue_size))
        if isinstance(self.cors_origins, str):
            self.cors_origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        self.log_level = str(self.log_level).upper()
        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "ServerConfig":
        """Build configuration from ``RACELOBBY_*`` environment variables.

        The bare ``PORT`` variable is honoured when ``RACELOBBY_PORT`` is
        unset. Keyword overrides that are not None win over the environment.
        """
        environ = os.environ if environ is None else environ

        values = {}
        env_fields = {
            "host": "HOST",
            "port": "PORT",
            "tick_interval_s": "TICK_INTERVAL_S",
            "reap_every_cycles": "REAP_EVERY_CYCLES",
            "max_ai": "MAX_AI",
            "grid_spacing_m": "GRID_SPACING_M",
            "idle_timeout_s": "IDLE_TIMEOUT_S",
            "color_seed": "COLOR_SEED",
            "subscriber_queue_size": "SUBSCRIBER_QUEUE_SIZE",
            "cors_origins": "CORS_ORIGINS",
            "log_level": "LOG_LEVEL",
            "log_file": "LOG_FILE",
        }
        for name, suffix in env_fields.items():
            raw = environ.get(ENV_PREFIX + suffix, "").strip()
            if raw:
                values[name] = raw

        if "port" not in values and environ.get("PORT", "").strip():
            values["port"] = environ["PORT"].strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
