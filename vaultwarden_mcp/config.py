"""
Centralized configuration for vaultwarden-mcp.

All configuration is loaded from environment variables. Defaults: 40s
timeout per bw command, 60s session cache. The master password is not a
field; it is read from the environment at unlock time so it never lands
in a repr.

Usage:
    from vaultwarden_mcp.config import get_config
    cfg = get_config()
    print(cfg.bitwarden.binary)          # "bw"
    print(cfg.bitwarden.session_ttl)     # 60.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from vaultwarden_mcp.errors import ConfigurationError

DEFAULT_COMMAND_TIMEOUT = 40.0
DEFAULT_SESSION_TTL = 60.0
DEFAULT_PASSWORD_ENV = "BW_MASTER_PASSWORD"


@dataclass(frozen=True)
class BitwardenConfig:
    """bw CLI invocation parameters."""

    binary: str = "bw"
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    session_ttl: float = DEFAULT_SESSION_TTL
    password_env: str = DEFAULT_PASSWORD_ENV
    appdata_dir: Path | None = None  # BITWARDENCLI_APPDATA_DIR for the child

    def master_password(self) -> str:
        """Read the master password from the environment.

        Raises:
            ConfigurationError: If the variable is unset or empty.
        """
        password = os.environ.get(self.password_env)
        if not password:
            raise ConfigurationError(
                f"Environment variable {self.password_env} is not set; "
                "it must hold the vault master password."
            )
        return password

    def has_master_password(self) -> bool:
        return bool(os.environ.get(self.password_env))


@dataclass(frozen=True)
class Config:
    """Top-level vaultwarden-mcp configuration."""

    server_name: str = "vaultwarden-mcp"
    log_level: str = "INFO"
    bitwarden: BitwardenConfig = field(default_factory=BitwardenConfig)


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _positive_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    appdata = os.environ.get("BITWARDENCLI_APPDATA_DIR")

    bitwarden = BitwardenConfig(
        binary=os.environ.get("VAULTWARDEN_MCP_BW_BINARY", "bw"),
        command_timeout=_positive_float(
            "VAULTWARDEN_MCP_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT
        ),
        session_ttl=_positive_float("VAULTWARDEN_MCP_SESSION_TTL", DEFAULT_SESSION_TTL),
        password_env=os.environ.get("VAULTWARDEN_MCP_PASSWORD_ENV", DEFAULT_PASSWORD_ENV),
        appdata_dir=Path(appdata) if appdata else None,
    )

    return Config(
        log_level=os.environ.get("VAULTWARDEN_MCP_LOG_LEVEL", "INFO").upper(),
        bitwarden=bitwarden,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
