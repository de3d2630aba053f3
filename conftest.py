"""
Root-level shared test fixtures.

Inherited by the vault suite under vaultwarden_mcp/vault/tests and the
top-level tests/ directory.
"""

from __future__ import annotations

import pytest

from vaultwarden_mcp.config import reset_config


@pytest.fixture
def clean_env(monkeypatch):
    """Remove env vars that leak between tests and reset the config singleton."""
    for key in [
        "BW_MASTER_PASSWORD",
        "BW_SESSION",
        "BITWARDENCLI_APPDATA_DIR",
        "VAULTWARDEN_MCP_BW_BINARY",
        "VAULTWARDEN_MCP_COMMAND_TIMEOUT",
        "VAULTWARDEN_MCP_SESSION_TTL",
        "VAULTWARDEN_MCP_PASSWORD_ENV",
        "VAULTWARDEN_MCP_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
