"""
Vault access through the Bitwarden CLI with a brokered unlock session.

Public API:
    build_operations(cfg)     → VaultOperations wired to one shared broker
    SessionBroker             → cached, serialized `bw unlock`
    BitwardenCLI              → bounded `bw` subprocess calls
    get_template(type)        → item JSON template (no vault access)
"""

from __future__ import annotations

from vaultwarden_mcp.config import Config, get_config
from vaultwarden_mcp.vault.broker import SessionBroker, SessionCredential
from vaultwarden_mcp.vault.operations import VaultOperations
from vaultwarden_mcp.vault.process import BitwardenCLI, CommandResult
from vaultwarden_mcp.vault.templates import TEMPLATE_TYPES, get_template


def build_operations(cfg: Config | None = None) -> VaultOperations:
    """Create the process-wide CLI, broker and operations from config."""
    bw = (cfg or get_config()).bitwarden
    cli = BitwardenCLI(binary=bw.binary, timeout=bw.command_timeout, appdata_dir=bw.appdata_dir)
    broker = SessionBroker(cli, bw)
    return VaultOperations(broker, cli)


__all__ = [
    "BitwardenCLI",
    "CommandResult",
    "SessionBroker",
    "SessionCredential",
    "TEMPLATE_TYPES",
    "VaultOperations",
    "build_operations",
    "get_template",
]
