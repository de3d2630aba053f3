"""
vaultwarden-mcp — MCP tools for a Vaultwarden/Bitwarden vault via the bw CLI.

The vault is unlocked on demand with the master password from the
environment; the resulting session key is cached briefly and shared by all
tool calls in the process.
"""

__version__ = "0.1.0"
