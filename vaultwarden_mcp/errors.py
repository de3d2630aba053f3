"""
Error taxonomy for vaultwarden-mcp.

Every failure a tool call can surface derives from VaultError so the MCP
layer can turn it into an error result with a single except clause.
Messages must never contain the master password or a session key; use
redact() on any text that came back from the bw process.
"""

from __future__ import annotations

REDACTED = "***"


class VaultError(Exception):
    """Base class for all vault-facing failures."""


class ConfigurationError(VaultError):
    """Required configuration is missing or invalid (operator action needed)."""


class UnlockError(VaultError):
    """The vault could not be unlocked. Transient; the next call retries."""


class UnlockFailedError(UnlockError):
    """bw unlock reported an error or printed no session key."""


class UnlockTimeoutError(UnlockError):
    """bw unlock did not finish within the command timeout."""


class ExternalToolError(VaultError):
    """A bw invocation for an operation reported a diagnostic."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ExternalToolTimeoutError(ExternalToolError):
    """A bw invocation for an operation exceeded the command timeout."""


class TemplateNotFoundError(VaultError):
    """No item template exists for the requested type."""


class InvalidItemError(VaultError):
    """item_json could not be parsed into a JSON object."""


def redact(text: str, *secrets: str | None) -> str:
    """Replace every occurrence of each non-empty secret in text."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text
