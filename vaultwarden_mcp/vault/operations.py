"""
Vault operations — the bw invocations behind each MCP tool.

Every operation except get_secret_template acquires a session from the
shared SessionBroker, runs exactly one bw command with that key in
BW_SESSION, and maps stdout to a result or stderr to ExternalToolError.
Item bodies are never logged.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

from vaultwarden_mcp.errors import ExternalToolError, InvalidItemError, redact
from vaultwarden_mcp.vault.broker import SessionBroker
from vaultwarden_mcp.vault.process import BitwardenCLI, CommandResult
from vaultwarden_mcp.vault.templates import get_template

logger = logging.getLogger(__name__)


def encode_item(item_json: str) -> bytes:
    """Validate item_json and base64-encode it the way `bw encode` does."""
    try:
        item = json.loads(item_json)
    except json.JSONDecodeError as e:
        raise InvalidItemError(f"item_json is not valid JSON: {e.msg} (line {e.lineno})") from None
    if not isinstance(item, dict):
        raise InvalidItemError("item_json must be a JSON object")
    return base64.b64encode(json.dumps(item).encode("utf-8"))


class VaultOperations:
    """The seven vault tools, bound to one broker and one bw CLI."""

    def __init__(self, broker: SessionBroker, cli: BitwardenCLI):
        self.broker = broker
        self.cli = cli

    async def _run(
        self, action: str, *args: str, input: bytes | None = None
    ) -> CommandResult:
        session = await self.broker.acquire_session()
        result = await self.cli.run(*args, session=session, input=input)
        if not result.ok:
            detail = redact(result.stderr.strip(), session) or f"exit code {result.returncode}"
            logger.warning("%s failed: %s", action, detail)
            raise ExternalToolError(
                f"{action} failed: {detail}",
                returncode=result.returncode,
                stderr=detail,
            )
        return result

    @staticmethod
    def _parse(action: str, stdout: str) -> Any:
        try:
            return json.loads(stdout)
        except json.JSONDecodeError:
            raise ExternalToolError(f"{action}: bw returned non-JSON output") from None

    async def get_secret(self, name: str) -> dict[str, Any]:
        result = await self._run("get_secret", "get", "item", name)
        logger.info("Fetched item %r", name)
        return self._parse("get_secret", result.stdout)  # type: ignore[no-any-return]

    async def list_secrets(self, search_term: str) -> dict[str, Any]:
        result = await self._run("list_secrets", "list", "items", "--search", search_term)
        items = self._parse("list_secrets", result.stdout)
        logger.info("Search %r matched %d item(s)", search_term, len(items))
        return {"items": items, "count": len(items)}

    async def create_secret(self, item_json: str) -> dict[str, Any]:
        encoded = encode_item(item_json)
        result = await self._run("create_secret", "create", "item", input=encoded)
        created = self._parse("create_secret", result.stdout)
        logger.info("Created item %s", created.get("id") if isinstance(created, dict) else "?")
        return created  # type: ignore[no-any-return]

    async def update_secret(self, item_id: str, item_json: str) -> dict[str, Any]:
        encoded = encode_item(item_json)
        result = await self._run("update_secret", "edit", "item", item_id, input=encoded)
        logger.info("Updated item %s", item_id)
        return self._parse("update_secret", result.stdout)  # type: ignore[no-any-return]

    async def delete_secret(self, item_id: str) -> dict[str, Any]:
        result = await self._run("delete_secret", "delete", "item", item_id)
        logger.info("Deleted item %s", item_id)
        return {"success": True, "message": result.stdout.strip() or "Item deleted."}

    async def get_secret_template(self, item_type: str) -> dict[str, Any]:
        return get_template(item_type)

    async def sync(self) -> dict[str, Any]:
        result = await self._run("sync", "sync")
        logger.info("Vault synced")
        return {"success": True, "message": result.stdout.strip() or "Sync complete."}
