"""
MCP Server for a Vaultwarden/Bitwarden vault.

Provides a Model Context Protocol (MCP) interface so external models can
read and manage vault items without ever seeing the master password. Runs
locally with stdio transport.

Architecture:
    MCP Client -> stdio -> this server -> VaultOperations -> SessionBroker -> bw CLI

Tools (7):
    - Items: get_secret, list_secrets, create_secret, update_secret, delete_secret
    - Templates: get_secret_template
    - Maintenance: sync

Start:
    python -m vaultwarden_mcp.api.mcp
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError

from vaultwarden_mcp.errors import VaultError
from vaultwarden_mcp.vault.models import (
    CreateSecretParams,
    DeleteSecretParams,
    GetSecretParams,
    ListSecretsParams,
    SyncParams,
    TemplateParams,
    UpdateSecretParams,
)
from vaultwarden_mcp.vault.operations import VaultOperations
from vaultwarden_mcp.vault.templates import TEMPLATE_TYPES

logger = logging.getLogger(__name__)

_UNLOCK_NOTE = " The vault is unlocked automatically."

# ─── Tool Definitions ────────────────────────────────────────────────


def get_tool_definitions() -> list[dict]:
    """Return the list of MCP tool definitions."""
    return [
        {"name": "get_secret", "title": "Get a secret", "description": "Fetch the full details of a vault item by name or ID." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {"name": {"type": "string", "description": "Name or ID of the item to fetch"}}, "required": ["name"]}},
        {"name": "list_secrets", "title": "List secrets", "description": "Search vault items by name and list the matches." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {"search_term": {"type": "string", "description": "Term to search for in item names"}}, "required": ["search_term"]}},
        {"name": "create_secret", "title": "Create a secret", "description": "Create a new vault item. Use get_secret_template first to get the correct JSON structure." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {"item_json": {"type": "string", "description": "The item to create, as a JSON object string"}}, "required": ["item_json"]}},
        {"name": "update_secret", "title": "Update a secret", "description": "Replace an existing vault item with the given JSON." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {"id": {"type": "string", "description": "ID of the item to update"}, "item_json": {"type": "string", "description": "The full updated item, as a JSON object string"}}, "required": ["id", "item_json"]}},
        {"name": "delete_secret", "title": "Delete a secret", "description": "Delete a vault item (moved to trash)." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {"id": {"type": "string", "description": "ID of the item to delete"}}, "required": ["id"]}},
        {"name": "get_secret_template", "title": "Get a secret template", "description": "Return the JSON structure for an item type (login, note, card, identity). Does not access the vault.", "inputSchema": {"type": "object", "properties": {"type": {"type": "string", "description": "Item type to get a template for", "enum": list(TEMPLATE_TYPES)}}, "required": ["type"]}},
        {"name": "sync", "title": "Sync the vault", "description": "Force a sync of the local vault copy with the server." + _UNLOCK_NOTE, "inputSchema": {"type": "object", "properties": {}}},
    ]


# ─── Tool Handlers ───────────────────────────────────────────────────


async def handle_tool_call(
    name: str, arguments: dict[str, Any], ops: VaultOperations
) -> dict[str, Any]:
    """Handle an MCP tool call and return result.

    Failures are returned as {"error": message}; nothing raised by the
    vault layer escapes.
    """
    try:
        if name == "get_secret":
            p = GetSecretParams(**arguments)
            return await ops.get_secret(p.name)

        elif name == "list_secrets":
            p_list = ListSecretsParams(**arguments)
            return await ops.list_secrets(p_list.search_term)

        elif name == "create_secret":
            p_create = CreateSecretParams(**arguments)
            return await ops.create_secret(p_create.item_json)

        elif name == "update_secret":
            p_update = UpdateSecretParams(**arguments)
            return await ops.update_secret(p_update.id, p_update.item_json)

        elif name == "delete_secret":
            p_delete = DeleteSecretParams(**arguments)
            return await ops.delete_secret(p_delete.id)

        elif name == "get_secret_template":
            p_tpl = TemplateParams(**arguments)
            return await ops.get_secret_template(p_tpl.type)

        elif name == "sync":
            SyncParams(**arguments)
            return await ops.sync()

    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(x) for x in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        return {"error": f"Invalid arguments for {name}: {problems}"}
    except VaultError as e:
        logger.info("Tool %s failed: %s", name, e)
        return {"error": str(e)}

    return {"error": f"Unknown tool: {name}"}


# ─── MCP Server ──────────────────────────────────────────────────────


def create_server(ops: VaultOperations):
    """Create and configure the MCP server."""
    import mcp.types as types
    from mcp.server import Server

    from vaultwarden_mcp import __version__
    from vaultwarden_mcp.config import get_config

    server = Server(get_config().server_name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=d["name"],
                title=d["title"],
                description=d["description"],
                inputSchema=d["inputSchema"],
            )
            for d in get_tool_definitions()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
        result = await handle_tool_call(name, arguments or {}, ops)
        if "error" in result:
            # The SDK reports exceptions raised here as isError results.
            raise VaultError(result["error"])
        return [types.TextContent(type="text", text=json.dumps(result, indent=2, default=str))]

    return server


async def run_server():
    """Run the MCP server with stdio transport."""
    from dotenv import find_dotenv, load_dotenv
    from mcp.server.stdio import stdio_server

    from vaultwarden_mcp.config import get_config
    from vaultwarden_mcp.vault import build_operations

    load_dotenv(find_dotenv(usecwd=True))
    cfg = get_config()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    server = create_server(build_operations(cfg))
    logger.info("vaultwarden-mcp started (bw=%s)", cfg.bitwarden.binary)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(run_server())
