"""
vaultwarden-mcp CLI — entry point for all operations.

Usage:
    vaultwarden-mcp mcp        # Start the MCP server (stdio)
    vaultwarden-mcp status     # Show configuration and vault status
    vaultwarden-mcp version    # Show version
"""

from __future__ import annotations

import argparse
import sys


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vaultwarden-mcp",
        description="vaultwarden-mcp — MCP tools for a Vaultwarden vault via the Bitwarden CLI.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    # mcp
    subparsers.add_parser("mcp", help="Start the MCP server (stdio transport)")

    # status
    subparsers.add_parser("status", help="Show configuration and vault status")

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from vaultwarden_mcp import __version__

        print(f"vaultwarden-mcp {__version__}")
        return 0

    if args.command == "mcp":
        return _cmd_mcp()
    elif args.command == "status":
        return _cmd_status(args)
    else:
        parser.print_help()
        return 0


def _cmd_mcp() -> int:
    import asyncio

    try:
        from vaultwarden_mcp.api.mcp import run_server
    except ImportError as e:
        print(f"Error: MCP dependencies missing: {e}")
        print("Install with: pip install mcp")
        return 1

    asyncio.run(run_server())
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    import asyncio
    import json
    import shutil

    from vaultwarden_mcp import __version__
    from vaultwarden_mcp.config import get_config
    from vaultwarden_mcp.errors import VaultError
    from vaultwarden_mcp.vault.process import BitwardenCLI

    try:
        cfg = get_config()
    except VaultError as e:
        print(f"Error: {e}")
        return 1
    bw = cfg.bitwarden
    print(f"vaultwarden-mcp v{__version__}")
    print()

    located = shutil.which(bw.binary)
    print(f"  bw binary:        {bw.binary} ({located or 'NOT FOUND'})")
    print(f"  Master password:  ${bw.password_env} {'set' if bw.has_master_password() else 'NOT SET'}")
    print(f"  Command timeout:  {bw.command_timeout:.0f}s")
    print(f"  Session TTL:      {bw.session_ttl:.0f}s")
    if bw.appdata_dir:
        print(f"  App data dir:     {bw.appdata_dir}")

    if located is None:
        return 1

    cli = BitwardenCLI(binary=bw.binary, timeout=bw.command_timeout, appdata_dir=bw.appdata_dir)
    try:
        result = asyncio.run(cli.run("status"))
        state = json.loads(result.stdout)
    except (VaultError, ValueError) as e:
        print(f"  Vault:            UNREACHABLE — {e}")
        return 1

    print(f"  Vault:            {state.get('status', '?')}")
    print(f"  Server:           {state.get('serverUrl') or 'default'}")
    print(f"  Account:          {state.get('userEmail') or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
