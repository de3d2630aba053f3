"""
Test fixtures for the vault package.

The fake CLI subclasses BitwardenCLI and only replaces run(), so the real
unlock() parsing and error mapping are exercised against scripted output.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from vaultwarden_mcp.config import BitwardenConfig
from vaultwarden_mcp.vault.broker import SessionBroker
from vaultwarden_mcp.vault.operations import VaultOperations
from vaultwarden_mcp.vault.process import BitwardenCLI, CommandResult

TEST_PASSWORD_ENV = "TEST_BW_MASTER_PASSWORD"
MASTER_PASSWORD = "correct horse battery staple"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBitwarden(BitwardenCLI):
    """Records every invocation and replays scripted results per command."""

    def __init__(self) -> None:
        super().__init__(binary="bw", timeout=40.0)
        self.calls: list[dict[str, Any]] = []
        self.responses: dict[str, list[CommandResult | Exception]] = {}
        self.unlock_gate: asyncio.Event | None = None
        self._sessions_issued = 0

    def respond(self, command: str, *results: CommandResult | Exception) -> None:
        self.responses.setdefault(command, []).extend(results)

    def calls_for(self, command: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["args"][0] == command]

    @property
    def unlock_calls(self) -> list[dict[str, Any]]:
        return self.calls_for("unlock")

    async def run(
        self,
        *args: str,
        session: str | None = None,
        extra_env: dict[str, str] | None = None,
        input: bytes | None = None,
    ) -> CommandResult:
        self.calls.append(
            {"args": args, "session": session, "env": dict(extra_env or {}), "input": input}
        )
        command = args[0]
        if command == "unlock" and self.unlock_gate is not None:
            await self.unlock_gate.wait()
        else:
            await asyncio.sleep(0)

        queued = self.responses.get(command)
        if queued:
            result = queued.pop(0)
        elif command == "unlock":
            self._sessions_issued += 1
            result = CommandResult(0, f"session-key-{self._sessions_issued}\n", "")
        else:
            result = CommandResult(0, "{}", "")
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_bw() -> FakeBitwarden:
    return FakeBitwarden()


@pytest.fixture
def bw_config() -> BitwardenConfig:
    return BitwardenConfig(password_env=TEST_PASSWORD_ENV)


@pytest.fixture
def master_password(monkeypatch) -> str:
    monkeypatch.setenv(TEST_PASSWORD_ENV, MASTER_PASSWORD)
    return MASTER_PASSWORD


@pytest.fixture
def broker(fake_bw: FakeBitwarden, bw_config: BitwardenConfig, clock: FakeClock) -> SessionBroker:
    return SessionBroker(fake_bw, bw_config, clock=clock)


@pytest.fixture
def ops(broker: SessionBroker, fake_bw: FakeBitwarden) -> VaultOperations:
    return VaultOperations(broker, fake_bw)
