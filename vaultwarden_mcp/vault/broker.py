"""
Session broker — one cached, serialized bw unlock shared by every tool call.

The broker holds the only shared mutable state in the process: the cached
session credential and the unlock gate. The gate is the in-flight unlock
task itself. While it is set, callers that need a fresh key await that
task instead of starting their own unlock, so a burst of calls against an
expired cache produces exactly one `bw unlock`, and every waiter sees the
same key or the same error.

A failed unlock never touches the cache, so the next call retries cleanly.

Security Note:
    The master password is read from the environment only inside the
    unlock task and is handed straight to the child's environment block.
    It is never stored on the broker, logged, or included in an error.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from vaultwarden_mcp.config import BitwardenConfig
from vaultwarden_mcp.vault.process import BitwardenCLI

logger = logging.getLogger(__name__)


def _retrieve_exception(task: asyncio.Task[str]) -> None:
    # Every waiter may be cancelled before a failed unlock finishes; mark the
    # error as seen so the loop does not report it at garbage collection.
    if not task.cancelled():
        task.exception()


@dataclass(frozen=True)
class SessionCredential:
    """An unlocked session key and the monotonic deadline it is trusted until."""

    key: str | None = None
    expires_at: float = 0.0

    def is_valid(self, now: float) -> bool:
        return self.key is not None and self.expires_at > now

    def __repr__(self) -> str:
        state = "set" if self.key else "empty"
        return f"SessionCredential(key=<{state}>, expires_at={self.expires_at:.3f})"


class SessionBroker:
    """Obtain and cache a vault session key for concurrent callers.

    Construct once per process and pass the same instance to every
    operation handler.
    """

    def __init__(
        self,
        cli: BitwardenCLI,
        config: BitwardenConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cli = cli
        self._config = config or BitwardenConfig()
        self._clock = clock
        self._credential = SessionCredential()
        self._unlock_task: asyncio.Task[str] | None = None

    def __repr__(self) -> str:
        return f"SessionBroker(credential={self._credential!r}, unlocking={self.unlocking})"

    @property
    def session_ttl(self) -> float:
        return self._config.session_ttl

    @property
    def unlocking(self) -> bool:
        """True while an unlock is in flight (the gate is held)."""
        return self._unlock_task is not None

    @property
    def credential(self) -> SessionCredential:
        return self._credential

    def has_valid_session(self) -> bool:
        return self._credential.is_valid(self._clock())

    async def acquire_session(self) -> str:
        """Return a session key, unlocking the vault if the cache is stale.

        Raises:
            ConfigurationError: The master password is not configured.
            UnlockFailedError: bw unlock failed or returned nothing.
            UnlockTimeoutError: bw unlock exceeded the command timeout.
        """
        if self._unlock_task is None:
            if self._credential.is_valid(self._clock()):
                return self._credential.key  # type: ignore[return-value]
            self._unlock_task = asyncio.create_task(self._unlock())
            self._unlock_task.add_done_callback(_retrieve_exception)
        else:
            logger.debug("Unlock already in flight; waiting for it")

        # shield: a cancelled caller must not cancel the unlock the other
        # waiters depend on.
        return await asyncio.shield(self._unlock_task)

    async def _unlock(self) -> str:
        started = self._clock()
        try:
            password = self._config.master_password()
            key = await self._cli.unlock(password)
            self._credential = SessionCredential(
                key=key, expires_at=self._clock() + self._config.session_ttl
            )
            logger.info(
                "Vault unlocked in %.2fs; session cached for %.0fs",
                self._clock() - started,
                self._config.session_ttl,
            )
            return key
        except Exception as e:
            logger.warning("Vault unlock failed: %s", e)
            raise
        finally:
            self._unlock_task = None
