"""bw CLI invocation — bounded async subprocess calls with an explicit env block."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

from vaultwarden_mcp.errors import (
    ExternalToolError,
    ExternalToolTimeoutError,
    UnlockFailedError,
    UnlockTimeoutError,
    redact,
)

logger = logging.getLogger(__name__)


# Env var the child reads the master password from (bw unlock --passwordenv)
UNLOCK_PASSWORD_VAR = "BW_PASSWORD"
SESSION_VAR = "BW_SESSION"


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill the child and wait for it; it may already have exited."""
    with contextlib.suppress(ProcessLookupError):
        proc.kill()
    await proc.wait()


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one bw invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        # bw sometimes writes warnings to stderr on success; only treat
        # stderr as fatal when nothing useful came back on stdout.
        return self.returncode == 0 and not (self.stderr.strip() and not self.stdout.strip())


class BitwardenCLI:
    """Run the Bitwarden CLI (`bw`) as a child process.

    Arguments are passed as an argv list (no shell). Secrets travel only in
    the child's environment block: the master password as BW_PASSWORD for
    unlock, the session key as BW_SESSION for everything else.
    """

    def __init__(
        self,
        binary: str = "bw",
        timeout: float = 40.0,
        appdata_dir: Path | None = None,
    ):
        self.binary = binary
        self.timeout = timeout
        self.appdata_dir = appdata_dir

    def _build_env(self, extra: dict[str, str] | None) -> dict[str, str]:
        env = os.environ.copy()
        # Never let an inherited session or password leak into a call that
        # did not ask for it.
        env.pop(SESSION_VAR, None)
        env.pop(UNLOCK_PASSWORD_VAR, None)
        if self.appdata_dir is not None:
            env["BITWARDENCLI_APPDATA_DIR"] = str(self.appdata_dir)
        if extra:
            env.update(extra)
        return env

    async def run(
        self,
        *args: str,
        session: str | None = None,
        extra_env: dict[str, str] | None = None,
        input: bytes | None = None,
    ) -> CommandResult:
        """Run `bw <args> --nointeraction` and capture its output.

        Raises:
            ExternalToolTimeoutError: If the call exceeds the timeout (the
                child is killed).
            ExternalToolError: If the bw binary cannot be started.
        """
        env_extra = dict(extra_env or {})
        if session is not None:
            env_extra[SESSION_VAR] = session
        env = self._build_env(env_extra)
        cmd = [self.binary, *args, "--nointeraction"]
        label = " ".join(args[:2])

        started = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except FileNotFoundError:
            raise ExternalToolError(
                f"Bitwarden CLI not found: {self.binary!r}. Install it or set "
                "VAULTWARDEN_MCP_BW_BINARY."
            ) from None

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(input), self.timeout)
        except TimeoutError:
            await _reap(proc)
            logger.warning("bw %s timed out after %.0fs", label, self.timeout)
            raise ExternalToolTimeoutError(
                f"bw {label} timed out after {self.timeout:.0f}s"
            ) from None
        except BaseException:
            # Cancelled mid-call: the child still holds BW_SESSION in its env.
            await _reap(proc)
            raise

        logger.debug(
            "bw %s exited %s in %.2fs", label, proc.returncode, time.monotonic() - started
        )
        return CommandResult(
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    async def unlock(self, master_password: str) -> str:
        """Exchange the master password for a raw session key.

        Raises:
            UnlockTimeoutError: bw unlock exceeded the timeout.
            UnlockFailedError: bw unlock failed or printed no key.
        """
        try:
            result = await self.run(
                "unlock",
                "--passwordenv",
                UNLOCK_PASSWORD_VAR,
                "--raw",
                extra_env={UNLOCK_PASSWORD_VAR: master_password},
            )
        except ExternalToolTimeoutError:
            raise UnlockTimeoutError(
                f"Vault unlock timed out after {self.timeout:.0f}s"
            ) from None
        except ExternalToolError as e:
            raise UnlockFailedError(f"Vault unlock failed: {e}") from None

        key = result.stdout.strip()
        if not result.ok:
            detail = redact(result.stderr.strip(), master_password, key) or (
                f"exit code {result.returncode}"
            )
            raise UnlockFailedError(f"Vault unlock failed: {detail}")
        if not key:
            raise UnlockFailedError("Vault unlock returned no session key")
        return key
