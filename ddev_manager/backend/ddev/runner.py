"""
ddev Command Runner.

Spawns the ddev binary with an argv list (never through a shell, so project
names and file paths are passed verbatim and cannot inject), captures
stdout/stderr, and bounds each invocation with a timeout.

Failure mapping:
    binary missing         → ToolNotInstalledError
    non-zero exit          → CommandFailedError (raw stderr as diagnostic)
    timeout                → CommandFailedError (process killed)
    malformed JSON output  → CommandFailedError (run_json only)

Usage:
    runner = CommandRunner()
    result = await runner.run("start", "mysite")
    listing = await runner.run_json("list", "--json-output")
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ddev_manager.backend.core.concurrency import get_semaphore
from ddev_manager.backend.core.exceptions import CommandFailedError, ToolNotInstalledError
from ddev_manager.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Captured output of a finished ddev invocation."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "stdout": self.stdout, "stderr": self.stderr}


class CommandRunner:
    """Time-boxed wrapper around the ddev binary."""

    def __init__(self, binary: str | None = None, timeout: float | None = None) -> None:
        if binary is None or timeout is None:
            from ddev_manager.backend.core.config import get_app_config
            ddev_config = get_app_config().ddev
            binary = binary or ddev_config.binary
            timeout = timeout if timeout is not None else ddev_config.command_timeout_seconds

        self.binary = binary
        self.timeout = timeout

    async def run(
        self,
        *args: str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """
        Run ``ddev *args`` and return its captured output.

        Args:
            *args: Arguments passed to the binary as separate argv entries
            cwd: Working directory for the process
            timeout: Override for the configured timeout in seconds

        Raises:
            ToolNotInstalledError: If the binary cannot be found
            CommandFailedError: On non-zero exit or timeout
        """
        argv = [self.binary, *[str(a) for a in args]]
        effective_timeout = timeout if timeout is not None else self.timeout
        command_text = " ".join(argv)

        logger.debug("Executing ddev command", extra={"argv": argv, "cwd": str(cwd) if cwd else None})

        async with get_semaphore("ddev"):
            try:
                process = await asyncio.create_subprocess_exec(
                    *argv,
                    cwd=str(cwd) if cwd else None,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    stdin=asyncio.subprocess.DEVNULL,
                )
            except FileNotFoundError as e:
                if cwd is not None and not Path(cwd).is_dir():
                    raise CommandFailedError(
                        f"DDEV command failed: working directory does not exist: {cwd}",
                        diagnostic=str(e),
                    ) from e
                logger.error("ddev binary not found", extra={"binary": self.binary})
                raise ToolNotInstalledError() from e
            except PermissionError as e:
                raise CommandFailedError(
                    f"DDEV command failed: {e}",
                    diagnostic=str(e),
                ) from e

            try:
                async with asyncio.timeout(effective_timeout):
                    stdout_bytes, stderr_bytes = await process.communicate()
            except TimeoutError as e:
                process.kill()
                await process.wait()
                logger.error(
                    "ddev command timed out",
                    extra={"command": command_text, "timeout_seconds": effective_timeout},
                )
                raise CommandFailedError(
                    f"DDEV command failed: timed out after {effective_timeout:g}s: {command_text}",
                    diagnostic=f"timeout after {effective_timeout:g}s",
                ) from e

        result = CommandResult(
            args=argv,
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )

        if not result.success:
            diagnostic = result.stderr.strip() or result.stdout.strip() or f"exit code {result.returncode}"
            logger.error(
                "ddev command failed",
                extra={"command": command_text, "returncode": result.returncode, "stderr": diagnostic},
            )
            raise CommandFailedError(f"DDEV command failed: {diagnostic}", diagnostic=diagnostic)

        if result.stderr and "Warning" not in result.stderr:
            logger.warning("ddev command wrote to stderr", extra={"command": command_text, "stderr": result.stderr.strip()})

        return result

    async def run_json(self, *args: str, cwd: str | Path | None = None) -> Any:
        """Run a command that emits JSON on stdout and return the parsed value."""
        result = await self.run(*args, cwd=cwd)
        if not result.stdout.strip():
            return None
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CommandFailedError(
                f"DDEV command failed: could not parse JSON output of {' '.join(args)}",
                diagnostic=str(e),
            ) from e

    async def version(self) -> dict[str, Any]:
        """Return ``ddev version --json-output`` (used by readiness checks)."""
        payload = await self.run_json("version", "--json-output")
        if isinstance(payload, dict):
            raw = payload.get("raw", payload)
            return raw if isinstance(raw, dict) else {"raw": raw}
        return {}
