import asyncio
import logging
import os
import shlex
import subprocess  # nosec B404 - required to run the benchmark toolchain
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """A finished external process and everything it wrote."""

    command: str
    arguments: str
    working_directory: str
    exit_code: int | None
    stdout: str
    stderr: str
    start_time: datetime
    exit_time: datetime

    @property
    def full_command(self) -> str:
        return f"{self.command} {self.arguments}".strip()

    @property
    def duration_ms(self) -> int:
        return int((self.exit_time - self.start_time).total_seconds() * 1000)


def split_arguments(arguments: str) -> list[str]:
    if not arguments:
        return []
    return shlex.split(arguments, posix=os.name != "nt")


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


class ProcessRuntime:
    """Spawns benchmark processes and enumerates/terminates running ones."""

    async def run(
        self, command: str, arguments: str, working_directory: str | None = None
    ) -> ProcessResult:
        """Start ``command`` and wait for it to exit.

        If the awaiting task is cancelled the process is killed before the
        cancellation propagates.

        Raises:
            OSError: The executable could not be started.
        """
        argv = [command, *split_arguments(arguments)]
        cwd = working_directory or None
        logger.debug("Starting process: %s (cwd=%s)", " ".join(argv), cwd)

        start_time = datetime.now(UTC)
        proc = await asyncio.create_subprocess_exec(  # nosec B603 - plan-defined command
            *argv,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=subprocess.DEVNULL,
        )
        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            raise

        result = ProcessResult(
            command=command,
            arguments=arguments,
            working_directory=working_directory or "",
            exit_code=proc.returncode,
            stdout=_decode(stdout_bytes),
            stderr=_decode(stderr_bytes),
            start_time=start_time,
            exit_time=datetime.now(UTC),
        )
        logger.debug(
            "Process exited: %s (exit %s, %d ms)",
            command,
            result.exit_code,
            result.duration_ms,
        )
        return result

    def get_processes(self, name: str) -> list[psutil.Process]:
        """Return running processes whose executable name (without extension) is ``name``."""
        wanted = Path(name).stem.lower()
        matches: list[psutil.Process] = []
        for proc in psutil.process_iter(["name"]):
            proc_name = proc.info.get("name") or ""
            if Path(proc_name).stem.lower() == wanted:
                matches.append(proc)
        return matches

    def safe_kill(self, proc: psutil.Process) -> bool:
        """Kill ``proc`` and its children; False if it was already gone."""
        try:
            children = proc.children(recursive=True)
        except psutil.Error:
            children = []

        for child in children:
            try:
                child.kill()
            except psutil.Error:
                pass
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            return False
        except psutil.Error as exc:
            logger.debug("Could not kill process %s: %s", proc.pid, exc)
            return False
        return True


__all__ = ["ProcessResult", "ProcessRuntime", "split_arguments"]
