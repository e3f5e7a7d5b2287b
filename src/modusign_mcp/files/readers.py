"""Local file access for FILE_PATH inputs.

The primary reader uses the filesystem API directly. Some sandboxed hosts hide
paths from that API that a spawned process can still see, so a secondary
reader can be injected to retry through ``cat``. Deployments that must not
spawn processes build the chain without it.

Example:
    >>> reader = build_file_reader(shell_fallback=True)
    >>> content = await reader.read("/Users/me/contract.pdf")
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from modusign_mcp.foundation.errors import FileReadError
from modusign_mcp.runtime.observability import get_logger

log = get_logger("modusign_mcp.files")


@runtime_checkable
class FileReader(Protocol):
    """Reads a whole file. Raises OSError when the path cannot be read."""

    async def read(self, path: str) -> bytes: ...


@dataclass(slots=True, frozen=True)
class LocalFileReader:
    """Reads through the filesystem API in a worker thread."""

    async def read(self, path: str) -> bytes:
        return await asyncio.to_thread(Path(path).read_bytes)


@dataclass(slots=True, frozen=True)
class ShellFileReader:
    """Reads by spawning ``cat -- <path>`` and collecting stdout."""

    command: tuple[str, ...] = ("cat", "--")

    async def read(self, path: str) -> bytes:
        proc = await asyncio.create_subprocess_exec(
            *self.command, path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            raise OSError(f"{self.command[0]} exited with status {proc.returncode}: {detail}")
        return stdout


@dataclass(slots=True, frozen=True)
class FallbackFileReader:
    """Tries ``primary``, then ``secondary`` on OSError; FileReadError if both fail."""

    primary: FileReader
    secondary: FileReader | None = None

    async def read(self, path: str) -> bytes:
        try:
            return await self.primary.read(path)
        except OSError as exc:
            if self.secondary is None:
                raise FileReadError(path, _reason(exc)) from exc
            log.warning("primary read failed, using fallback reader", path=path, reason=_reason(exc))
        try:
            return await self.secondary.read(path)
        except OSError as exc:
            raise FileReadError(path, _reason(exc)) from exc


def build_file_reader(shell_fallback: bool = True) -> FallbackFileReader:
    """Reader chain for FILE_PATH inputs, with or without the shell fallback."""
    return FallbackFileReader(LocalFileReader(), ShellFileReader() if shell_fallback else None)


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)
