"""File system capability provider."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from .base import CapabilityProvider

logger = logging.getLogger(__name__)


def _require(params: Mapping[str, Any], key: str) -> Any:
    value = (params or {}).get(key)
    if value in (None, ""):
        raise ValueError(f"Missing required parameter '{key}'")
    return value


class FileProvider(CapabilityProvider):
    """Read, write, copy, move, delete and search files.

    Blocking file system calls are pushed to a worker thread so a slow disk
    never stalls the event loop.
    """

    name = "files"
    dangerous_actions = frozenset({"file_delete"})

    def actions(self) -> Mapping[str, Callable[[Any], Any]]:
        return {
            "file_read": self.read,
            "file_write": self.write,
            "file_copy": self.copy,
            "file_move": self.move,
            "file_delete": self.delete,
            "file_search": self.search,
        }

    def describe(self) -> Dict[str, str]:
        return {
            "file_read": "Read a UTF-8 text file (path)",
            "file_write": "Write text to a file, creating parent directories (path, content)",
            "file_copy": "Copy a file or directory (from, to)",
            "file_move": "Move a file or directory (from, to)",
            "file_delete": "Delete a file or directory tree (path)",
            "file_search": "Glob for files under a directory (pattern, directory)",
        }

    # ------------------------------------------------------------------
    async def read(self, params: Mapping[str, Any]) -> str:
        path = Path(_require(params, "path"))
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Failed to read file: {exc}") from exc

    async def write(self, params: Mapping[str, Any]) -> bool:
        path = Path(_require(params, "path"))
        content = params.get("content", "")
        if not isinstance(content, str):
            content = str(content)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise RuntimeError(f"Failed to write file: {exc}") from exc
        logger.debug(f"Wrote {len(content)} characters to {path}")
        return True

    async def copy(self, params: Mapping[str, Any]) -> bool:
        source = Path(_require(params, "from"))
        target = Path(_require(params, "to"))

        def _copy() -> None:
            if source.is_dir():
                shutil.copytree(source, target, dirs_exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)

        try:
            await asyncio.to_thread(_copy)
        except OSError as exc:
            raise RuntimeError(f"Failed to copy file: {exc}") from exc
        return True

    async def move(self, params: Mapping[str, Any]) -> bool:
        source = Path(_require(params, "from"))
        target = Path(_require(params, "to"))
        try:
            await asyncio.to_thread(shutil.move, str(source), str(target))
        except OSError as exc:
            raise RuntimeError(f"Failed to move file: {exc}") from exc
        return True

    async def delete(self, params: Mapping[str, Any]) -> bool:
        path = Path(_require(params, "path"))

        def _delete() -> None:
            if path.is_dir():
                shutil.rmtree(path)
            elif path.exists():
                path.unlink()

        try:
            await asyncio.to_thread(_delete)
        except OSError as exc:
            raise RuntimeError(f"Failed to delete file: {exc}") from exc
        return True

    async def search(self, params: Mapping[str, Any]) -> list[str]:
        pattern = _require(params, "pattern")
        directory = Path(params.get("directory") or ".")

        def _search() -> list[str]:
            return sorted(str(p.relative_to(directory)) for p in directory.glob(pattern))

        return await asyncio.to_thread(_search)
