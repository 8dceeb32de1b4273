"""Bounded asynchronous wrappers around blocking filesystem calls."""

from __future__ import annotations

import asyncio
import functools
import os
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 64


class FileSystemIO:
    """Runs filesystem calls in the loop's executor, at most ``max_concurrency`` at a time.

    Every list, stat, read and write is a suspension point. The semaphore is held
    only around the blocking call itself, so callers may recurse freely while
    holding no slot.
    """

    def __init__(self, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency
        self._bound: Optional[Tuple[asyncio.AbstractEventLoop, asyncio.Semaphore]] = None

    async def list_dir(self, path: Path) -> List[str]:
        return await self._run(os.listdir, path)

    async def stat(self, path: Path, *, follow_symlinks: bool = True) -> os.stat_result:
        return await self._run(os.stat, path, follow_symlinks=follow_symlinks)

    async def resolve(self, path: Path) -> Path:
        return await self._run(Path.resolve, path)

    async def read_text(self, path: Path) -> str:
        return await self._run(_read_text, path)

    async def write_text(self, path: Path, text: str) -> None:
        await self._run(_write_text, path, text)

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        async with self._semaphore(loop):
            return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    def _semaphore(self, loop: asyncio.AbstractEventLoop) -> asyncio.Semaphore:
        # One semaphore per event loop; repeated asyncio.run() calls get a fresh one.
        if self._bound is None or self._bound[0] is not loop:
            self._bound = (loop, asyncio.Semaphore(self.max_concurrency))
        return self._bound[1]


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


__all__ = ["DEFAULT_MAX_CONCURRENCY", "FileSystemIO"]
