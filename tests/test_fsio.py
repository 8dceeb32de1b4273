"""Tests for sourcepage.fsio."""

from __future__ import annotations

import asyncio
import threading
import time
from pathlib import Path

import pytest

from sourcepage.fsio import FileSystemIO


class PeakCounter:
    """Tracks how many blocking calls run at the same time."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.current = 0
        self.peak = 0

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
        try:
            time.sleep(seconds)
        finally:
            with self._lock:
                self.current -= 1


async def _run_many(io: FileSystemIO, counter: PeakCounter, count: int) -> None:
    await asyncio.gather(*(io._run(counter.sleep, 0.02) for _ in range(count)))


def test_blocking_calls_are_capped_at_max_concurrency() -> None:
    io = FileSystemIO(2)
    counter = PeakCounter()

    asyncio.run(_run_many(io, counter, 8))

    assert 1 <= counter.peak <= 2


def test_limiter_rebinds_to_each_event_loop() -> None:
    io = FileSystemIO(2)
    first, second = PeakCounter(), PeakCounter()

    asyncio.run(_run_many(io, first, 6))
    asyncio.run(_run_many(io, second, 6))

    assert first.peak <= 2
    assert second.peak <= 2


def test_rejects_non_positive_concurrency() -> None:
    with pytest.raises(ValueError):
        FileSystemIO(0)


def test_write_then_read_creates_parents(tmp_path: Path) -> None:
    io = FileSystemIO()
    target = tmp_path / "nested" / "dir" / "page.html"

    async def _roundtrip() -> str:
        await io.write_text(target, "<p>hi</p>")
        return await io.read_text(target)

    assert asyncio.run(_roundtrip()) == "<p>hi</p>"


def test_read_replaces_undecodable_bytes(tmp_path: Path) -> None:
    target = tmp_path / "blob.bin"
    target.write_bytes(b"ok \xff\xfe end")

    text = asyncio.run(FileSystemIO().read_text(target))

    assert text.startswith("ok ")
    assert text.endswith(" end")
    assert "�" in text
