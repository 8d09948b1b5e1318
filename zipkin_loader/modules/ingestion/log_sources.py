"""
Log sources that hand raw text lines to the loader.

Two sources exist:
- FileReplaySource: reads complete files once (finite input)
- TailSource: follows live files through ``tail -0F`` (never ends on its own)

Both are async iterators of lines without the trailing newline and yield to
the event loop between lines so the pump keeps firing during long reads.
"""

import asyncio
import gzip
from typing import AsyncIterator, List, Sequence

from zipkin_loader.logger import logger


class FileReplaySource:
    """Replays static log files, one async line stream per file."""

    def __init__(self, paths: Sequence[str], yield_every: int = 100):
        """
        Initialize replay source.

        Args:
            paths: Log files to read (``.gz`` files are decompressed)
            yield_every: Lines read between explicit yields to the event loop
        """
        self.paths: List[str] = list(paths)
        self.yield_every = max(1, yield_every)

    def _open(self, path: str):
        if path.endswith(".gz"):
            return gzip.open(path, "rt", encoding="utf-8", errors="replace")
        return open(path, "r", encoding="utf-8", errors="replace")

    async def lines(self, path: str) -> AsyncIterator[str]:
        """Yield the lines of one file in order."""
        count = 0
        with self._open(path) as f:
            for line in f:
                yield line.rstrip("\n")
                count += 1
                if count % self.yield_every == 0:
                    await asyncio.sleep(0)
        logger.debug(f"Replayed {count} lines from {path}")

    def streams(self) -> List[AsyncIterator[str]]:
        return [self.lines(path) for path in self.paths]


class TailSource:
    """Follows live log files with ``tail -0F``."""

    def __init__(self, paths: Sequence[str], tail_binary: str = "tail"):
        self.paths: List[str] = list(paths)
        self.tail_binary = tail_binary
        self.process = None

    async def lines(self) -> AsyncIterator[str]:
        """Yield new lines until the tail process exits."""
        self.process = await asyncio.create_subprocess_exec(
            self.tail_binary,
            "-0F",
            *self.paths,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
        )
        logger.info(f"tail running with pid {self.process.pid}")

        assert self.process.stdout is not None
        while True:
            raw = await self.process.stdout.readline()
            if not raw:
                break
            yield raw.decode("utf-8", errors="replace").rstrip("\n")

        code = await self.process.wait()
        logger.error(f"tail exited with code {code}")
