import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

PREFERRED_ENCODINGS = ("utf-8",)


def decode_results(raw: bytes) -> str:
    """Decode result bytes, detecting the encoding when they are not UTF-8.

    The Windows run script may write the engine log in the console code page
    or as UTF-16.
    """
    for enc in PREFERRED_ENCODINGS:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue

    best = from_bytes(raw).best()
    if best is None:
        logger.warning("Could not detect results encoding, decoding as UTF-8 with replacement")
        return raw.decode("utf-8", errors="replace")
    logger.debug("Detected results encoding %s", best.encoding)
    return str(best)


@dataclass(frozen=True)
class ResultArtifact:
    path: str
    exists: bool
    content: str | None = None
    cancelled: bool = False
    """Cancellation was requested before the file was checked; ``exists`` is unknown."""


class ResultArtifactGate:
    """Owns the benchmark result file: clears it before a run, loads it after."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def clear(self) -> bool:
        """Delete a result left over from a previous run. Returns True if one was removed."""
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info("Removed stale results file %s", self.path)
        return True

    async def load(self, cancel_event: asyncio.Event | None = None) -> ResultArtifact:
        """Read the result file.

        Returns a ``cancelled`` artifact without touching the file when
        cancellation was requested, and one with ``exists=False`` when the file
        is missing.
        """
        if cancel_event is not None and cancel_event.is_set():
            return ResultArtifact(path=str(self.path), exists=False, cancelled=True)
        if not self.path.is_file():
            logger.warning("Results file not found at %s", self.path)
            return ResultArtifact(path=str(self.path), exists=False)

        raw = await asyncio.to_thread(self.path.read_bytes)
        content = decode_results(raw)
        logger.debug("Loaded %d characters from %s", len(content), self.path)
        return ResultArtifact(path=str(self.path), exists=True, content=content)
