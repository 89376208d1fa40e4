"""
Duplicate-upload detection by content fingerprint.

Only the fingerprint of the most recent upload is remembered, so this catches
back-to-back re-submission of the same file (a double-clicked submit button),
not a re-upload after some other file went through.
"""

import hashlib
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class ChecksumResult:
    is_duplicate: bool
    fingerprint: str


class ChecksumState:
    """
    Single-slot holder for the fingerprint of the last accepted upload.

    Starts empty; a process restart clears it. The lock makes compare-and-set
    one step so two concurrent uploads of the same file cannot both pass.
    """

    def __init__(self, fingerprint: Optional[str] = None):
        self._fingerprint = fingerprint
        self._lock = threading.Lock()

    @property
    def fingerprint(self) -> Optional[str]:
        with self._lock:
            return self._fingerprint

    def compare_and_set(self, fingerprint: str) -> bool:
        """Store ``fingerprint`` unless it equals the current one.

        Returns:
            True if the fingerprint was already stored (a duplicate)
        """
        with self._lock:
            if self._fingerprint == fingerprint:
                return True
            self._fingerprint = fingerprint
            return False

    def reset(self) -> None:
        with self._lock:
            self._fingerprint = None


def compute_fingerprint(chunks: Iterable[bytes]) -> str:
    """SHA-256 hex digest over a stream of byte chunks."""
    digest = hashlib.sha256()
    for chunk in chunks:
        digest.update(chunk)
    return digest.hexdigest()


def _read_chunks(file_path: Path):
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            yield chunk


class ChecksumGate:
    """Rejects an upload whose bytes match the previous upload exactly."""

    def __init__(self, state: Optional[ChecksumState] = None):
        self.state = state if state is not None else ChecksumState()

    def check(self, file_bytes: bytes) -> ChecksumResult:
        """Fingerprint ``file_bytes`` and compare against the last upload.

        A new fingerprint replaces the stored one; a duplicate leaves it untouched.
        """
        return self._check_fingerprint(compute_fingerprint([file_bytes]))

    def check_file(self, file_path: Union[str, Path]) -> ChecksumResult:
        """Same as :meth:`check`, streaming the file from disk in chunks."""
        return self._check_fingerprint(compute_fingerprint(_read_chunks(Path(file_path))))

    def _check_fingerprint(self, fingerprint: str) -> ChecksumResult:
        is_duplicate = self.state.compare_and_set(fingerprint)
        if is_duplicate:
            logger.info(f"Duplicate upload rejected (fingerprint {fingerprint[:12]})")
        else:
            logger.debug(f"Upload fingerprint recorded: {fingerprint[:12]}")
        return ChecksumResult(is_duplicate=is_duplicate, fingerprint=fingerprint)
