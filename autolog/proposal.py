"""
proposal.py - hand an accepted rewrite to the user
===================================================
The proposed text is written to a temp file, shown as a
diff against the source, and then either written over the source or
thrown away. Either way the chat session is cleared so the next task starts
with an empty history.
"""

from __future__ import annotations

import difflib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import portalocker  # type: ignore

from .chat_session import ChatSession

_LOG = logging.getLogger(__name__)

TEMP_PREFIX = "ai_modified_"


def write_locked(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` through a locked temp file and an atomic move."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    with portalocker.Lock(str(tmp), "wb", timeout=5) as fp:
        fp.write(content.encode("utf-8"))
    shutil.move(str(tmp), str(path))


class Proposal:
    def __init__(
        self,
        source_path: Path,
        original: str,
        proposed: str,
        session: Optional[ChatSession] = None,
        temp_dir: Optional[Path] = None,
    ):
        self.source_path = Path(source_path)
        self.original = original
        self.proposed = proposed
        self.session = session
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.temp_path: Optional[Path] = None
        self.closed = False

    @property
    def title(self) -> str:
        return f"Current vs. AI Proposed Changes - {self.source_path.name}"

    def write_temp(self) -> Path:
        self.temp_path = self.temp_dir / f"{TEMP_PREFIX}{self.source_path.name}"
        write_locked(self.temp_path, self.proposed)
        _LOG.debug("Proposal written to %s", self.temp_path)
        return self.temp_path

    def diff(self, context: int = 3) -> str:
        return "\n".join(difflib.unified_diff(
            self.original.splitlines(),
            self.proposed.splitlines(),
            fromfile=f"{self.source_path.name} (current)",
            tofile=f"{self.source_path.name} (AI proposed)",
            n=context,
            lineterm="",
        ))

    def apply(self) -> None:
        """Replace the source file's content with the proposal."""
        self._ensure_open()
        write_locked(self.source_path, self.proposed)
        _LOG.info("Applied AI proposed changes to %s", self.source_path)
        self._close()

    def discard(self) -> None:
        self._ensure_open()
        _LOG.info("Discarded AI proposed changes for %s", self.source_path)
        self._close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError("Proposal was already applied or discarded")

    def _close(self) -> None:
        self.closed = True
        if self.session is not None:
            self.session.clear()
        if self.temp_path is not None:
            try:
                self.temp_path.unlink(missing_ok=True)
            except OSError as exc:
                _LOG.error("Error deleting temporary file %s: %s", self.temp_path, exc)
