# patchforge/commit/workspace.py
"""
Filesystem access for the orchestrator.

DirectWorkspace writes through immediately. StagedWorkspace keeps every write
and delete in an in-memory overlay (later patches in the same call read their
own earlier results), then `commit()` stages the bytes to same-directory temp
files and promotes them with os.replace(). If promotion fails part way, files
already promoted are restored from the bytes captured before promotion, and
parent directories created for staging are removed again.
"""
from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from typing import Dict, List, Optional, Tuple

from ..errors.commit import FileReadError, FileWriteError

log = logging.getLogger(__name__)

_STAGE_PREFIX = ".pf-"
_STAGE_SUFFIX = ".tmp"


class DirectWorkspace:
    """Reads and writes the working tree directly."""

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def read_bytes(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise FileReadError(f"Failed to read '{path}': {e}") from e

    def write_bytes(self, path: str, data: bytes) -> None:
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise FileWriteError(f"Failed to write '{path}': {e}") from e

    def delete(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise FileWriteError(f"Failed to delete '{path}': {e}") from e

    def commit(self) -> None:
        pass


class StagedWorkspace(DirectWorkspace):
    """Buffers changes in memory until `commit()`; never writes if it is not called."""

    def __init__(self) -> None:
        # path -> new bytes, or None for a pending delete. Insertion order is promotion order.
        self.pending: Dict[str, Optional[bytes]] = {}
        # Parent directories created while staging, in creation order.
        self.created_dirs: List[str] = []

    def exists(self, path: str) -> bool:
        if path in self.pending:
            return self.pending[path] is not None
        return super().exists(path)

    def read_bytes(self, path: str) -> bytes:
        if path in self.pending:
            data = self.pending[path]
            if data is None:
                raise FileReadError(f"Failed to read '{path}': deleted earlier in this patch")
            return data
        return super().read_bytes(path)

    def write_bytes(self, path: str, data: bytes) -> None:
        self.pending.pop(path, None)
        self.pending[path] = data

    def delete(self, path: str) -> None:
        self.pending.pop(path, None)
        self.pending[path] = None

    def commit(self) -> None:
        staged = self._stage()
        promoted: List[Tuple[str, Optional[bytes]]] = []  # (path, bytes before promotion)
        try:
            for path, data in self.pending.items():
                before = self._snapshot(path)
                if data is None:
                    if os.path.isfile(path):
                        os.remove(path)
                else:
                    os.replace(staged[path], path)
                    del staged[path]
                promoted.append((path, before))
        except OSError as e:
            self._rollback(promoted)
            self._discard(staged)
            self._remove_created_dirs()
            raise FileWriteError(f"Failed to promote staged changes: {e}") from e
        self.pending.clear()
        self.created_dirs.clear()

    # ---------- internals ----------

    def _stage(self) -> Dict[str, str]:
        staged: Dict[str, str] = {}
        for path, data in self.pending.items():
            if data is None:
                continue
            try:
                dirpath = os.path.dirname(path)
                self._make_parents(dirpath)
                fd, tmp = tempfile.mkstemp(prefix=_STAGE_PREFIX, suffix=_STAGE_SUFFIX, dir=dirpath)
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                staged[path] = tmp
            except OSError as e:
                self._discard(staged)
                self._remove_created_dirs()
                raise FileWriteError(f"Failed to stage '{path}': {e}") from e
        return staged

    def _make_parents(self, dirpath: str) -> None:
        missing: List[str] = []
        d = dirpath
        while d and not os.path.isdir(d):
            missing.append(d)
            parent = os.path.dirname(d)
            if parent == d:
                break
            d = parent
        for d in reversed(missing):
            os.mkdir(d)
            self.created_dirs.append(d)

    def _remove_created_dirs(self) -> None:
        # Deepest first; a directory that is no longer empty is left alone.
        for d in reversed(self.created_dirs):
            with contextlib.suppress(OSError):
                os.rmdir(d)
        self.created_dirs.clear()

    @staticmethod
    def _snapshot(path: str) -> Optional[bytes]:
        if not os.path.isfile(path):
            return None
        with open(path, "rb") as f:
            return f.read()

    @staticmethod
    def _discard(staged: Dict[str, str]) -> None:
        for tmp in staged.values():
            with contextlib.suppress(OSError):
                os.remove(tmp)

    @staticmethod
    def _rollback(promoted: List[Tuple[str, Optional[bytes]]]) -> None:
        for path, before in reversed(promoted):
            try:
                if before is None:
                    if os.path.isfile(path):
                        os.remove(path)
                else:
                    with open(path, "wb") as f:
                        f.write(before)
            except OSError as e:
                log.warning(f"Rollback failed for '{path}': {e}")
