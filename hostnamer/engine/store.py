from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from hostnamer.models import Snapshot


class SnapshotStore:
    def load(self) -> Optional[Snapshot]:
        raise NotImplementedError

    def save(self, snapshot: Snapshot) -> None:
        raise NotImplementedError


class MemorySnapshotStore(SnapshotStore):
    def __init__(self, snapshot: Optional[Snapshot] = None):
        self.snapshot = snapshot
        self.saves = 0

    def load(self) -> Optional[Snapshot]:
        return self.snapshot

    def save(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot.model_copy(deep=True)
        self.saves += 1


class FileSnapshotStore(SnapshotStore):
    """
    Simple file-backed store.
    Keeps the whole snapshot in a single JSON file.

    A corrupt or unreadable file never blocks the generator: load() returns
    None (defaults only) and keeps the reason in `last_error`.
    """

    def __init__(self, path: Path):
        self._path = path
        self.last_error: Optional[str] = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Snapshot]:
        self.last_error = None
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return Snapshot.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            self.last_error = f"{type(e).__name__}: {e}"
            return None

    def save(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = snapshot.model_dump()
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
