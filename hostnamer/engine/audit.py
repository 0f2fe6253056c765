from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class AuditLogEntry:
    timestamp: str
    action: str  # "generate" | "add" | "remove"
    category: str
    detail: str
    hostnames: tuple[str, ...] = ()
    sector: Optional[str] = None


class AuditLogger:
    """
    Simple JSONL audit logger.
    Appends one JSON record per generator mutation
    """

    def __init__(self, path: Path):
        self._path = path

    def log(self, entry: AuditLogEntry) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        record = asdict(entry)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False))
            f.write("\n")

    def read(self) -> list[dict]:
        if not self._path.exists():
            return []
        with self._path.open("r", encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    @staticmethod
    def now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()
