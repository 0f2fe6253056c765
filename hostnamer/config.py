from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    scheme_path: Optional[Path]
    state_path: Path
    audit_path: Path


def get_settings() -> Settings:
    scheme = os.getenv("HOSTNAMER_SCHEME")
    return Settings(
        scheme_path=Path(scheme) if scheme else None,
        state_path=Path(os.getenv("HOSTNAMER_STATE", "hostnamer_state.json")),
        audit_path=Path(os.getenv("HOSTNAMER_AUDIT_LOG", "hostnamer_audit.jsonl")),
    )
