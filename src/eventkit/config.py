from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EventkitConfig:
    log_level: str = "WARNING"
    fail_fast: bool = False  # stop the self-check at the first failure
