"""
Append-only log of pipeline stage records.

Entries accumulate across runs for the life of the process and are only
removed by an explicit ``clear()``.
"""

from threading import Lock
from typing import Any, Dict, Iterable, List, Optional

from src.graph.state import LogEntry, StageAgent
from src.config.logger import setup_logger

logger = setup_logger("RunLog", "run_log.log")


class RunLog:
    def __init__(self):
        self._entries: List[LogEntry] = []
        self._lock = Lock()

    def append(self, entries: Iterable[LogEntry]) -> None:
        """Append a group of entries atomically, preserving their order"""
        batch = list(entries)
        with self._lock:
            self._entries.extend(batch)
            size = len(self._entries)
        logger.debug(f"Appended {len(batch)} entries (log size: {size})")

    def entries(self, agent: Optional[StageAgent] = None) -> List[LogEntry]:
        with self._lock:
            snapshot = list(self._entries)
        if agent is None:
            return snapshot
        return [entry for entry in snapshot if entry.agent == agent]

    def clear(self) -> int:
        """Remove every entry; returns how many were dropped"""
        with self._lock:
            dropped = len(self._entries)
            self._entries = []
        logger.info(f"Run log cleared ({dropped} entries removed)")
        return dropped

    def to_records(self, agent: Optional[StageAgent] = None) -> List[Dict[str, Any]]:
        return [entry.model_dump(mode="json") for entry in self.entries(agent)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
