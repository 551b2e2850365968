"""
Memory Package

- run_log: RunLog, the append-only record of every stage across runs
"""

from src.memory.run_log import RunLog

__all__ = ["RunLog"]
