# src/dataflow_core/core/history/__init__.py
"""
Histórico de execuções de jobs (JobRunRecord + stores).
"""

from .store import InMemoryHistoryStore, JobHistoryStore, JobRunRecord, JsonHistoryStore

__all__ = [
    "InMemoryHistoryStore",
    "JobHistoryStore",
    "JobRunRecord",
    "JsonHistoryStore",
]
