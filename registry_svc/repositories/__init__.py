"""
Repository layer for database access.

This module contains all MongoDB access, encapsulating driver calls and
error capture.
"""
from repositories.base import DocumentStore
from repositories.record_repository import RecordRepository

__all__ = [
    "DocumentStore",
    "RecordRepository",
]
