"""
Database backup service.
Periodic snapshots of the SQLite store.
"""
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from ..config import Settings
from ..db import Store


logger = structlog.get_logger(__name__)

BACKUP_PREFIX = "db-backup-"
BACKUP_SUFFIX = ".db"


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """
    ISO-8601 UTC timestamp safe for file names.

    ``2024-01-01T09:30:00.123Z`` becomes ``2024-01-01T09-30-00-123Z``; names
    built from it sort chronologically.
    """
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def default_backup_dir(store: Store) -> Optional[str]:
    if not store.database_path:
        return None
    return os.path.join(os.path.dirname(store.database_path), "backups")


def list_backups(backup_dir: str) -> List[str]:
    if not os.path.isdir(backup_dir):
        return []
    names = [
        n for n in os.listdir(backup_dir)
        if n.startswith(BACKUP_PREFIX) and n.endswith(BACKUP_SUFFIX)
    ]
    return [os.path.join(backup_dir, n) for n in sorted(names)]


def prune_backups(backup_dir: str, keep: int) -> List[str]:
    """Delete the oldest snapshots so that at most ``keep`` remain. ``keep <= 0`` keeps all."""
    if keep <= 0:
        return []
    backups = list_backups(backup_dir)
    stale = backups[:-keep] if len(backups) > keep else []
    for path in stale:
        os.remove(path)
        logger.info("backup_pruned", path=path)
    return stale


def _snapshot(store: Store, target: str) -> None:
    # SQLite's online backup copies a single consistent snapshot, WAL contents
    # included, while other connections keep reading and writing
    raw = store.engine.raw_connection()
    try:
        dest = sqlite3.connect(target)
        try:
            raw.driver_connection.backup(dest)
        finally:
            dest.close()
    finally:
        raw.close()


def create_backup(store: Store, backup_dir: Optional[str] = None, keep: int = 0, now: Optional[datetime] = None) -> str:
    """
    Write a snapshot of the live database into ``backup_dir``.

    Args:
        store: Store whose database is snapshotted
        backup_dir: Target directory, created when missing (default: ``backups/`` beside the database)
        keep: Number of snapshots to retain afterwards (0 keeps all)
        now: Timestamp to embed in the file name (default: current UTC time)

    Returns:
        Path of the new snapshot
    """
    source = store.database_path
    if not source:
        raise ValueError("Backups need a file-backed SQLite database")
    backup_dir = backup_dir or default_backup_dir(store)
    os.makedirs(backup_dir, exist_ok=True)

    target = os.path.join(backup_dir, f"{BACKUP_PREFIX}{backup_timestamp(now)}{BACKUP_SUFFIX}")
    _snapshot(store, target)
    logger.info("backup_created", path=target)

    prune_backups(backup_dir, keep)
    return target


class BackupScheduler:
    """Takes a snapshot every ``interval_seconds`` on a daemon thread.

    The first snapshot is taken one full interval after ``start``. A failed
    snapshot is logged and the scheduler waits for the next tick.
    """

    def __init__(self, store: Store, interval_seconds: float, backup_dir: Optional[str] = None, keep: int = 0):
        self.store = store
        self.interval_seconds = interval_seconds
        self.backup_dir = backup_dir
        self.keep = keep
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_settings(cls, store: Store, settings: Settings) -> "BackupScheduler":
        return cls(
            store,
            interval_seconds=settings.backup_interval_hours * 60 * 60,
            backup_dir=settings.backup_dir,
            keep=settings.backup_keep,
        )

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> Optional[str]:
        try:
            return create_backup(self.store, self.backup_dir, keep=self.keep)
        except Exception as e:
            logger.error("backup_failed", error=str(e))
            return None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="backup-scheduler", daemon=True)
        self._thread.start()
        logger.info("backup_scheduler_started", interval_seconds=self.interval_seconds)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("backup_scheduler_stopped")
