"""In-place rename of the source PDF with pre-flight checks."""

from __future__ import annotations

import logging
import os
import shutil
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from errors import RenameFailed, SourceMissing, TargetExists
from filename_formatter import is_safe_filename

BACKUP_SUFFIX = ".bak"

LOGGER = logging.getLogger(__name__)


def rename_file(source_path: str | Path, target_name: str, backup: bool = False) -> Path:
    """Rename ``source_path`` to ``target_name`` in the same directory.

    Never overwrites: an existing target raises TargetExists. With ``backup``
    a copy of the source is written next to it as ``<name>.bak`` first.
    """
    source = Path(source_path)
    if not is_safe_filename(target_name):
        raise RenameFailed(f"Refusing unsafe target filename: {target_name!r}")
    if not source.exists():
        raise SourceMissing(f"Original file does not exist: {source}")
    if not source.is_file():
        raise SourceMissing(f"Path is not a file: {source}")
    if not os.access(source, os.R_OK):
        raise SourceMissing(f"Original file is not readable: {source}")

    target = source.parent / target_name
    if target.exists():
        raise TargetExists(f"Target file already exists: {target}. Choose a different name.")

    if backup:
        _write_backup(source)

    try:
        with _interrupts_deferred():
            os.rename(source, target)
    except OSError as exc:
        raise RenameFailed(f"Failed to rename {source} to {target}: {exc}") from exc

    LOGGER.info("Renamed %s -> %s", source, target)
    return target


def display_name(path: str | Path) -> str:
    return Path(path).name


def _write_backup(source: Path) -> Path:
    backup_path = source.with_name(source.name + BACKUP_SUFFIX)
    if backup_path.exists():
        raise TargetExists(f"Backup file already exists: {backup_path}")
    try:
        shutil.copy2(source, backup_path)
    except OSError as exc:
        raise RenameFailed(f"Failed to write backup {backup_path}: {exc}") from exc
    LOGGER.info("Backed up %s -> %s", source, backup_path)
    return backup_path


@contextmanager
def _interrupts_deferred() -> Iterator[None]:
    """Ignore Ctrl-C while the rename is in flight."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
