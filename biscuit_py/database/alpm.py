"""
ALPM local database reader for Biscuit.

This module reads the pacman local package database directly from disk.
Each installed package is a ``<name>-<version>`` directory under
``<db_path>/local`` holding a ``desc`` file made of ``%SECTION%`` headers
followed by value lines and a blank line.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List

from biscuit_py.database import BaseDatabase
from biscuit_py.errors import DatabaseError
from biscuit_py.snapshot import PackageRecord

logger = logging.getLogger("biscuit.database.alpm")

LOCAL_DB_NAME = "local"
DB_VERSION_FILE = "ALPM_DB_VERSION"
SUPPORTED_DB_VERSION = 9


def parse_desc(text: str) -> Dict[str, List[str]]:
    """
    Parse the contents of a package ``desc`` file.

    Args:
        text: File contents

    Returns:
        Mapping of section name (without the ``%`` markers) to its values
    """
    sections: Dict[str, List[str]] = {}
    current = None
    for line in text.splitlines():
        if current is None:
            if len(line) > 2 and line.startswith("%") and line.endswith("%"):
                current = line[1:-1]
                sections[current] = []
            continue
        if not line:
            current = None
            continue
        sections[current].append(line)
    return sections


class AlpmDatabase(BaseDatabase):
    """Read-only view of an ALPM local database."""

    def __init__(self, root_path: Path, db_path: Path):
        """
        Open the database.

        Args:
            root_path: Root of the system whose packages are listed
            db_path: Database directory, e.g. ``/var/lib/pacman``

        Raises:
            DatabaseError: If a path is invalid or the database is unusable
        """
        self.root_path = Path(root_path)
        self.db_path = Path(db_path)
        self.local_path = self.db_path / LOCAL_DB_NAME
        self._closed = False

        _require_directory(self.root_path, "root path")
        _require_directory(self.db_path, "database path")
        logger.debug(
            f"Opened ALPM database at {self.db_path} for root {self.root_path}"
        )
        self._check_version()

    def _check_version(self) -> None:
        """Validate the schema version of the local database."""
        if not self.local_path.exists():
            logger.debug(f"No local database at {self.local_path}; treating as empty")
            return
        if not self.local_path.is_dir():
            raise DatabaseError(f"Local database {self.local_path} is not a directory")

        version_file = self.local_path / DB_VERSION_FILE
        try:
            raw_version = version_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            if self._entry_dirs():
                raise DatabaseError(
                    f"Local database {self.local_path} has no {DB_VERSION_FILE} file"
                ) from None
            return
        except OSError as e:
            raise DatabaseError(f"Failed to read {version_file}: {e}") from e

        try:
            version = int(raw_version)
        except ValueError:
            raise DatabaseError(
                f"Invalid database version in {version_file}: {raw_version!r}"
            ) from None
        if version != SUPPORTED_DB_VERSION:
            raise DatabaseError(
                f"Unsupported local database version {version} "
                f"(expected {SUPPORTED_DB_VERSION})"
            )

    def _entry_dirs(self) -> List[Path]:
        try:
            return [entry for entry in self.local_path.iterdir() if entry.is_dir()]
        except OSError as e:
            raise DatabaseError(f"Failed to list {self.local_path}: {e}") from e

    def _read_entry(self, entry: Path) -> PackageRecord:
        desc_path = entry / "desc"
        try:
            sections = parse_desc(desc_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseError(f"Failed to read {desc_path}: {e}") from e

        name = sections.get("NAME")
        version = sections.get("VERSION")
        if not name or not version:
            raise DatabaseError(
                f"Package entry {entry.name} is missing NAME or VERSION"
            )
        return PackageRecord(name=name[0], version=version[0])

    def packages(self) -> List[PackageRecord]:
        """
        List installed packages, sorted by package name.

        Raises:
            DatabaseError: If the database is closed or an entry is unreadable
        """
        if self._closed:
            raise DatabaseError(f"Database at {self.db_path} is closed")
        if not self.local_path.exists():
            return []

        records = [self._read_entry(entry) for entry in self._entry_dirs()]
        records.sort(key=lambda record: record.name)
        logger.debug(f"Found {len(records)} installed packages in {self.local_path}")
        return records

    def close(self) -> None:
        self._closed = True


def _require_directory(path: Path, label: str) -> None:
    if not path.exists():
        raise DatabaseError(f"The {label} {path} does not exist")
    if not path.is_dir():
        raise DatabaseError(f"The {label} {path} is not a directory")
    if not os.access(path, os.R_OK | os.X_OK):
        raise DatabaseError(f"The {label} {path} is not accessible")
