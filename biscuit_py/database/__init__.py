"""
Package database package for Biscuit.

This module provides the base class for package databases and the
``open_database`` entry point used by the CLI.
"""

import abc
from pathlib import Path
from typing import List, Optional

from biscuit_py.snapshot import PackageRecord


class BaseDatabase(abc.ABC):
    """Base class for read-only package databases."""

    def __enter__(self) -> "BaseDatabase":
        return self

    def __exit__(self, *exc_info: object) -> Optional[bool]:
        self.close()
        return None

    @abc.abstractmethod
    def packages(self) -> List[PackageRecord]:
        """
        List the installed packages.

        Returns:
            One record per installed package

        Raises:
            DatabaseError: If the database cannot be read
        """
        pass

    def close(self) -> None:
        """Release any resources held by the database."""
        pass


def open_database(root_path: Path, db_path: Path) -> BaseDatabase:
    """
    Open the local package database for the system rooted at *root_path*.

    Raises:
        DatabaseError: If either path is invalid or does not hold a database
    """
    from biscuit_py.database.alpm import AlpmDatabase

    return AlpmDatabase(root_path=root_path, db_path=db_path)
