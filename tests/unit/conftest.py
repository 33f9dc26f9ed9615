"""
Shared fixtures for the unit tests.
"""

from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple

import pytest

PackageList = Iterable[Tuple[str, str]]


def write_local_db(
    db_path: Path, packages: PackageList, db_version: Optional[str] = "9"
) -> Path:
    """Create a pacman local database holding *packages* under *db_path*."""
    local = db_path / "local"
    local.mkdir(parents=True, exist_ok=True)
    if db_version is not None:
        (local / "ALPM_DB_VERSION").write_text(f"{db_version}\n")

    for name, version in packages:
        entry = local / f"{name}-{version}"
        entry.mkdir()
        (entry / "desc").write_text(
            f"%NAME%\n{name}\n\n"
            f"%VERSION%\n{version}\n\n"
            f"%BASE%\n{name}\n\n"
            "%DESC%\nA test package\n\n"
            "%ARCH%\nx86_64\n\n"
        )
        (entry / "files").write_text("%FILES%\nusr/\n\n")
    return db_path


@pytest.fixture
def alpm_db(tmp_path: Path) -> Callable[..., Path]:
    """Fixture returning a factory for fake ALPM databases in tmp_path."""

    def _factory(packages: PackageList = (), **kwargs: Optional[str]) -> Path:
        return write_local_db(tmp_path / "db", packages, **kwargs)

    return _factory
