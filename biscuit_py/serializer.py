"""
TOML serialization of snapshots.

Snapshot files are only ever created, never overwritten: the target is
opened in exclusive-create mode so an existing snapshot is left untouched.
"""

import logging
import tomllib
from pathlib import Path

import tomli_w

from biscuit_py.errors import BiscuitError, WriteError
from biscuit_py.snapshot import Snapshot

logger = logging.getLogger("biscuit.serializer")


def dumps(snapshot: Snapshot) -> str:
    """Render a snapshot as a TOML document."""
    return tomli_w.dumps(snapshot.to_dict())


def save(snapshot: Snapshot, path: Path) -> None:
    """
    Write a snapshot to a new file.

    Args:
        snapshot: The snapshot to write
        path: Target file, which must not exist yet

    Raises:
        WriteError: If the file already exists, the snapshot cannot be
            serialized, or the write fails
    """
    try:
        payload = dumps(snapshot).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise WriteError(
            f"Failed to serialize snapshot {snapshot.name!r}: {e}"
        ) from e

    logger.debug(f"Writing {len(snapshot.records)} packages to {path}")
    try:
        with open(path, "xb") as f:
            f.write(payload)
    except FileExistsError as e:
        raise WriteError(f"Refusing to overwrite existing file {path}") from e
    except OSError as e:
        raise WriteError(f"Failed to write {path}: {e}") from e

    logger.info(f"Saved snapshot {snapshot.name} to {path}")


def load(path: Path) -> Snapshot:
    """
    Read a snapshot file back into a ``Snapshot``.

    Raises:
        BiscuitError: If the file cannot be read or is not a valid snapshot
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return Snapshot.from_dict(data)
    except OSError as e:
        raise BiscuitError(f"Failed to read {path}: {e}") from e
    except (tomllib.TOMLDecodeError, ValueError) as e:
        raise BiscuitError(f"Invalid snapshot file {path}: {e}") from e
