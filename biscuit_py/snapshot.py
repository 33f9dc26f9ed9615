"""
Snapshot model for Biscuit.

A snapshot is a named, timestamped, append-only list of installed packages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class PackageRecord:
    """A single installed package."""

    name: str
    version: str


@dataclass
class Snapshot:
    """Represents an inventory of installed packages captured at one instant."""

    name: str
    created_at: datetime
    _records: List[PackageRecord] = field(
        default_factory=list, init=False, repr=False
    )

    @classmethod
    def create(cls, name: str) -> "Snapshot":
        """Create an empty snapshot stamped with the current UTC time."""
        return cls(name=name, created_at=datetime.now(timezone.utc))

    @property
    def records(self) -> Tuple[PackageRecord, ...]:
        """Records in the order they were added."""
        return tuple(self._records)

    def add_record(self, name: str, version: str) -> None:
        """Append a package to the snapshot."""
        self._records.append(PackageRecord(name=name, version=version))

    def to_dict(self) -> Dict[str, Any]:
        """
        Build the document written to a snapshot file.

        The timestamp is rendered as an RFC 3339 string with an explicit
        UTC offset.
        """
        return {
            "name": self.name,
            "datetime": self.created_at.astimezone(timezone.utc).isoformat(),
            "package_infos": [
                {"name": record.name, "version": record.version}
                for record in self._records
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Construct a ``Snapshot`` from a parsed snapshot document.

        Args:
            data: Mapping with ``name``, ``datetime`` and ``package_infos`` keys

        Returns:
            Snapshot instance

        Raises:
            ValueError: If a required key is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot document must be a table")

        try:
            name = data["name"]
            raw_datetime = data["datetime"]
        except KeyError as e:
            raise ValueError(f"Snapshot document is missing key {e}") from e

        if not isinstance(name, str):
            raise ValueError(f"Snapshot name must be a string, not {name!r}")
        if isinstance(raw_datetime, datetime):
            created_at = raw_datetime
        else:
            created_at = _parse_datetime(str(raw_datetime))
        if created_at.tzinfo is None:
            raise ValueError(f"Snapshot datetime has no UTC offset: {raw_datetime}")

        package_infos = data.get("package_infos", [])
        if not isinstance(package_infos, list):
            raise ValueError(f"package_infos must be an array, not {package_infos!r}")

        snapshot = cls(name=name, created_at=created_at.astimezone(timezone.utc))
        for entry in package_infos:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ValueError(f"Invalid package_infos entry: {entry}")
            if "version" not in entry:
                raise ValueError(f"Package {entry['name']} has no version")
            pkg_name, version = entry["name"], entry["version"]
            if not isinstance(pkg_name, str) or not isinstance(version, str):
                raise ValueError(f"Package name and version must be strings: {entry}")
            snapshot.add_record(pkg_name, version)
        return snapshot


def _parse_datetime(value: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid snapshot datetime: {value}") from e
