"""
Tests for the snapshot model.
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from biscuit_py.snapshot import PackageRecord, Snapshot

text = st.text(alphabet=st.characters(blacklist_categories=("Cs",)))


def test_create() -> None:
    """create() sets the name, an empty record list, and the current time."""
    before = datetime.now(timezone.utc)
    snapshot = Snapshot.create("test1")
    after = datetime.now(timezone.utc)

    assert snapshot.name == "test1"
    assert snapshot.records == ()
    assert snapshot.created_at.tzinfo is not None
    assert before - timedelta(seconds=1) <= snapshot.created_at <= after


def test_package_record_is_immutable() -> None:
    record = PackageRecord(name="bash", version="5.2.15-1")
    with pytest.raises(AttributeError):
        record.name = "zsh"  # type: ignore[misc]


def test_records_view_cannot_mutate_snapshot() -> None:
    snapshot = Snapshot.create("s")
    snapshot.add_record("bash", "5.2.15-1")
    records = snapshot.records
    assert isinstance(records, tuple)
    snapshot.add_record("coreutils", "9.3-1")
    assert len(records) == 1
    assert len(snapshot.records) == 2


@given(st.lists(st.tuples(text, text)))
def test_add_record_preserves_order_and_fields(pairs: list) -> None:
    """Records come back in call order with fields untouched."""
    snapshot = Snapshot.create("prop")
    for name, version in pairs:
        snapshot.add_record(name, version)

    assert len(snapshot.records) == len(pairs)
    assert [(r.name, r.version) for r in snapshot.records] == pairs


def test_add_record_keeps_whitespace_and_case() -> None:
    snapshot = Snapshot.create("s")
    snapshot.add_record(" Bash ", "5.2.15-1 ")
    assert snapshot.records[0] == PackageRecord(name=" Bash ", version="5.2.15-1 ")


def test_to_dict() -> None:
    snapshot = Snapshot("test1", datetime(2023, 7, 1, 12, 0, 0, tzinfo=timezone.utc))
    snapshot.add_record("bash", "5.2.15-1")

    assert snapshot.to_dict() == {
        "name": "test1",
        "datetime": "2023-07-01T12:00:00+00:00",
        "package_infos": [{"name": "bash", "version": "5.2.15-1"}],
    }


def test_to_dict_converts_to_utc() -> None:
    tz = timezone(timedelta(hours=2))
    snapshot = Snapshot("s", datetime(2023, 7, 1, 14, 0, 0, tzinfo=tz))
    assert snapshot.to_dict()["datetime"] == "2023-07-01T12:00:00+00:00"


def test_from_dict() -> None:
    snapshot = Snapshot.from_dict(
        {
            "name": "test1",
            "datetime": "2023-07-01T12:00:00.123456Z",
            "package_infos": [
                {"name": "bash", "version": "5.2.15-1"},
                {"name": "coreutils", "version": "9.3-1"},
            ],
        }
    )
    assert snapshot.name == "test1"
    assert snapshot.created_at == datetime(
        2023, 7, 1, 12, 0, 0, 123456, tzinfo=timezone.utc
    )
    assert [r.name for r in snapshot.records] == ["bash", "coreutils"]


def test_from_dict_without_packages() -> None:
    snapshot = Snapshot.from_dict(
        {"name": "empty", "datetime": "2023-07-01T12:00:00+00:00"}
    )
    assert snapshot.records == ()


@pytest.mark.parametrize(
    "data",
    [
        "not a dict",
        {"datetime": "2023-07-01T12:00:00+00:00"},
        {"name": "s"},
        {"name": "s", "datetime": "yesterday"},
        {"name": "s", "datetime": "2023-07-01T12:00:00"},
        {"name": "s", "datetime": "2023-07-01T12:00:00Z", "package_infos": ["x"]},
        {
            "name": "s",
            "datetime": "2023-07-01T12:00:00Z",
            "package_infos": [{"name": "bash"}],
        },
        {"name": 5, "datetime": "2023-07-01T12:00:00Z"},
        {"name": "s", "datetime": "2023-07-01T12:00:00Z", "package_infos": 5},
        {
            "name": "s",
            "datetime": "2023-07-01T12:00:00Z",
            "package_infos": [{"name": "bash", "version": 5}],
        },
    ],
)
def test_from_dict_invalid(data: object) -> None:
    with pytest.raises(ValueError):
        Snapshot.from_dict(data)  # type: ignore[arg-type]
