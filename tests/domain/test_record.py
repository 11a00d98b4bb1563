from __future__ import annotations

from populators.domain.record import (
    Phase,
    Record,
    any_field_changed,
    field_changed,
    field_is_not_null,
    field_is_null,
)


def test_field_is_null_for_missing_and_none() -> None:
    record = Record(fields={"Status": None, "Name": "Acme"})

    assert field_is_null(record, "Status")
    assert field_is_null(record, "Missing")
    assert not field_is_null(record, "Name")
    assert field_is_not_null(record, "Name")


def test_falsy_values_are_not_null() -> None:
    record = Record(fields={"Count": 0, "Label": "", "Flag": False})

    assert field_is_not_null(record, "Count")
    assert field_is_not_null(record, "Label")
    assert field_is_not_null(record, "Flag")


def test_field_changed_compares_new_against_prior() -> None:
    prior = Record(fields={"Status": "Open", "Owner": "ana"}, id="r-1")
    new = prior.copy()
    new["Status"] = "Closed"

    assert field_changed(new, prior, "Status")
    assert not field_changed(new, prior, "Owner")
    assert any_field_changed(new, prior, ["Owner", "Status"])
    assert not any_field_changed(new, prior, ["Owner"])


def test_field_changed_treats_added_field_as_change() -> None:
    prior = Record(fields={}, id="r-1")
    new = Record(fields={"Status": "Open"}, id="r-1")

    assert field_changed(new, prior, "Status")


def test_copy_is_independent_snapshot() -> None:
    record = Record(fields={"Status": "Open"}, id="r-1", record_type="Case")
    snapshot = record.copy()
    record.set("Status", "Closed")

    assert snapshot.get("Status") == "Open"
    assert snapshot.id == "r-1"
    assert snapshot.record_type == "Case"


def test_update_merges_fields() -> None:
    record = Record(fields={"A": 1, "B": 2})
    record.update({"B": 3, "C": 4})

    assert record.fields == {"A": 1, "B": 3, "C": 4}
    assert "C" in record
    assert record["C"] == 4


def test_phase_values() -> None:
    assert Phase("create") is Phase.CREATE
    assert Phase("update") is Phase.UPDATE
