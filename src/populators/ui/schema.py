"""Pydantic models describing JSON batch files accepted by the CLI."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from populators.domain.record import Phase, Record


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class RecordPayload(PayloadModel):
    id: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    _normalize_id = field_validator("id", mode="before")(_blank_to_none)

    def to_record(self, record_type: str | None = None) -> Record:
        return Record(fields=dict(self.fields), id=self.id, record_type=record_type)


class BatchPayload(PayloadModel):
    """A batch file: the records to populate and, for updates, their prior states."""

    record_type: str | None = Field(default=None, alias="recordType")
    phase: Phase | None = None
    records: list[RecordPayload]
    prior_records: list[RecordPayload] | None = Field(default=None, alias="priorRecords")

    @model_validator(mode="after")
    def _check_alignment(self) -> BatchPayload:
        if self.prior_records is not None and len(self.prior_records) != len(self.records):
            raise ValueError(
                f"priorRecords has {len(self.prior_records)} entries, "
                f"records has {len(self.records)}"
            )
        return self

    def to_records(self) -> tuple[list[Record], list[Record] | None]:
        new = [item.to_record(self.record_type) for item in self.records]
        if self.prior_records is None:
            return new, None
        return new, [item.to_record(self.record_type) for item in self.prior_records]


def dump_record(record: Record) -> dict[str, object]:
    return {"id": record.id, "fields": record.fields}
